"""
portal/seed.py

Demo accounts written into an empty directory so every portal can be tried
straight away.  Never touches a directory that already holds users.
"""

from __future__ import annotations

import logging

from storage.models import User
from storage.users import UserDirectory

logger = logging.getLogger(__name__)


def demo_users(directory: UserDirectory) -> list[User]:
    return [
        User(
            id=directory.generate_id(),
            role="admin",
            full_name="Site Admin",
            username="admin",
            password="admin123",
        ),
        User(
            id=directory.generate_id(),
            role="caregiver",
            full_name="Caregiver One",
            username="caregiver",
            password="password123",
        ),
        User(
            id=directory.generate_id(),
            role="patient",
            full_name="Patrick Tobe",
            username="ptobe",
            password="patient123",
            mrn="00298371",
            dob="2005-07-22",
            blood="O+",
            allergies="Penicillin",
            meds=[
                "Loratadine 10 mg — Take 1 tablet daily · 30 tabs · 2 refills",
                "Metformin 500 mg — Take 1 tablet twice daily",
            ],
        ),
    ]


def seed_demo_data(directory: UserDirectory) -> bool:
    """Write the demo accounts if the directory is empty.  Returns True if it seeded."""
    if directory.list():
        return False
    directory.save_all(demo_users(directory))
    logger.info("Seeded demo users (admin, caregiver, patient)")
    return True
