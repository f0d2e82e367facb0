"""
portal/auth.py

Login, logout and page gating for the three portals.

Session keys live in a mutable mapping supplied by the caller (Streamlit's
``st.session_state`` in the app, a plain dict in tests):

    mh_current_user     id of the signed-in caregiver or patient
    mh_current_patient  patient currently being viewed
    mh_admin_logged     "1" once the administrator has signed in

Credentials are compared in the clear; hashing is out of scope for this
local demo portal.
"""

from __future__ import annotations

import logging
from typing import Any, MutableMapping, Optional

from storage.models import User
from storage.users import UserDirectory

logger = logging.getLogger(__name__)

CURRENT_USER_KEY = "mh_current_user"
CURRENT_PATIENT_KEY = "mh_current_patient"
ADMIN_LOGGED_KEY = "mh_admin_logged"

PUBLIC_PAGES = frozenset({"home", "admin-login", "caregiver-login", "patient-login", "not-found"})


class PortalSession:
    def __init__(self, users: UserDirectory, state: MutableMapping[str, Any]):
        self.users = users
        self.state = state

    def login(self, role: str, username: str, password: str) -> Optional[User]:
        """
        Check credentials for *role* and record the sign-in.  Returns the user,
        or ``None`` for invalid credentials (the caller shows the error).
        """
        user = self.users.authenticate(role, username.strip(), password.strip())
        if user is None:
            logger.info("Failed %s login for username %r", role, username)
            return None

        if role == "admin":
            self.state[ADMIN_LOGGED_KEY] = "1"
        else:
            self.state[CURRENT_USER_KEY] = user.id
            if role == "patient":
                self.state[CURRENT_PATIENT_KEY] = user.id
        logger.info("Signed in %s id=%s", role, user.id)
        return user

    def logout(self) -> None:
        for key in (CURRENT_USER_KEY, CURRENT_PATIENT_KEY, ADMIN_LOGGED_KEY):
            self.state.pop(key, None)

    @property
    def admin_logged_in(self) -> bool:
        return self.state.get(ADMIN_LOGGED_KEY) == "1"

    def current_user(self) -> Optional[User]:
        user_id = self.state.get(CURRENT_USER_KEY)
        return self.users.find_by_id(user_id) if user_id else None

    def current_patient_id(self) -> Optional[str]:
        return self.state.get(CURRENT_PATIENT_KEY) or None

    def select_patient(self, patient_id: str) -> Optional[User]:
        """Make *patient_id* the patient in view, if it names a patient."""
        patient = self.users.find_by_id(patient_id)
        if patient is None or not patient.is_patient:
            return None
        self.state[CURRENT_PATIENT_KEY] = patient.id
        return patient

    def default_patient(self) -> Optional[User]:
        """The last viewed patient if it still exists, else the first patient on file."""
        last = self.current_patient_id()
        if last:
            patient = self.users.find_by_id(last)
            if patient is not None and patient.is_patient:
                return patient
        patients = self.users.find_by_role("patient")
        return patients[0] if patients else None

    def can_access(self, page: str) -> bool:
        if page in PUBLIC_PAGES:
            return True
        if page == "admin":
            return self.admin_logged_in
        if page in ("caregiver", "patient"):
            user = self.current_user()
            return user is not None and user.role == page
        return False
