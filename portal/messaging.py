"""
portal/messaging.py

The write flows the pages trigger: chat sends, issue reports, chart saves
and the administrator's user form.

Caregiver sends are the one place two collections change together: the
message is appended to the patient's thread and a ``CaregiverMessageSent``
event is published, which the wired ticket queue turns into exactly one
ticket before :meth:`PortalActions.send_caregiver_message` returns.
"""

from __future__ import annotations

import logging
from typing import Optional

from portal.medications import parse_medication_lines
from storage.events import CaregiverMessageSent, EventBus
from storage.models import PATIENT_FIELDS, Issue, Message, User
from storage.threads import IssueThreadStore, MessageThreadStore
from storage.users import UserDirectory

logger = logging.getLogger(__name__)


class PortalActions:
    def __init__(
        self,
        users: UserDirectory,
        messages: MessageThreadStore,
        issues: IssueThreadStore,
        events: EventBus,
    ):
        self.users = users
        self.messages = messages
        self.issues = issues
        self.events = events

    # -------------------------
    # Chat
    # -------------------------
    def send_caregiver_message(
        self, caregiver_id: Optional[str], patient_id: str, text: str
    ) -> Optional[Message]:
        """
        Append a caregiver message and raise its ticket.  Blank text is ignored.

        The ticket carries the ids exactly as sent; the directory is only
        consulted for display names.  The two writes are not atomic: if the
        ticket cannot be raised, the message stays in the thread and the
        failure is logged and re-raised.
        """
        text = text.strip()
        if not text:
            return None

        message = self.messages.add(patient_id, "caregiver", text)

        caregiver = self.users.find_by_id(caregiver_id) if caregiver_id else None
        patient = self.users.find_by_id(patient_id)
        event = CaregiverMessageSent(
            caregiver_id=caregiver_id,
            caregiver_name=(caregiver.full_name if caregiver else "") or "Caregiver",
            patient_id=patient_id,
            patient_name=(patient.full_name if patient else "") or "",
            text=text,
        )
        try:
            self.events.publish(event)
        except Exception:
            logger.error(
                "Caregiver message to patient_id=%s was saved but its ticket was not raised",
                patient_id,
            )
            raise
        return message

    def send_patient_message(self, patient_id: str, text: str) -> Optional[Message]:
        text = text.strip()
        if not text:
            return None
        return self.messages.add(patient_id, "patient", text)

    # -------------------------
    # Issues
    # -------------------------
    def report_issue(self, patient_id: str, text: str, reporter: str = "caregiver") -> Optional[Issue]:
        text = text.strip()
        if not text:
            return None
        return self.issues.add(patient_id, reporter, text)

    # -------------------------
    # Patient chart
    # -------------------------
    def save_patient_chart(
        self,
        patient_id: str,
        full_name: str,
        mrn: str = "",
        dob: str = "",
        blood: str = "",
        allergies: str = "",
        meds_text: str = "",
    ) -> Optional[User]:
        """Overwrite the chart fields of an existing patient via the update path."""
        patient = self.users.find_by_id(patient_id)
        if patient is None:
            return None
        updated = patient.model_copy(
            update={
                "full_name": full_name.strip(),
                "mrn": mrn.strip(),
                "dob": dob.strip(),
                "blood": blood.strip(),
                "allergies": allergies.strip(),
                "meds": parse_medication_lines(meds_text),
            }
        )
        self.users.update(updated)
        return updated

    # -------------------------
    # Admin user form
    # -------------------------
    def save_user_from_form(self, role: str, full_name: str, username: str, password: str) -> User:
        """
        Create or update a user from the administrator's form.

        Raises:
            ValueError: If full name, username or password is blank.
        """
        full_name, username, password = full_name.strip(), username.strip(), password.strip()
        if not full_name or not username:
            raise ValueError("Please provide full name and username.")
        if not password:
            raise ValueError("Please provide a password.")

        data: dict = {"role": role, "fullName": full_name, "username": username, "password": password}
        if role == "patient":
            data.update({f: "" for f in PATIENT_FIELDS if f != "meds"})
            data["meds"] = []
        return self.users.upsert_by_username(data)
