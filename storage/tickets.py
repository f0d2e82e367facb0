"""
storage/tickets.py

TicketQueue — the administrator's global queue of caregiver messages.

Ticket lifecycle
----------------
open --toggle_resolved--> resolved --toggle_resolved--> open
any state --delete--> (gone)

Deleting or resolving a ticket never touches the message that produced it.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from storage import keys
from storage.events import CaregiverMessageSent
from storage.ids import generate_id
from storage.models import Ticket, decode_records, dump_record, utc_now
from storage.record_store import RecordStore

logger = logging.getLogger(__name__)

_CALLER_FIELDS = ("fromCaregiverId", "fromCaregiverName", "patientId", "patientName", "text")


class TicketQueue:
    def __init__(self, records: RecordStore):
        self.records = records

    def list(self) -> list[Ticket]:
        return decode_records(self.records.read(keys.ADMIN_TICKETS), Ticket)

    def render_order(self) -> list[Ticket]:
        return list(reversed(self.list()))

    def find_by_id(self, ticket_id: str) -> Optional[Ticket]:
        for t in self.list():
            if t.id == ticket_id:
                return t
        return None

    def add(self, data: dict[str, Any]) -> Ticket:
        """
        Enqueue a new open ticket.

        Only the caller fields (sender/patient identity and text) are taken from
        *data*, by persisted or Python name; ``id``, ``timestamp`` and
        ``resolved`` are always synthesised here.
        """
        fields = {}
        for name in _CALLER_FIELDS:
            attr = Ticket.field_name(name)
            if name in data:
                fields[attr] = data[name]
            elif attr in data:
                fields[attr] = data[attr]
        ticket = Ticket(
            **fields,
            id=generate_id(keys.TICKET_ID_PREFIX),
            timestamp=utc_now(),
            resolved=False,
        )

        def _apply(raw: list[dict[str, Any]]) -> None:
            tickets = decode_records(raw, Ticket)
            tickets.append(ticket)
            raw[:] = [dump_record(t) for t in tickets]

        self.records.mutate(keys.ADMIN_TICKETS, _apply)
        logger.info("Created ticket id=%s for patient_id=%s", ticket.id, ticket.patient_id)
        return ticket

    def toggle_resolved(self, ticket_id: str) -> None:
        def _apply(raw: list[dict[str, Any]]) -> Optional[bool]:
            tickets = decode_records(raw, Ticket)
            state = None
            for i, t in enumerate(tickets):
                if t.id == ticket_id:
                    tickets[i] = t.model_copy(update={"resolved": not t.resolved})
                    state = tickets[i].resolved
                    break
            raw[:] = [dump_record(t) for t in tickets]
            return state

        state = self.records.mutate(keys.ADMIN_TICKETS, _apply)
        if state is None:
            logger.debug("toggle_resolved: no ticket with id=%s", ticket_id)
        else:
            logger.info("Ticket id=%s is now %s", ticket_id, "resolved" if state else "open")

    def delete(self, ticket_id: str) -> None:
        def _apply(raw: list[dict[str, Any]]) -> int:
            tickets = decode_records(raw, Ticket)
            kept = [t for t in tickets if t.id != ticket_id]
            raw[:] = [dump_record(t) for t in kept]
            return len(tickets) - len(kept)

        if self.records.mutate(keys.ADMIN_TICKETS, _apply):
            logger.info("Deleted ticket id=%s", ticket_id)
        else:
            logger.debug("delete: no ticket with id=%s", ticket_id)

    # -------------------------
    # Event handlers
    # -------------------------
    def on_caregiver_message_sent(self, event: CaregiverMessageSent) -> None:
        self.add(
            {
                "fromCaregiverId": event.caregiver_id,
                "fromCaregiverName": event.caregiver_name,
                "patientId": event.patient_id,
                "patientName": event.patient_name,
                "text": event.text,
            }
        )
