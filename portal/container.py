"""
portal/container.py

Composition root: one backend, one RecordStore, the four domain stores and
the event wiring between them.  Pages receive a :class:`Portal` and never
build stores themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from portal.config import PortalSettings, get_settings
from portal.messaging import PortalActions
from portal.seed import seed_demo_data
from storage.backends import JsonFileBackend, KeyValueBackend
from storage.events import CaregiverMessageSent, EventBus
from storage.record_store import RecordStore
from storage.threads import IssueThreadStore, MessageThreadStore
from storage.tickets import TicketQueue
from storage.users import UserDirectory

logger = logging.getLogger(__name__)


@dataclass
class Portal:
    records: RecordStore
    users: UserDirectory
    messages: MessageThreadStore
    issues: IssueThreadStore
    tickets: TicketQueue
    events: EventBus
    actions: PortalActions


def build_portal(backend: KeyValueBackend, seed_demo: bool = False) -> Portal:
    records = RecordStore(backend)
    users = UserDirectory(records)
    messages = MessageThreadStore(records)
    issues = IssueThreadStore(records)
    tickets = TicketQueue(records)

    events = EventBus()
    events.subscribe(CaregiverMessageSent, tickets.on_caregiver_message_sent)

    if seed_demo:
        seed_demo_data(users)

    return Portal(
        records=records,
        users=users,
        messages=messages,
        issues=issues,
        tickets=tickets,
        events=events,
        actions=PortalActions(users, messages, issues, events),
    )


_PORTAL_SINGLETON: Optional[Portal] = None


def get_portal(settings: Optional[PortalSettings] = None) -> Portal:
    global _PORTAL_SINGLETON
    if _PORTAL_SINGLETON is None:
        settings = settings or get_settings()
        logger.info("Opening portal store at %s", settings.db_path)
        _PORTAL_SINGLETON = build_portal(JsonFileBackend(settings.db_path), seed_demo=settings.seed_demo)
    return _PORTAL_SINGLETON
