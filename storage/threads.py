"""
storage/threads.py

Per-subject append-only logs.

Each subject (always a patient id) owns one thread stored under
``<prefix><subject id>``, so any number of threads can be addressed without
a secondary index.  Records are only ever appended; there is no edit or
per-record delete.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from storage import keys
from storage.models import Issue, Message, decode_records, dump_record
from storage.record_store import RecordStore, thread_key

logger = logging.getLogger(__name__)

E = TypeVar("E", Message, Issue)


class _ThreadStore(Generic[E]):
    prefix: str
    model: type[E]

    def __init__(self, records: RecordStore):
        self.records = records

    def key(self, subject_id: str) -> str:
        return thread_key(self.prefix, subject_id)

    def list(self, subject_id: str) -> list[E]:
        """Thread entries in append (chronological) order."""
        return decode_records(self.records.read(self.key(subject_id)), self.model)

    def render_order(self, subject_id: str) -> list[E]:
        """Most recent first.  A derived view; the persisted order is untouched."""
        return list(reversed(self.list(subject_id)))

    def _append(self, subject_id: str, entry: E) -> E:
        def _apply(raw: list[dict[str, Any]]) -> None:
            entries = decode_records(raw, self.model)
            entries.append(entry)
            raw[:] = [dump_record(e) for e in entries]

        self.records.mutate(self.key(subject_id), _apply)
        logger.debug("Appended %s to thread %s", self.model.__name__, self.key(subject_id))
        return entry


class MessageThreadStore(_ThreadStore[Message]):
    """Caregiver/patient conversation, one thread per patient."""

    prefix = keys.MESSAGES_PREFIX
    model = Message

    def add(self, subject_id: str, sender: str, text: str) -> Message:
        return self._append(subject_id, Message(sender=sender, text=text))


class IssueThreadStore(_ThreadStore[Issue]):
    """Reported problems, one thread per patient.  ``reporter`` is a free-form label."""

    prefix = keys.ISSUES_PREFIX
    model = Issue

    def add(self, subject_id: str, reporter: str, text: str) -> Issue:
        return self._append(subject_id, Issue(reporter=reporter, text=text))
