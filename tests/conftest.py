"""Shared fixtures: an in-memory substrate and the stores built on it."""

import pytest

from portal.container import build_portal
from storage.backends import MemoryBackend
from storage.record_store import RecordStore
from storage.threads import IssueThreadStore, MessageThreadStore
from storage.tickets import TicketQueue
from storage.users import UserDirectory


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def records(backend):
    return RecordStore(backend)


@pytest.fixture
def users(records):
    return UserDirectory(records)


@pytest.fixture
def messages(records):
    return MessageThreadStore(records)


@pytest.fixture
def issues(records):
    return IssueThreadStore(records)


@pytest.fixture
def tickets(records):
    return TicketQueue(records)


@pytest.fixture
def portal(backend):
    """Fully wired portal over the shared in-memory backend, without demo data."""
    return build_portal(backend)


@pytest.fixture
def seeded_portal(backend):
    return build_portal(backend, seed_demo=True)
