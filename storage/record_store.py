"""
storage/record_store.py

Generic persistence primitive: a string key maps to an ordered list of
JSON-serialisable records.

Every domain store (users, threads, tickets) delegates here and receives the
RecordStore at construction; nothing reaches a module-level singleton.

Semantics
---------
read(key)          — missing, unparsable or non-array values all read as ``[]``.
write(key, recs)   — full replacement of whatever was stored under *key*.
mutate(key, fn)    — one read-modify-write cycle, serialised per key.
"""

from __future__ import annotations

import json
import logging
import threading
from collections import defaultdict
from typing import Any, Callable, TypeVar

from storage.backends import KeyValueBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")


def thread_key(prefix: str, subject_id: str) -> str:
    return f"{prefix}{subject_id}"


class RecordStore:
    def __init__(self, backend: KeyValueBackend):
        self.backend = backend
        # one lock per key ever touched, kept for the life of the store; the map
        # is bounded by the number of keys in the backend (users, tickets and
        # one message and one issue thread per patient)
        self._locks: defaultdict[str, threading.RLock] = defaultdict(threading.RLock)
        self._locks_guard = threading.Lock()

    def _lock_for(self, key: str) -> threading.RLock:
        with self._locks_guard:
            return self._locks[key]

    def read(self, key: str) -> list[dict[str, Any]]:
        raw = self.backend.get(key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Key %r holds unparsable JSON; reading as empty", key)
            return []
        if not isinstance(data, list):
            logger.warning("Key %r does not hold a JSON array; reading as empty", key)
            return []
        return data

    def write(self, key: str, records: list[dict[str, Any]]) -> None:
        with self._lock_for(key):
            self.backend.set(key, json.dumps(records, ensure_ascii=False, default=str))

    def mutate(self, key: str, fn: Callable[[list[dict[str, Any]]], T]) -> T:
        """
        Load *key*, hand the list to *fn* for in-place mutation, then persist it.

        The cycle holds the key's lock, so two writers sharing this store cannot
        interleave and lose each other's update.  Returns whatever *fn* returns.
        """
        with self._lock_for(key):
            records = self.read(key)
            result = fn(records)
            self.write(key, records)
        return result
