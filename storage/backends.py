"""
storage/backends.py

Key-value substrates for the portal's record store.

A backend maps an opaque string key to an opaque string value, nothing more.
It knows nothing about records, JSON arrays or domain types; those live in
:mod:`storage.record_store`.

Backends
--------
MemoryBackend    — plain dict, used by tests and throwaway sessions.
JsonFileBackend  — a single JSON document on disk (``{"key": "value", ...}``),
                   rewritten atomically on every change.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class KeyValueBackend(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------


class MemoryBackend:
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


# ---------------------------------------------------------------------------
# JSON file on disk
# ---------------------------------------------------------------------------


def _atomic_write_json(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
    tmp.replace(path)


class JsonFileBackend:
    """
    Persist every key as a string entry of one JSON object on disk.

    Values are stored verbatim (already-serialised JSON text), so a single
    corrupted value only affects its own key.  If the file itself cannot be
    parsed it is treated as an empty key space and replaced on the next write.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable store file %s (%s); starting empty", self.path, exc)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Store file %s is not a JSON object; starting empty", self.path)
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            _atomic_write_json(self.path, data)
