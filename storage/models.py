"""
storage/models.py

Pydantic v2 record models for the portal's persisted collections.

Attributes are snake_case in Python; the persisted JSON uses the camelCase
aliases (``fullName``, ``fromCaregiverId`` ...), which is the on-disk layout
every collection has always had.  Use :func:`dump_record` to serialise and
:func:`decode_records` to load, so malformed records are rejected at the
boundary instead of leaking into domain logic.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

Role = Literal["admin", "caregiver", "patient"]
Sender = Literal["caregiver", "patient"]

PATIENT_FIELDS = ("mrn", "dob", "blood", "allergies", "meds")


def utc_now() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(tz=timezone.utc).isoformat()


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @classmethod
    def field_name(cls, name: str) -> str:
        """Map a persisted (camelCase) name or a Python name to the Python name."""
        if name in cls.model_fields:
            return name
        for attr, info in cls.model_fields.items():
            if info.alias == name:
                return attr
        return name


# ---------------------------------------------------------------------------
# Domain records
# ---------------------------------------------------------------------------


class User(_Record):
    """A directory entry.  Patient-only fields stay ``None`` for other roles."""

    id: str
    role: Role
    full_name: str = Field(default="", alias="fullName")
    username: str
    password: str = ""

    mrn: Optional[str] = None
    dob: Optional[str] = None
    blood: Optional[str] = None
    allergies: Optional[str] = None
    meds: Optional[list[str]] = None

    @property
    def is_patient(self) -> bool:
        return self.role == "patient"


class Message(_Record):
    sender: Sender
    text: str
    timestamp: str = Field(default_factory=utc_now)


class Issue(_Record):
    reporter: str
    text: str
    timestamp: str = Field(default_factory=utc_now)


class Ticket(_Record):
    id: str
    from_caregiver_id: Optional[str] = Field(default=None, alias="fromCaregiverId")
    from_caregiver_name: str = Field(default="Caregiver", alias="fromCaregiverName")
    patient_id: Optional[str] = Field(default=None, alias="patientId")
    patient_name: str = Field(default="", alias="patientName")
    text: str
    timestamp: str = Field(default_factory=utc_now)
    resolved: bool = False

    @property
    def status(self) -> str:
        return "resolved" if self.resolved else "open"


# ---------------------------------------------------------------------------
# Encode / decode
# ---------------------------------------------------------------------------

R = TypeVar("R", bound=_Record)


def dump_record(record: _Record) -> dict[str, Any]:
    """Serialise *record* to its persisted JSON shape (camelCase, no unset patient fields)."""
    return record.model_dump(mode="json", by_alias=True, exclude_none=True)


def decode_records(raw: Iterable[Any], model: type[R]) -> list[R]:
    """
    Validate each raw dict against *model*; invalid entries are logged and dropped.
    """
    out: list[R] = []
    for i, item in enumerate(raw):
        try:
            out.append(model.model_validate(item))
        except ValidationError as exc:
            logger.warning(
                "Dropping malformed %s record at position %d: %s",
                model.__name__, i, exc.errors(include_url=False),
            )
    return out
