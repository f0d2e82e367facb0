"""
storage/users.py

UserDirectory — the single collection of portal identities.

Identity and uniqueness rules
-----------------------------
- ``id`` is minted once (``u_`` + 128 random bits) and never changes.
- ``username`` is deduplicated ONLY by :meth:`UserDirectory.upsert_by_username`.
  :meth:`UserDirectory.update` replaces by id without checking usernames, so an
  administrative correction can (knowingly) produce a duplicate.
- ``role`` is fixed at creation; an upsert carrying another role keeps the
  stored one.

Lookups never raise: a miss is ``None`` (or an empty list).
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from storage import keys
from storage.ids import generate_id
from storage.models import User, decode_records, dump_record
from storage.record_store import RecordStore

logger = logging.getLogger(__name__)


class UserDirectory:
    def __init__(self, records: RecordStore):
        self.records = records

    @staticmethod
    def generate_id() -> str:
        return generate_id(keys.USER_ID_PREFIX)

    def _store(self, raw: list[dict[str, Any]], users: list[User]) -> None:
        raw[:] = [dump_record(u) for u in users]

    # -------------------------
    # Queries
    # -------------------------
    def list(self) -> list[User]:
        return decode_records(self.records.read(keys.USERS), User)

    def find_by_id(self, user_id: str) -> Optional[User]:
        for u in self.list():
            if u.id == user_id:
                return u
        return None

    def find_by_field(self, field: str, value: Any) -> Optional[User]:
        """First user whose *field* equals *value* exactly (Python or persisted name)."""
        attr = User.field_name(field)
        for u in self.list():
            if getattr(u, attr, None) == value:
                return u
        return None

    def find_by_role(self, role: str) -> list[User]:
        return [u for u in self.list() if u.role == role]

    def authenticate(self, role: str, username: str, password: str) -> Optional[User]:
        for u in self.find_by_role(role):
            if u.username == username and u.password == password:
                return u
        logger.debug("authenticate: no %s matches username %r", role, username)
        return None

    # -------------------------
    # Writes
    # -------------------------
    def upsert_by_username(self, data: dict[str, Any]) -> User:
        """
        Merge *data* into the user with the same username, or create a new user.

        On merge, ``id`` and every field absent from *data* are preserved.
        On create, a fresh id is minted.  This is the only write path that
        keeps usernames unique.
        """
        changes = {User.field_name(k): v for k, v in data.items()}
        changes.pop("id", None)
        username = changes.get("username")

        def _apply(raw: list[dict[str, Any]]) -> User:
            users = decode_records(raw, User)
            for i, existing in enumerate(users):
                if existing.username != username:
                    continue
                if "role" in changes and changes["role"] != existing.role:
                    logger.warning(
                        "Ignoring role change %s -> %s for user %s; role is fixed at creation",
                        existing.role, changes["role"], existing.id,
                    )
                    changes.pop("role")
                merged = User.model_validate({**existing.model_dump(), **changes})
                users[i] = merged
                self._store(raw, users)
                logger.info("Updated user id=%s username=%s", merged.id, merged.username)
                return merged

            created = User.model_validate({**changes, "id": self.generate_id()})
            users.append(created)
            self._store(raw, users)
            logger.info("Created user id=%s role=%s", created.id, created.role)
            return created

        return self.records.mutate(keys.USERS, _apply)

    def update(self, user: User) -> None:
        """Replace the user with ``user.id``.  Silent no-op when no id matches."""

        def _apply(raw: list[dict[str, Any]]) -> bool:
            users = decode_records(raw, User)
            replaced = False
            for i, existing in enumerate(users):
                if existing.id != user.id:
                    continue
                if user.role != existing.role:
                    logger.warning(
                        "Ignoring role change %s -> %s for user %s; role is fixed at creation",
                        existing.role, user.role, existing.id,
                    )
                    users[i] = user.model_copy(update={"role": existing.role})
                else:
                    users[i] = user
                replaced = True
            self._store(raw, users)
            return replaced

        if self.records.mutate(keys.USERS, _apply):
            logger.info("Updated user id=%s", user.id)
        else:
            logger.debug("update: no user with id=%s", user.id)

    def delete(self, user_id: str) -> None:
        """Remove the user.  Threads and tickets referencing the id are left alone."""

        def _apply(raw: list[dict[str, Any]]) -> int:
            users = decode_records(raw, User)
            kept = [u for u in users if u.id != user_id]
            self._store(raw, kept)
            return len(users) - len(kept)

        if self.records.mutate(keys.USERS, _apply):
            logger.info("Deleted user id=%s", user_id)
        else:
            logger.debug("delete: no user with id=%s", user_id)

    def save_all(self, users: list[User]) -> None:
        self.records.write(keys.USERS, [dump_record(u) for u in users])
