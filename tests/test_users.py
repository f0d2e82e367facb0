"""Tests for UserDirectory."""

import json

import pytest
from pydantic import ValidationError

from storage import keys
from storage.models import User


def _patient(**extra):
    return {"role": "patient", "username": "ptobe", "fullName": "Patrick Tobe", "password": "pw", **extra}


class TestGenerateId:
    def test_ids_are_prefixed_and_unique(self, users):
        """Test user ids carry the u_ prefix and do not repeat."""
        ids = {users.generate_id() for _ in range(500)}
        assert len(ids) == 500
        assert all(i.startswith("u_") for i in ids)

    def test_suffix_is_base36(self, users):
        """Test the id suffix uses only lowercase base-36 digits."""
        suffix = users.generate_id()[2:]
        assert suffix and all(c in "0123456789abcdefghijklmnopqrstuvwxyz" for c in suffix)


class TestUpsertByUsername:
    """Tests for the create-or-merge path."""

    def test_creates_new_user(self, users):
        """Test an unknown username creates a record with a fresh id."""
        u = users.upsert_by_username(_patient())
        assert u.id.startswith("u_")
        assert [x.id for x in users.list()] == [u.id]

    def test_merge_preserves_id_and_absent_fields(self, users):
        """Test a second upsert merges new fields and keeps the rest."""
        first = users.upsert_by_username(_patient())
        second = users.upsert_by_username({"username": "ptobe", "mrn": "00298371"})

        assert second.id == first.id
        assert second.mrn == "00298371"
        assert second.full_name == "Patrick Tobe"
        assert len(users.list()) == 1

    def test_idempotent_for_identical_data(self, users):
        """Test upserting the same data twice leaves one record, same id."""
        a = users.upsert_by_username(_patient())
        b = users.upsert_by_username(_patient())
        assert a.id == b.id
        assert [u.username for u in users.list()] == ["ptobe"]

    def test_usernames_stay_unique(self, users):
        """Test any sequence of upserts never duplicates a username."""
        for name in ["a", "b", "a", "c", "b", "a"]:
            users.upsert_by_username({"role": "caregiver", "username": name, "fullName": name.upper()})
        names = [u.username for u in users.list()]
        assert sorted(names) == ["a", "b", "c"]

    def test_caller_id_is_ignored(self, users):
        """Test an id in the payload never overrides the minted one."""
        u = users.upsert_by_username({**_patient(), "id": "u_forced"})
        assert u.id != "u_forced"

    def test_role_is_fixed_after_creation(self, users):
        """Test merging a different role keeps the original role."""
        u = users.upsert_by_username(_patient())
        merged = users.upsert_by_username({"username": "ptobe", "role": "admin"})
        assert merged.id == u.id
        assert merged.role == "patient"

    def test_accepts_python_field_names(self, users):
        """Test snake_case field names are accepted alongside persisted names."""
        u = users.upsert_by_username({"role": "caregiver", "username": "cg", "full_name": "Care Giver"})
        assert u.full_name == "Care Giver"

    def test_invalid_role_rejected(self, users):
        """Test a role outside the closed set is rejected."""
        with pytest.raises(ValidationError):
            users.upsert_by_username({"role": "superuser", "username": "x"})
        assert users.list() == []

    def test_persisted_shape_is_camel_case(self, users, backend):
        """Test the stored JSON uses the portal's field names."""
        users.upsert_by_username({"role": "caregiver", "username": "cg", "fullName": "Care Giver"})
        stored = json.loads(backend.get(keys.USERS))
        assert stored[0]["fullName"] == "Care Giver"
        assert "mrn" not in stored[0]


class TestUpdate:
    """Tests for replace-by-id."""

    def test_replaces_matching_record(self, users):
        """Test update overwrites the record with the same id."""
        u = users.upsert_by_username(_patient())
        users.update(u.model_copy(update={"allergies": "Penicillin"}))
        assert users.find_by_id(u.id).allergies == "Penicillin"

    def test_unknown_id_is_noop(self, users):
        """Test update never creates a record."""
        users.upsert_by_username(_patient())
        users.update(User(id="u_missing", role="caregiver", username="ghost"))
        assert [u.username for u in users.list()] == ["ptobe"]

    def test_update_can_duplicate_username(self, users):
        """Test update does not enforce username uniqueness."""
        a = users.upsert_by_username({"role": "caregiver", "username": "x", "fullName": "A"})
        b = users.upsert_by_username({"role": "caregiver", "username": "y", "fullName": "B"})
        users.update(b.model_copy(update={"username": "x"}))

        assert users.find_by_id(a.id).username == "x"
        assert users.find_by_id(b.id).username == "x"

    def test_update_keeps_original_role(self, users):
        """Test update cannot change a user's role."""
        u = users.upsert_by_username(_patient())
        users.update(u.model_copy(update={"role": "admin"}))
        assert users.find_by_id(u.id).role == "patient"

    def test_preserves_order(self, users):
        """Test update keeps the record in its original position."""
        a = users.upsert_by_username({"role": "caregiver", "username": "a"})
        users.upsert_by_username({"role": "caregiver", "username": "b"})
        users.update(a.model_copy(update={"full_name": "Renamed"}))
        assert [u.username for u in users.list()] == ["a", "b"]


class TestDelete:
    def test_delete_removes_user(self, users):
        """Test delete drops the matching record."""
        u = users.upsert_by_username(_patient())
        users.delete(u.id)
        assert users.find_by_id(u.id) is None

    def test_delete_unknown_is_noop(self, users):
        """Test deleting an absent id leaves the directory unchanged."""
        users.upsert_by_username(_patient())
        users.delete("u_missing")
        assert len(users.list()) == 1

    def test_delete_leaves_threads(self, users, messages):
        """Test deleting a patient does not cascade into their thread."""
        u = users.upsert_by_username(_patient())
        messages.add(u.id, "patient", "hello")
        users.delete(u.id)
        assert len(messages.list(u.id)) == 1


class TestLookups:
    """Tests for the query helpers."""

    def test_list_preserves_insertion_order(self, users):
        """Test list returns users in the order they were created."""
        for name in ["c", "a", "b"]:
            users.upsert_by_username({"role": "caregiver", "username": name})
        assert [u.username for u in users.list()] == ["c", "a", "b"]

    def test_find_by_id_miss_is_none(self, users):
        """Test a missing id returns None."""
        assert users.find_by_id("u_nope") is None

    def test_find_by_field_returns_first_match(self, users):
        """Test find_by_field returns the first exact match."""
        first = users.upsert_by_username({"role": "caregiver", "username": "a", "fullName": "Same"})
        users.upsert_by_username({"role": "caregiver", "username": "b", "fullName": "Same"})
        assert users.find_by_field("fullName", "Same").id == first.id
        assert users.find_by_field("full_name", "Same").id == first.id

    def test_find_by_field_miss_is_none(self, users):
        """Test an unmatched or unknown field returns None."""
        users.upsert_by_username(_patient())
        assert users.find_by_field("username", "nobody") is None
        assert users.find_by_field("shoeSize", 42) is None

    def test_find_by_role(self, users):
        """Test role filtering."""
        users.upsert_by_username(_patient())
        users.upsert_by_username({"role": "caregiver", "username": "cg"})
        assert [u.username for u in users.find_by_role("patient")] == ["ptobe"]
        assert users.find_by_role("admin") == []

    def test_corrupt_collection_lists_empty(self, users, backend):
        """Test a corrupted users key reads as an empty directory."""
        backend.set(keys.USERS, "not json")
        assert users.list() == []

    def test_malformed_record_is_dropped(self, users, backend):
        """Test records failing validation are skipped, valid ones kept."""
        backend.set(
            keys.USERS,
            json.dumps([{"id": "u_1", "role": "caregiver", "username": "ok"}, {"role": "pirate"}, "junk"]),
        )
        assert [u.username for u in users.list()] == ["ok"]


class TestAuthenticate:
    def test_matches_role_username_and_password(self, users):
        """Test credentials only match within the requested role."""
        users.upsert_by_username({"role": "caregiver", "username": "cg", "password": "pw"})
        assert users.authenticate("caregiver", "cg", "pw").username == "cg"
        assert users.authenticate("patient", "cg", "pw") is None
        assert users.authenticate("caregiver", "cg", "wrong") is None
