"""Tests for the key-value backends."""

import json

from storage.backends import JsonFileBackend, MemoryBackend
from storage.record_store import RecordStore


class TestMemoryBackend:
    """Tests for MemoryBackend."""

    def test_get_and_set(self):
        """Test basic key lifecycle."""
        b = MemoryBackend()
        assert b.get("k") is None
        b.set("k", "v")
        assert b.get("k") == "v"
        b.set("k", "w")
        assert b.get("k") == "w"

    def test_initial_contents(self):
        """Test the backend can start from a snapshot."""
        assert MemoryBackend({"a": "1"}).get("a") == "1"


class TestJsonFileBackend:
    """Tests for JsonFileBackend."""

    def test_persists_across_instances(self, tmp_path):
        """Test a value written by one instance is read by another."""
        path = tmp_path / "data" / "portal_db.json"
        JsonFileBackend(path).set("k", "[1]")
        assert JsonFileBackend(path).get("k") == "[1]"

    def test_creates_parent_directory(self, tmp_path):
        """Test the data directory is created on first write."""
        path = tmp_path / "nested" / "dir" / "db.json"
        JsonFileBackend(path).set("k", "v")
        assert path.exists()

    def test_no_temp_file_left_behind(self, tmp_path):
        """Test the atomic write replaces the temp file."""
        path = tmp_path / "db.json"
        JsonFileBackend(path).set("k", "v")
        assert not path.with_suffix(".tmp").exists()

    def test_file_stores_raw_string_values(self, tmp_path):
        """Test the on-disk layout is a flat key -> string object."""
        path = tmp_path / "db.json"
        JsonFileBackend(path).set("mh_users_v1", "[]")
        assert json.loads(path.read_text(encoding="utf-8")) == {"mh_users_v1": "[]"}

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        """Test an unparsable file is treated as an empty key space."""
        path = tmp_path / "db.json"
        path.write_text("{{{{", encoding="utf-8")
        b = JsonFileBackend(path)
        assert b.get("k") is None

    def test_corrupt_file_is_replaced_on_write(self, tmp_path):
        """Test the next write recovers a corrupt file."""
        path = tmp_path / "db.json"
        path.write_text("not json", encoding="utf-8")
        b = JsonFileBackend(path)
        b.set("k", "v")
        assert JsonFileBackend(path).get("k") == "v"

    def test_record_store_over_file(self, tmp_path):
        """Test RecordStore works end-to-end over the file backend."""
        store = RecordStore(JsonFileBackend(tmp_path / "db.json"))
        store.write("k", [{"n": 1}])
        assert RecordStore(JsonFileBackend(tmp_path / "db.json")).read("k") == [{"n": 1}]
