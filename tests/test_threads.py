"""Tests for the per-subject message and issue threads."""

import json

import pytest
from pydantic import ValidationError

from storage import keys


class TestMessageThreadStore:
    """Tests for MessageThreadStore."""

    def test_empty_thread(self, messages):
        """Test an unknown subject has no messages."""
        assert messages.list("u_p1") == []
        assert messages.render_order("u_p1") == []

    def test_append_order(self, messages):
        """Test N appends come back as N records in append order."""
        for i in range(5):
            messages.add("u_p1", "caregiver" if i % 2 else "patient", f"m{i}")
        assert [m.text for m in messages.list("u_p1")] == ["m0", "m1", "m2", "m3", "m4"]

    def test_render_order_is_exact_reverse(self, messages):
        """Test render_order is most-recent-first and does not reorder storage."""
        for i in range(3):
            messages.add("u_p1", "patient", f"m{i}")
        assert [m.text for m in messages.render_order("u_p1")] == ["m2", "m1", "m0"]
        assert [m.text for m in messages.list("u_p1")] == ["m0", "m1", "m2"]

    def test_threads_are_per_subject(self, messages, backend):
        """Test each subject has its own key."""
        messages.add("u_p1", "patient", "one")
        messages.add("u_p2", "patient", "two")
        assert [m.text for m in messages.list("u_p1")] == ["one"]
        assert json.loads(backend.get(keys.MESSAGES_PREFIX + "u_p2"))[0]["text"] == "two"

    def test_record_shape(self, messages, backend):
        """Test the persisted record carries sender, text and an ISO timestamp."""
        messages.add("u_p1", "caregiver", "hi")
        (stored,) = json.loads(backend.get(keys.MESSAGES_PREFIX + "u_p1"))
        assert set(stored) == {"sender", "text", "timestamp"}
        assert stored["timestamp"][:4].isdigit() and "T" in stored["timestamp"]

    def test_unknown_sender_rejected(self, messages):
        """Test only caregiver and patient may send."""
        with pytest.raises(ValidationError):
            messages.add("u_p1", "admin", "nope")
        assert messages.list("u_p1") == []

    def test_corrupt_thread_reads_empty_then_recovers(self, messages, backend):
        """Test a corrupted thread reads as empty and the next add starts fresh."""
        backend.set(keys.MESSAGES_PREFIX + "u_p1", "}}corrupt{{")
        assert messages.list("u_p1") == []

        messages.add("u_p1", "caregiver", "after")
        assert [m.text for m in messages.list("u_p1")] == ["after"]


class TestIssueThreadStore:
    """Tests for IssueThreadStore."""

    def test_add_and_list(self, issues):
        """Test issues append in order with their reporter label."""
        issues.add("u_p1", "caregiver", "fell")
        issues.add("u_p1", "caregiver", "missed dose")
        listed = issues.list("u_p1")
        assert [i.text for i in listed] == ["fell", "missed dose"]
        assert {i.reporter for i in listed} == {"caregiver"}

    def test_reporter_is_free_form(self, issues):
        """Test the store accepts any reporter label."""
        issues.add("u_p1", "patient", "self-reported")
        assert issues.list("u_p1")[0].reporter == "patient"

    def test_render_order(self, issues):
        """Test issues render most recent first."""
        issues.add("u_p1", "caregiver", "a")
        issues.add("u_p1", "caregiver", "b")
        assert [i.text for i in issues.render_order("u_p1")] == ["b", "a"]

    def test_issues_separate_from_messages(self, issues, messages):
        """Test issue and message threads for one subject do not share a key."""
        issues.add("u_p1", "caregiver", "issue")
        assert messages.list("u_p1") == []
