"""
Tests for Snapshot.

Tests cover:
- Values, priorities and keys
- Ordered iteration and for_each early exit
- Immutability against later writes
"""

from unittest.mock import Mock

import pytest


@pytest.fixture
def snapshot(ref):
    """Snapshot of /data taken through a value listener."""
    spy = Mock()
    ref.on("value", spy)
    ref.flush()
    return spy.call_args.args[0]


class TestSnapshot:
    """Tests for Snapshot accessors."""

    def test_key_and_ref(self, snapshot, ref):
        """A snapshot knows its key and location."""
        assert snapshot.key == "data"
        assert snapshot.ref == ref

    def test_keys_in_order(self, snapshot):
        """keys lists children in comparator order."""
        assert snapshot.keys() == ["a", "b", "c", "d", "e"]
        assert snapshot.num_children() == 5
        assert snapshot.has_children()

    def test_child(self, snapshot):
        """child descends by relative path."""
        child = snapshot.child("a/aString")

        assert child.val() == "alpha"
        assert child.key == "aString"
        assert child.ref.path == "data/a/aString"

    def test_has_child(self, snapshot):
        """has_child checks for existing data."""
        assert snapshot.has_child("e/aNumber")
        assert not snapshot.has_child("e/aBoolean")

    def test_iteration(self, snapshot):
        """Iterating yields child snapshots in order."""
        assert [child.key for child in snapshot] == ["a", "b", "c", "d", "e"]

    def test_for_each_stops_on_true(self, snapshot):
        """for_each stops when the callback returns True."""
        seen = []

        stopped = snapshot.for_each(lambda child: seen.append(child.key) or child.key == "b")

        assert stopped is True
        assert seen == ["a", "b"]

    def test_leaf(self, snapshot):
        """Leaves have no children."""
        leaf = snapshot.child("a/aNumber")

        assert leaf.keys() == []
        assert leaf.num_children() == 0
        assert not leaf.has_children()

    def test_unchanged_by_later_writes(self, snapshot, ref):
        """A snapshot keeps describing the state it was taken from."""
        ref.set("replaced")
        ref.flush()

        assert snapshot.child("a/aString").val() == "alpha"

    def test_val_returns_fresh_containers(self, snapshot):
        """Mutating val() output does not affect the snapshot."""
        snapshot.val()["a"]["aString"] = "mutated"

        assert snapshot.child("a/aString").val() == "alpha"

    def test_priorities(self, ref):
        """get_priority and export_val expose priorities."""
        spy = Mock()
        ref.child("a").set_priority(3)
        ref.on("value", spy)
        ref.flush()

        snapshot = spy.call_args.args[0]
        assert snapshot.child("a").get_priority() == 3
        assert snapshot.export_val()["a"][".priority"] == 3
        assert ".priority" not in snapshot.val()["a"]
