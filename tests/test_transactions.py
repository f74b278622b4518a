"""
Tests for transactions.

Tests cover:
- Commit, abort and raised errors
- on_complete arguments
- Purity of aborted transactions
"""

from unittest.mock import Mock

import pytest

from firemock.core.transactions import TransactionEngine


@pytest.fixture
def completed():
    """Collects on_complete calls as (error, committed, snapshot)."""
    calls = []

    def on_complete(error, committed, snapshot):
        calls.append((error, committed, snapshot))

    on_complete.calls = calls
    return on_complete


class TestTransaction:
    """Tests for MockClient.transaction."""

    def test_calls_update_function_on_flush(self, ref):
        """The update function runs during flush."""
        update = Mock(return_value=None)
        ref.transaction(update)

        update.assert_not_called()
        ref.flush()
        update.assert_called_once_with(ref.get_data())

    def test_commit(self, ref, completed):
        """A returned value is written and reported as committed."""

        def update(current):
            current["transacted"] = "yes"
            return current

        ref.transaction(update, completed)
        ref.flush()

        error, committed, snapshot = completed.calls[0]
        assert error is None
        assert committed is True
        assert snapshot.val()["transacted"] == "yes"
        assert ref.child("transacted").get_data() == "yes"

    def test_apply_locally_accepted(self, ref, completed):
        """apply_locally=False commits exactly like the default."""
        ref.child("a/aNumber").transaction(lambda current: current + 1, completed, apply_locally=False)
        ref.flush()

        error, committed, snapshot = completed.calls[0]
        assert error is None
        assert committed is True
        assert snapshot.val() == ref.child("a/aNumber").get_data()

    def test_commit_matches_read(self, ref, completed):
        """The committed value is what a later read returns."""
        ref.child("a/aNumber").transaction(lambda current: current + 1, completed)
        ref.flush()

        assert ref.child("a/aNumber").get_data() == 2
        assert completed.calls[0][2].val() == 2

    def test_abort_on_none(self, ref, completed):
        """Returning None leaves data alone and reports the current value."""
        before = ref.get_data()
        ref.transaction(lambda current: None, completed)
        ref.flush()

        error, committed, snapshot = completed.calls[0]
        assert error is None
        assert committed is False
        assert snapshot.val() == before
        assert ref.get_data() == before

    def test_abort_emits_nothing(self, ref):
        """An aborted transaction fires no events."""
        value = Mock()
        changed = Mock()
        ref.on("value", value)
        ref.on("child_changed", changed)
        ref.flush()

        ref.transaction(lambda current: None)
        ref.flush()

        assert value.call_count == 1
        changed.assert_not_called()

    def test_input_mutation_does_not_leak(self, ref):
        """Mutating the argument and aborting changes nothing."""

        def update(current):
            current["a"]["aString"] = "mutated"
            return None

        ref.transaction(update)
        ref.flush()

        assert ref.child("a/aString").get_data() == "alpha"

    def test_raised_error(self, ref, completed):
        """An exception aborts and is passed to on_complete."""
        failure = ValueError("nope")

        def update(current):
            raise failure

        ref.transaction(update, completed)
        ref.flush()

        assert completed.calls == [(failure, False, None)]
        assert ref.child("a/aString").get_data() == "alpha"

    def test_invalid_result(self, ref, completed):
        """A result that cannot be stored aborts with an error."""
        ref.transaction(lambda current: {"bad.key": 1}, completed)
        ref.flush()

        error, committed, snapshot = completed.calls[0]
        assert error is not None
        assert committed is False
        assert snapshot is None

    def test_missing_location(self, empty, completed):
        """Transactions on absent data receive None."""
        seen = []

        def update(current):
            seen.append(current)
            return 0

        empty.child("counter").transaction(update, completed)
        empty.flush()

        assert seen == [None]
        assert empty.child("counter").get_data() == 0

    def test_commit_fires_events(self, ref):
        """A committed transaction notifies listeners."""
        changed = Mock()
        ref.on("child_changed", changed)
        ref.flush()

        ref.child("b/aNumber").transaction(lambda current: 99)
        ref.flush()

        assert changed.call_args.args[0].key == "b"


class TestTransactionEngine:
    """Tests for TransactionEngine.evaluate."""

    def test_commit(self):
        outcome = TransactionEngine().evaluate(lambda current: current + 1, 1)

        assert outcome.committed
        assert outcome.value == 2

    def test_abort(self):
        outcome = TransactionEngine().evaluate(lambda current: None, 1)

        assert not outcome.committed
        assert outcome.error is None

    def test_error(self):
        def update(current):
            raise KeyError("x")

        outcome = TransactionEngine().evaluate(update, 1)

        assert not outcome.committed
        assert isinstance(outcome.error, KeyError)

    def test_receives_copy(self):
        current = {"a": [1]}
        TransactionEngine().evaluate(lambda value: value["a"].append(2), current)

        assert current == {"a": [1]}
