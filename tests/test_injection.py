"""
Tests for injected failures.

Tests cover:
- fail_next per operation kind
- Delivery to the failing operation's own callback only
- FIFO directives and counts
- ErrorInjector validation
"""

from unittest.mock import Mock

import pytest

from firemock import FiremockError, OperationKind
from firemock.core.injection import ErrorInjector


class TestFailNext:
    """Tests for MockClient.fail_next."""

    def test_set_fails_with_given_error(self, ref):
        """The next set reports the error and changes nothing."""
        error = RuntimeError("PERMISSION_DENIED")
        callback = Mock()
        ref.fail_next("set", error)
        ref.set("x", callback)
        ref.flush()

        callback.assert_called_once_with(error)
        assert ref.child("a/aString").get_data() == "alpha"

    def test_failure_emits_no_events(self, ref):
        """A failed operation is invisible to listeners."""
        spy = Mock()
        ref.on("value", spy)
        ref.flush()

        ref.fail_next("remove")
        ref.remove()
        ref.flush()

        assert spy.call_count == 1

    def test_only_next_operation_fails(self, ref):
        """The directive is used up by one operation."""
        first, second = Mock(), Mock()
        ref.fail_next("update")
        ref.update({"f": 1}, first)
        ref.update({"g": 1}, second)
        ref.flush()

        assert isinstance(first.call_args.args[0], FiremockError)
        second.assert_called_once_with(None)
        assert ref.child("f").get_data() is None
        assert ref.child("g").get_data() == 1

    def test_directives_are_fifo(self, ref):
        """Several directives for one kind apply in order."""
        first_error, second_error = RuntimeError("first"), RuntimeError("second")
        callbacks = [Mock(), Mock(), Mock()]
        ref.fail_next("set", first_error).fail_next("set", second_error)
        for callback in callbacks:
            ref.set(1, callback)
        ref.flush()

        assert [c.call_args.args[0] for c in callbacks] == [first_error, second_error, None]

    def test_other_kinds_unaffected(self, ref):
        """A directive only matches its own kind."""
        callback = Mock()
        ref.fail_next("remove")
        ref.set("x", callback)
        ref.flush()

        callback.assert_called_once_with(None)
        assert ref.get_data() == "x"

    def test_consulted_at_flush(self, ref):
        """A directive added after enqueue still applies."""
        callback = Mock()
        ref.set("x", callback)
        ref.fail_next("set", RuntimeError("late"))
        ref.flush()

        assert str(callback.call_args.args[0]) == "late"

    def test_set_priority_alias(self, ref):
        """camelCase kind names are accepted."""
        callback = Mock()
        ref.fail_next("setPriority", RuntimeError("no"))
        ref.child("a").set_priority(5, callback)
        ref.flush()

        assert str(callback.call_args.args[0]) == "no"
        assert ref.child("a").priority is None

    def test_set_with_priority_value_fails(self, ref):
        """set_with_priority reports the value write's failure."""
        callback = Mock()
        ref.fail_next("setWithPriority", RuntimeError("denied"))
        ref.child("z").set_with_priority("zed", 1, callback)
        ref.flush()

        assert str(callback.call_args.args[0]) == "denied"
        assert ref.child("z").get_data() is None

    def test_push(self, ref):
        """push failures reach the push callback."""
        callback = Mock()
        ref.fail_next(OperationKind.PUSH, RuntimeError("full"))
        child = ref.push("x", callback)
        ref.flush()

        assert str(callback.call_args.args[0]) == "full"
        assert child.get_data() is None

    def test_transaction(self, ref):
        """Transaction failures arrive as (error, False, None)."""
        on_complete = Mock()
        update = Mock(return_value=1)
        error = RuntimeError("conflict")
        ref.fail_next("transaction", error)
        ref.transaction(update, on_complete)
        ref.flush()

        on_complete.assert_called_once_with(error, False, None)
        update.assert_not_called()

    def test_auth(self, ref):
        """Auth failures carry the error and no result."""
        callback = Mock()
        error = RuntimeError("INVALID_TOKEN")
        ref.fail_next("auth", error)
        ref.auth("invalidToken", callback)
        ref.flush()

        callback.assert_called_once_with(error, None)
        assert ref.get_auth() is None

    def test_unknown_kind(self, ref):
        """Unknown kinds are rejected."""
        with pytest.raises(ValueError, match="Unknown operation kind"):
            ref.fail_next("explode")

    def test_non_injectable_kind(self, ref):
        """Kinds that cannot fail are rejected."""
        with pytest.raises(ValueError, match="Cannot inject"):
            ref.fail_next("listen")


class TestErrorInjector:
    """Tests for ErrorInjector directly."""

    def test_count(self):
        """A count fails that many operations."""
        injector = ErrorInjector()
        injector.fail_next("set", count=2)

        assert injector.pending("set") == 2
        assert injector.consume(OperationKind.SET) is not None
        assert injector.consume(OperationKind.SET) is not None
        assert injector.consume(OperationKind.SET) is None

    def test_default_error(self):
        """Without an error a FiremockError is used."""
        directive = ErrorInjector().fail_next("remove")

        assert isinstance(directive.error, FiremockError)
        assert "remove" in str(directive.error)

    def test_invalid_count(self):
        with pytest.raises(ValueError):
            ErrorInjector().fail_next("set", count=0)

    def test_clear(self):
        injector = ErrorInjector()
        injector.fail_next("set")
        injector.fail_next("auth")

        assert injector.pending() == 2
        injector.clear()
        assert injector.pending() == 0
