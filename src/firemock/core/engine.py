"""
Mutation Engine: applies queued operations to the tree.

For every operation taken off the queue during a flush:
1. Consult the error injector (matching directive: fail via callback, stop)
2. Apply the operation to the ordered tree
3. Diff every listened-to location, deepest first, and dispatch events
4. Invoke the operation's own callback

Nothing here raises out of ``apply``; listener and callback failures are
logged and isolated.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel

from firemock.core import paths
from firemock.core.auth import AuthStub
from firemock.core.diff import PathDiff, diff_path
from firemock.core.events import EventType, Listener, ListenerTable, safe_call
from firemock.core.injection import ErrorInjector
from firemock.core.ordering import Priority
from firemock.core.queue import INJECTABLE_KINDS, OperationKind, PendingOperation
from firemock.core.snapshot import Snapshot
from firemock.core.transactions import TransactionEngine
from firemock.core.tree import EMPTY, Node, OrderedTree, apply_write, parse_write
from firemock.errors import InvalidDataError

logger = logging.getLogger(__name__)

RefFactory = Callable[[str], Any]


class FakeEventRequest(BaseModel):
    event_type: EventType
    key: Optional[str] = None
    data: Any = None
    prev_name: Optional[str] = None
    priority: Priority = None


class CancelRequest(BaseModel):
    error: BaseException
    event_type: Optional[EventType] = None
    callback: Optional[Callable[..., Any]] = None
    context: Any = None

    model_config = {"arbitrary_types_allowed": True}


class MutationEngine:
    """Applies ``PendingOperation`` objects and dispatches resulting events."""

    def __init__(
        self,
        tree: OrderedTree,
        listeners: ListenerTable,
        injector: ErrorInjector,
        auth: AuthStub,
        ref_factory: Optional[RefFactory] = None,
    ):
        self.tree = tree
        self.listeners = listeners
        self.injector = injector
        self.auth = auth
        self.transactions = TransactionEngine()
        self._ref_factory = ref_factory
        self._handlers: Dict[OperationKind, Callable[[PendingOperation], None]] = {
            OperationKind.SET: self._apply_set,
            OperationKind.PUSH: self._apply_set,
            OperationKind.UPDATE: self._apply_update,
            OperationKind.REMOVE: self._apply_remove,
            OperationKind.SET_PRIORITY: self._apply_set_priority,
            OperationKind.TRANSACTION: self._apply_transaction,
            OperationKind.AUTH: self._apply_auth,
            OperationKind.UNAUTH: self._apply_unauth,
            OperationKind.AUTH_STATE: self._apply_auth_state,
            OperationKind.LISTEN: self._apply_listen,
            OperationKind.FAKE_EVENT: self._apply_fake_event,
            OperationKind.CANCEL: self._apply_cancel,
        }

    def apply(self, operation: PendingOperation) -> None:
        logger.debug("Applying %s", operation.describe())
        if operation.kind in INJECTABLE_KINDS:
            error = self.injector.consume(operation.kind)
            if error is not None:
                logger.debug("Injected failure for %s: %r", operation.describe(), error)
                self._fail(operation, error)
                return
        self._handlers[operation.kind](operation)

    # -- snapshots -----------------------------------------------------

    def snapshot(self, path: str, node: Optional[Node] = None) -> Snapshot:
        if node is None:
            node = self.tree.read(path)
        ref = self._ref_factory(path) if self._ref_factory is not None else None
        return Snapshot(path=path, node=node, ref=ref)

    # -- failures ------------------------------------------------------

    def _fail(self, operation: PendingOperation, error: BaseException) -> None:
        description = f"{operation.kind.value} callback"
        if operation.kind is OperationKind.TRANSACTION:
            safe_call(operation.payload.get("on_complete"), error, False, None, description=description)
        elif operation.kind is OperationKind.AUTH:
            safe_call(operation.callback, error, None, description=description)
        else:
            safe_call(operation.callback, error, description=description)

    # -- mutations -----------------------------------------------------

    def _mutate(self, operation: PendingOperation, mutation: Callable[[], Any]) -> None:
        before = self.tree.root
        mutation()
        self.dispatch_changes(before, self.tree.root)
        safe_call(operation.callback, None, description=f"{operation.kind.value} callback")

    def _apply_set(self, operation: PendingOperation) -> None:
        self._mutate(operation, lambda: self.tree.write(operation.path, operation.payload))

    def _apply_update(self, operation: PendingOperation) -> None:
        self._mutate(operation, lambda: self.tree.update(operation.path, operation.payload))

    def _apply_remove(self, operation: PendingOperation) -> None:
        self._mutate(operation, lambda: self.tree.remove(operation.path))

    def _apply_set_priority(self, operation: PendingOperation) -> None:
        self._mutate(operation, lambda: self.tree.set_priority(operation.path, operation.payload))

    def _apply_transaction(self, operation: PendingOperation) -> None:
        on_complete = operation.payload.get("on_complete")
        current = self.tree.value(operation.path)
        outcome = self.transactions.evaluate(operation.payload["update_fn"], current)
        if outcome.error is not None:
            safe_call(on_complete, outcome.error, False, None, description="transaction callback")
            return
        if not outcome.committed:
            safe_call(on_complete, None, False, self.snapshot(operation.path), description="transaction callback")
            return
        try:
            write = parse_write(outcome.value, operation.path)
        except InvalidDataError as exc:
            safe_call(on_complete, exc, False, None, description="transaction callback")
            return
        before = self.tree.root
        self.tree.write(operation.path, write)
        self.dispatch_changes(before, self.tree.root)
        safe_call(on_complete, None, True, self.snapshot(operation.path), description="transaction callback")

    # -- auth ----------------------------------------------------------

    def _apply_auth(self, operation: PendingOperation) -> None:
        result = self.auth.authenticate(operation.payload)
        safe_call(operation.callback, None, result, description="auth callback")

    def _apply_unauth(self, operation: PendingOperation) -> None:
        self.auth.unauth()
        safe_call(operation.callback, None, description="unauth callback")

    def _apply_auth_state(self, operation: PendingOperation) -> None:
        self.auth.change_state(operation.payload)

    # -- listeners -----------------------------------------------------

    def _apply_listen(self, operation: PendingOperation) -> None:
        listener: Listener = operation.payload
        if not listener.active:
            return
        listener.armed = True
        if listener.event_type is EventType.VALUE:
            listener.fire(self.snapshot(listener.path))
        elif listener.event_type is EventType.CHILD_ADDED:
            node = self.tree.read(listener.path)
            prev_name = None
            for name in node.order:
                child_path = paths.join(listener.path, name)
                listener.fire(self.snapshot(child_path, node.child(name)), prev_name)
                prev_name = name
        self.listeners.prune()

    def _apply_fake_event(self, operation: PendingOperation) -> None:
        request: FakeEventRequest = operation.payload
        node = apply_write(EMPTY, parse_write(request.data))
        if request.priority is not None:
            node = node.with_priority(request.priority)
        if request.event_type is EventType.VALUE:
            snapshot = self.snapshot(operation.path, node)
        else:
            snapshot = self.snapshot(paths.join(operation.path, request.key or ""), node)
        for listener in self.listeners.find(operation.path, request.event_type):
            if request.event_type in (EventType.VALUE, EventType.CHILD_REMOVED):
                listener.fire(snapshot)
            else:
                listener.fire(snapshot, request.prev_name)
        self.listeners.prune()

    def _apply_cancel(self, operation: PendingOperation) -> None:
        request: CancelRequest = operation.payload
        cancelled = self.listeners.find(
            operation.path, request.event_type, request.callback, request.context, armed_only=False
        )
        for listener in cancelled:
            self.listeners.discard(listener)
            safe_call(listener.cancel_callback, request.error, description="cancel callback")

    # -- dispatch ------------------------------------------------------

    def dispatch_changes(self, before: Node, after: Node) -> None:
        """Fire child and value events at every listened path that changed."""
        if before is after:
            return
        listened = sorted(self.listeners.paths(), key=lambda path: (-paths.depth(path), path))
        for path in listened:
            diff = diff_path(path, before, after)
            if diff is not None:
                self._emit(diff)
        self.listeners.prune()

    def _emit(self, diff: PathDiff) -> None:
        for change in diff.changes:
            snapshot = self.snapshot(paths.join(diff.path, change.name), change.node)
            for listener in self.listeners.find(diff.path, change.event_type):
                if change.event_type is EventType.CHILD_REMOVED:
                    listener.fire(snapshot)
                else:
                    listener.fire(snapshot, change.prev_name)
        value_listeners = self.listeners.find(diff.path, EventType.VALUE)
        if value_listeners:
            snapshot = self.snapshot(diff.path, diff.after)
            for listener in value_listeners:
                listener.fire(snapshot)


__all__ = ["CancelRequest", "FakeEventRequest", "MutationEngine"]
