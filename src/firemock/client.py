"""
Mock realtime-database client.

``MockClient`` mirrors the surface of a realtime tree database reference:
writes, subscriptions, transactions and auth are queued and only take effect
when the test flushes (or enables auto flush)::

    ref = MockClient().child("data")
    ref.on("child_moved", on_moved)
    ref.child("a").set_priority(250)
    ref.flush()

Clients obtained through ``child``/``parent``/``root``/``push`` share one
``ClientState`` (tree, queue, listeners, injected errors, auth state).
Separately constructed clients never share anything.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional

from firemock.config import ClientConfig
from firemock.core import paths
from firemock.core.auth import AuthResult, AuthStub
from firemock.core.engine import CancelRequest, FakeEventRequest, MutationEngine
from firemock.core.events import EventType, Listener, ListenerTable
from firemock.core.injection import ErrorInjector
from firemock.core.ordering import Priority, is_valid_priority
from firemock.core.push_ids import PushIdGenerator
from firemock.core.queue import DeferredQueue, OperationKind
from firemock.core.scheduling import AutoFlushSetting, FlushScheduler
from firemock.core.tree import OrderedTree, parse_write
from firemock.errors import InvalidDataError
from firemock.fixtures import default_data
from firemock.utils.logging import log_calls

logger = logging.getLogger(__name__)

_DEFAULT = object()


class ClientState:
    """Everything shared by one family of clients."""

    def __init__(self, root_url: str, data: Any, config: ClientConfig):
        self.root_url = root_url
        self.config = config
        self.tree = OrderedTree(data)
        self.listeners = ListenerTable()
        self.injector = ErrorInjector()
        self.auth = AuthStub(ttl_seconds=config.auth_ttl_seconds)
        self.push_ids = PushIdGenerator()
        self.engine = MutationEngine(
            self.tree,
            self.listeners,
            self.injector,
            self.auth,
            ref_factory=lambda path: MockClient._attach(self, path),
        )
        self.scheduler = FlushScheduler(self.flush, config.auto_flush)
        self.queue = DeferredQueue(on_enqueue=self.scheduler.on_enqueue)

    @log_calls()
    def flush(self) -> int:
        """Drain the queue; returns the number of operations applied.

        In immediate auto-flush mode, operations queued by callbacks during a
        pass are applied by a follow-up pass.
        """
        applied = 0
        while True:
            applied += self.queue.flush(self.engine.apply)
            if not (self.scheduler.immediate and self.queue.pending and not self.queue.flushing):
                return applied


class MockClient:
    """A reference to one location of an in-memory realtime database."""

    def __init__(self, url: str = "Mock://", data: Any = _DEFAULT, *, config: Optional[ClientConfig] = None):
        location = paths.DatabaseUrl.parse(url)
        if data is _DEFAULT:
            data = default_data()
        self._state = ClientState(location.root_url, data, config or ClientConfig())
        self._path = location.path
        logger.debug("Created mock client at %s", self.current_path)

    @classmethod
    def _attach(cls, state: ClientState, path: str) -> "MockClient":
        client = cls.__new__(cls)
        client._state = state
        client._path = path
        return client

    # -- location ------------------------------------------------------

    @property
    def path(self) -> str:
        return self._path

    @property
    def key(self) -> Optional[str]:
        return paths.key_of(self._path)

    @property
    def current_path(self) -> str:
        return f"{self._state.root_url}{self._path}"

    @property
    def priority(self) -> Priority:
        node = self._state.tree.read(self._path)
        return node.priority if node.exists else None

    def child(self, relative_path: str) -> "MockClient":
        return MockClient._attach(self._state, paths.join(self._path, relative_path))

    def parent(self) -> Optional["MockClient"]:
        parent_path = paths.parent_of(self._path)
        if parent_path is None:
            return None
        return MockClient._attach(self._state, parent_path)

    def root(self) -> "MockClient":
        return MockClient._attach(self._state, "")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MockClient):
            return NotImplemented
        return self._state is other._state and self._path == other._path

    def __hash__(self) -> int:
        return hash((id(self._state), self._path))

    def __repr__(self) -> str:
        return f"MockClient({self.current_path!r})"

    def __str__(self) -> str:
        return self.current_path

    # -- synchronous reads (test assertions) ---------------------------

    def get_data(self) -> Any:
        """Current raw value at this location, ``None`` when absent."""
        return self._state.tree.value(self._path)

    def get_keys(self) -> List[str]:
        return self._state.tree.ordered_children(self._path)

    @property
    def pending(self) -> int:
        return self._state.queue.pending

    # -- mutators ------------------------------------------------------

    def set(self, value: Any, callback: Optional[Callable[..., Any]] = None) -> None:
        write = parse_write(value, self._path)
        self._state.queue.enqueue(OperationKind.SET, self._path, write, callback)

    def update(self, values: Mapping[str, Any], callback: Optional[Callable[..., Any]] = None) -> None:
        """Write several children (or relative paths) in one step."""
        if not isinstance(values, Mapping):
            raise InvalidDataError("update() expects a mapping of child paths to values", path=self._path)
        writes = {}
        for relative, value in values.items():
            relative_path = paths.normalize(str(relative))
            if not relative_path:
                raise InvalidDataError("update() keys must name a child", path=self._path)
            writes[relative_path] = parse_write(value, paths.join(self._path, relative_path))
        self._state.queue.enqueue(OperationKind.UPDATE, self._path, writes, callback)

    def remove(self, callback: Optional[Callable[..., Any]] = None) -> None:
        self._state.queue.enqueue(OperationKind.REMOVE, self._path, None, callback)

    def set_priority(self, priority: Priority, callback: Optional[Callable[..., Any]] = None) -> None:
        if not is_valid_priority(priority):
            raise InvalidDataError(f"Invalid priority {priority!r}", path=self._path)
        if not self._path:
            raise InvalidDataError("The root location cannot have a priority")
        self._state.queue.enqueue(OperationKind.SET_PRIORITY, self._path, priority, callback)

    def set_with_priority(
        self,
        value: Any,
        priority: Priority,
        callback: Optional[Callable[..., Any]] = None,
    ) -> None:
        """Queue the priority change first, then the value (which reports to ``callback``)."""
        parse_write(value, self._path)
        self.set_priority(priority)
        self.set(value, callback)

    def push(self, value: Any = None, callback: Optional[Callable[..., Any]] = None) -> "MockClient":
        """Create a child at a new chronologically ordered key."""
        child = self.child(self._state.push_ids.next_id())
        if value is not None:
            write = parse_write(value, child.path)
            self._state.queue.enqueue(OperationKind.PUSH, child.path, write, callback)
        return child

    def transaction(
        self,
        update_fn: Callable[[Any], Any],
        on_complete: Optional[Callable[..., Any]] = None,
        apply_locally: bool = True,
    ) -> None:
        """Queue ``update_fn``; returning ``None`` from it aborts the transaction.

        ``apply_locally`` is accepted for call compatibility. Every write is
        local here, so it changes nothing.
        """
        payload = {"update_fn": update_fn, "on_complete": on_complete}
        self._state.queue.enqueue(OperationKind.TRANSACTION, self._path, payload)

    # -- subscriptions -------------------------------------------------

    def on(
        self,
        event_type: EventType | str,
        callback: Callable[..., Any],
        cancel_callback: Optional[Callable[..., Any]] = None,
        context: Any = None,
    ) -> Listener:
        return self._listen(event_type, callback, cancel_callback, context, once=False)

    def once(
        self,
        event_type: EventType | str,
        callback: Callable[..., Any],
        cancel_callback: Optional[Callable[..., Any]] = None,
        context: Any = None,
    ) -> Listener:
        return self._listen(event_type, callback, cancel_callback, context, once=True)

    def _listen(
        self,
        event_type: EventType | str,
        callback: Callable[..., Any],
        cancel_callback: Optional[Callable[..., Any]],
        context: Any,
        once: bool,
    ) -> Listener:
        listener = Listener(
            event_type=EventType.parse(event_type),
            path=self._path,
            callback=callback,
            cancel_callback=cancel_callback,
            context=context,
            once=once,
        )
        self._state.listeners.add(listener)
        self._state.queue.enqueue(OperationKind.LISTEN, self._path, listener)
        return listener

    def off(
        self,
        event_type: EventType | str | Listener | None = None,
        callback: Optional[Callable[..., Any]] = None,
        context: Any = None,
    ) -> int:
        """Remove matching registrations at this location; returns how many."""
        if isinstance(event_type, Listener):
            removed = [event_type]
        else:
            parsed = EventType.parse(event_type) if event_type is not None else None
            removed = self._state.listeners.find(self._path, parsed, callback, context, armed_only=False)
        for listener in removed:
            self._state.listeners.discard(listener)
        return len(removed)

    # -- auth ----------------------------------------------------------

    def auth(self, credential: Any, callback: Optional[Callable[..., Any]] = None) -> None:
        self._state.queue.enqueue(OperationKind.AUTH, self._path, credential, callback)

    def unauth(self, callback: Optional[Callable[..., Any]] = None) -> None:
        self._state.queue.enqueue(OperationKind.UNAUTH, self._path, None, callback)

    def get_auth(self) -> Optional[AuthResult]:
        return self._state.auth.state

    def on_auth(self, callback: Callable[[Optional[AuthResult]], Any]) -> None:
        self._state.auth.add_observer(callback)

    def off_auth(self, callback: Callable[[Optional[AuthResult]], Any]) -> None:
        self._state.auth.remove_observer(callback)

    def change_auth_state(self, auth_data: Optional[Mapping[str, Any]]) -> "MockClient":
        """Queue a direct auth-state change, as if pushed by the server."""
        payload = dict(auth_data) if auth_data is not None else None
        self._state.queue.enqueue(OperationKind.AUTH_STATE, self._path, payload)
        return self

    # -- test control --------------------------------------------------

    def flush(self, delay_ms: Optional[float] = None) -> "MockClient":
        """Apply queued operations now, or once after ``delay_ms``."""
        if delay_ms is None:
            self._state.flush()
        else:
            self._state.scheduler.schedule(delay_ms)
        return self

    def auto_flush(self, setting: AutoFlushSetting = True) -> "MockClient":
        self._state.scheduler.configure(setting)
        if self._state.queue.pending:
            self._state.scheduler.on_enqueue()
        return self

    def fail_next(self, kind: OperationKind | str, error: Optional[BaseException] = None) -> "MockClient":
        self._state.injector.fail_next(kind, error)
        return self

    def fake_event(
        self,
        event_type: EventType | str,
        key: Optional[str] = None,
        data: Any = None,
        prev_name: Optional[str] = None,
        priority: Priority = None,
    ) -> "MockClient":
        """Queue an event for listeners here without touching stored data."""
        parse_write(data, self._path)
        request = FakeEventRequest(
            event_type=EventType.parse(event_type),
            key=paths.validate_key(key) if key is not None else None,
            data=data,
            prev_name=prev_name,
            priority=priority,
        )
        self._state.queue.enqueue(OperationKind.FAKE_EVENT, self._path, request)
        return self

    def force_cancel(
        self,
        error: BaseException,
        event_type: EventType | str | None = None,
        callback: Optional[Callable[..., Any]] = None,
        context: Any = None,
    ) -> "MockClient":
        """Queue cancellation of matching listeners; their cancel callbacks get ``error``."""
        request = CancelRequest(
            error=error,
            event_type=EventType.parse(event_type) if event_type is not None else None,
            callback=callback,
            context=context,
        )
        self._state.queue.enqueue(OperationKind.CANCEL, self._path, request)
        return self


__all__ = ["ClientState", "MockClient"]
