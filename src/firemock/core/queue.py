"""Deferred operation queue.

Every mutation, subscription and auth request becomes a ``PendingOperation``
that waits here until a flush applies it. Enqueueing never touches the tree
and never fires a callback.
"""

from __future__ import annotations

import itertools
import logging
import threading
from enum import Enum
from typing import Any, Callable, List, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class OperationKind(str, Enum):
    SET = "set"
    UPDATE = "update"
    REMOVE = "remove"
    SET_PRIORITY = "set_priority"
    PUSH = "push"
    TRANSACTION = "transaction"
    AUTH = "auth"
    UNAUTH = "unauth"
    AUTH_STATE = "auth_state"
    LISTEN = "listen"
    FAKE_EVENT = "fake_event"
    CANCEL = "cancel"

    @classmethod
    def parse(cls, value: "OperationKind | str") -> "OperationKind":
        if isinstance(value, cls):
            return value
        alias = _ALIASES.get(value, value)
        try:
            return cls(alias)
        except ValueError:
            valid = ", ".join(member.value for member in INJECTABLE_KINDS)
            raise ValueError(f"Unknown operation kind {value!r}. Valid kinds: {valid}") from None


_ALIASES = {"setPriority": "set_priority", "setWithPriority": "set"}

# Kinds that fail_next directives may target.
INJECTABLE_KINDS = (
    OperationKind.SET,
    OperationKind.UPDATE,
    OperationKind.REMOVE,
    OperationKind.SET_PRIORITY,
    OperationKind.PUSH,
    OperationKind.TRANSACTION,
    OperationKind.AUTH,
)


class PendingOperation(BaseModel):
    """An operation waiting for the next flush."""

    kind: OperationKind
    path: str
    payload: Any = None
    callback: Optional[Callable[..., Any]] = None
    sequence: int = 0

    model_config = {"arbitrary_types_allowed": True}

    def describe(self) -> str:
        return f"#{self.sequence} {self.kind.value} '/{self.path}'"


class DeferredQueue:
    """FIFO of pending operations drained only by ``flush``."""

    def __init__(self, on_enqueue: Optional[Callable[[], None]] = None):
        self._pending: List[PendingOperation] = []
        self._sequence = itertools.count(1)
        self._lock = threading.RLock()
        self._flushing = False
        self._on_enqueue = on_enqueue

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def pending(self) -> int:
        return len(self._pending)

    @property
    def flushing(self) -> bool:
        return self._flushing

    def enqueue(
        self,
        kind: OperationKind,
        path: str,
        payload: Any = None,
        callback: Optional[Callable[..., Any]] = None,
    ) -> PendingOperation:
        with self._lock:
            operation = PendingOperation(
                kind=kind,
                path=path,
                payload=payload,
                callback=callback,
                sequence=next(self._sequence),
            )
            self._pending.append(operation)
        logger.debug("Queued %s (pending=%d)", operation.describe(), len(self._pending))
        if self._on_enqueue is not None:
            self._on_enqueue()
        return operation

    def flush(self, apply: Callable[[PendingOperation], None]) -> int:
        """Apply every operation queued before this pass started.

        Operations queued while the pass runs stay pending. A nested call made
        from inside a pass returns immediately. Returns the number applied.
        """
        with self._lock:
            if self._flushing:
                return 0
            self._flushing = True
            try:
                batch, self._pending = self._pending, []
                for operation in batch:
                    try:
                        apply(operation)
                    except Exception:
                        logger.exception("Failed to apply %s", operation.describe())
            finally:
                self._flushing = False
        return len(batch)


__all__ = ["DeferredQueue", "INJECTABLE_KINDS", "OperationKind", "PendingOperation"]
