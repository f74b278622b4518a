"""Programmable failures for queued operations."""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, Optional

from pydantic import BaseModel

from firemock.core.queue import INJECTABLE_KINDS, OperationKind
from firemock.errors import FiremockError

logger = logging.getLogger(__name__)


class ErrorDirective(BaseModel):
    """Fail the next ``remaining`` operations of ``kind`` with ``error``."""

    kind: OperationKind
    error: BaseException
    remaining: int = 1

    model_config = {"arbitrary_types_allowed": True}


class ErrorInjector:
    """Per-kind FIFO of error directives, consulted when an operation applies."""

    def __init__(self) -> None:
        self._directives: Dict[OperationKind, Deque[ErrorDirective]] = {}

    def fail_next(
        self,
        kind: OperationKind | str,
        error: Optional[BaseException] = None,
        count: int = 1,
    ) -> ErrorDirective:
        kind = OperationKind.parse(kind)
        if kind not in INJECTABLE_KINDS:
            valid = ", ".join(item.value for item in INJECTABLE_KINDS)
            raise ValueError(f"Cannot inject failures into {kind.value!r}. Valid kinds: {valid}")
        if count < 1:
            raise ValueError(f"count must be at least 1, got {count}")
        if error is None:
            error = FiremockError(f"{kind.value} failed (injected)")
        directive = ErrorDirective(kind=kind, error=error, remaining=count)
        self._directives.setdefault(kind, deque()).append(directive)
        logger.debug("Next %d %s operation(s) will fail with %r", count, kind.value, error)
        return directive

    def consume(self, kind: OperationKind) -> Optional[BaseException]:
        """Return the error for this operation, or ``None`` to let it apply."""
        queue = self._directives.get(kind)
        if not queue:
            return None
        directive = queue[0]
        directive.remaining -= 1
        if directive.remaining <= 0:
            queue.popleft()
        return directive.error

    def pending(self, kind: OperationKind | str | None = None) -> int:
        if kind is not None:
            return sum(d.remaining for d in self._directives.get(OperationKind.parse(kind), ()))
        return sum(d.remaining for queue in self._directives.values() for d in queue)

    def clear(self) -> None:
        self._directives.clear()


__all__ = ["ErrorDirective", "ErrorInjector"]
