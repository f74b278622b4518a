"""Event types, listener registrations and isolated dispatch."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Events a location can be subscribed to."""

    VALUE = "value"
    CHILD_ADDED = "child_added"
    CHILD_REMOVED = "child_removed"
    CHILD_CHANGED = "child_changed"
    CHILD_MOVED = "child_moved"

    @classmethod
    def parse(cls, value: "EventType | str") -> "EventType":
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown event type {value!r}. Valid types: {valid}") from None


def safe_call(callback: Optional[Callable[..., Any]], *args: Any, description: str = "callback") -> None:
    """Invoke ``callback``; failures are logged and never propagate."""
    if callback is None:
        return
    try:
        callback(*args)
    except Exception:
        logger.exception("Error in %s", description)


class Listener(BaseModel):
    """A registration made through ``on``/``once``; also the handle for ``off``."""

    event_type: EventType
    path: str
    callback: Callable[..., Any]
    cancel_callback: Optional[Callable[..., Any]] = None
    context: Any = None
    once: bool = False
    active: bool = True
    # Set once the queued registration has been applied by a flush.
    armed: bool = False

    model_config = {"arbitrary_types_allowed": True}

    def matches(
        self,
        event_type: Optional[EventType] = None,
        callback: Optional[Callable[..., Any]] = None,
        context: Any = None,
    ) -> bool:
        if event_type is not None and self.event_type != event_type:
            return False
        if callback is not None and self.callback != callback:
            return False
        if context is not None and self.context is not context:
            return False
        return True

    def fire(self, *args: Any) -> None:
        if not (self.active and self.armed):
            return
        if self.once:
            self.active = False
        safe_call(self.callback, *args, description=f"{self.event_type.value} listener at '/{self.path}'")


class ListenerTable:
    """Per-client-family table of path -> ordered listener registrations."""

    def __init__(self) -> None:
        self._by_path: Dict[str, List[Listener]] = {}

    def add(self, listener: Listener) -> None:
        self._by_path.setdefault(listener.path, []).append(listener)

    def discard(self, listener: Listener) -> None:
        listener.active = False
        registered = self._by_path.get(listener.path)
        if not registered:
            return
        self._by_path[listener.path] = [item for item in registered if item is not listener]
        if not self._by_path[listener.path]:
            del self._by_path[listener.path]

    def find(
        self,
        path: str,
        event_type: Optional[EventType] = None,
        callback: Optional[Callable[..., Any]] = None,
        context: Any = None,
        *,
        armed_only: bool = True,
    ) -> List[Listener]:
        return [
            listener
            for listener in self._by_path.get(path, [])
            if listener.active
            and (listener.armed or not armed_only)
            and listener.matches(event_type, callback, context)
        ]

    def paths(self) -> List[str]:
        """Paths with at least one live registration."""
        return [
            path for path, listeners in self._by_path.items() if any(item.active and item.armed for item in listeners)
        ]

    def __len__(self) -> int:
        return sum(1 for listeners in self._by_path.values() for item in listeners if item.active)

    def prune(self) -> None:
        """Drop registrations deactivated by ``once`` listeners."""
        for path in list(self._by_path):
            alive = [item for item in self._by_path[path] if item.active]
            if alive:
                self._by_path[path] = alive
            else:
                del self._by_path[path]


__all__ = ["EventType", "Listener", "ListenerTable", "safe_call"]
