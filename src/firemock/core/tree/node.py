"""Immutable tree nodes.

Nodes are never mutated after construction; writes build new nodes along the
written path and share every untouched subtree with the previous tree. A
snapshot can therefore hold a node without copying it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from firemock.core.ordering import Priority, ordered_names

Scalar = Union[str, int, float, bool]


@dataclass(frozen=True, eq=False)
class Node:
    """A value-or-children container with an optional priority.

    ``value`` and ``children`` are mutually exclusive. A node with neither
    does not exist; it is only kept inside its parent while it carries a
    priority that was set ahead of its first write.
    """

    value: Optional[Scalar] = None
    children: Mapping[str, "Node"] = field(default_factory=dict)
    priority: Priority = None

    @cached_property
    def exists(self) -> bool:
        if self.value is not None:
            return True
        return any(child.exists for child in self.children.values())

    @property
    def is_empty(self) -> bool:
        """True when the node carries nothing at all and can be pruned."""
        return self.value is None and not self.children and self.priority is None

    @property
    def has_children(self) -> bool:
        return self.value is None and any(child.exists for child in self.children.values())

    @cached_property
    def order(self) -> List[str]:
        return ordered_names(self.children)

    def child(self, name: str) -> "Node":
        return self.children.get(name, EMPTY)

    def descend(self, segments: Iterable[str]) -> "Node":
        node = self
        for segment in segments:
            node = node.child(segment)
            if node is EMPTY:
                break
        return node

    def with_child(self, name: str, child: "Node") -> "Node":
        """Return a copy with ``name`` replaced; a scalar value is discarded.

        Removing the last existing child collapses a node that existed into
        ``EMPTY``, dropping its priority along with it.
        """
        children: Dict[str, Node] = dict(self.children) if self.value is None else {}
        if child.is_empty:
            children.pop(name, None)
        else:
            children[name] = child
        rebuilt = Node(value=None, children=children, priority=self.priority)
        if child.is_empty and self.exists and not rebuilt.exists:
            return EMPTY
        return rebuilt

    def with_priority(self, priority: Priority) -> "Node":
        return replace(self, priority=priority)

    def to_value(self) -> Any:
        """Plain Python data for this node; ``None`` when it does not exist."""
        if self.value is not None:
            return self.value
        if not self.exists:
            return None
        return {name: self.children[name].to_value() for name in self.order}

    def export(self) -> Any:
        """Like ``to_value`` but keeps priorities under ``.priority``."""
        if not self.exists:
            return None
        if self.value is not None:
            if self.priority is None:
                return self.value
            return {".value": self.value, ".priority": self.priority}
        exported: Dict[str, Any] = {name: self.children[name].export() for name in self.order}
        if self.priority is not None:
            exported[".priority"] = self.priority
        return exported

    def same_as(self, other: "Node") -> bool:
        """Structural equality that tells ``True`` apart from ``1``."""
        if self is other:
            return True
        if self.priority != other.priority:
            return False
        if self.value is not None or other.value is not None:
            return type(self.value) is type(other.value) and self.value == other.value
        if self.order != other.order:
            return False
        return all(self.children[name].same_as(other.children[name]) for name in self.order)

    def __repr__(self) -> str:
        return f"Node(value={self.to_value()!r}, priority={self.priority!r})"


EMPTY = Node()


__all__ = ["EMPTY", "Node", "Scalar"]
