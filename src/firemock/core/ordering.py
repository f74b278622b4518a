"""Sibling ordering shared by reads, snapshots and the diff engine.

Children are ordered by priority class first (no priority, then numbers, then
strings), then by priority value, then by key.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Tuple, Union

if TYPE_CHECKING:
    from firemock.core.tree.node import Node

Priority = Union[int, float, str, None]

_NO_PRIORITY = 0
_NUMERIC = 1
_STRING = 2


def is_valid_priority(priority: Any) -> bool:
    if priority is None:
        return True
    if isinstance(priority, bool):
        return False
    return isinstance(priority, (int, float, str))


def sort_key(name: str, priority: Priority) -> Tuple[int, Any, str, str]:
    """Total-order key for a child called ``name`` with ``priority``."""
    if priority is None:
        return (_NO_PRIORITY, 0, "", name)
    if isinstance(priority, str):
        return (_STRING, 0, priority, name)
    return (_NUMERIC, priority, "", name)


def ordered_names(children: Mapping[str, "Node"]) -> List[str]:
    """Names of the existing children in comparator order."""
    return sorted(
        (name for name, child in children.items() if child.exists),
        key=lambda name: sort_key(name, children[name].priority),
    )


def previous_name(order: List[str], name: str) -> Optional[str]:
    """Name preceding ``name`` in ``order``, or ``None`` when it is first."""
    index = order.index(name)
    return order[index - 1] if index > 0 else None


__all__ = [
    "Priority",
    "is_valid_priority",
    "ordered_names",
    "previous_name",
    "sort_key",
]
