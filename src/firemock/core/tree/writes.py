"""Written values resolved into tagged variants before the tree is touched.

Raw data follows the store's JSON conventions: ``None`` removes, mappings
create children, and the meta keys ``.value`` / ``.priority`` carry a leaf
value and an ordering priority at any nesting level::

    {"a": {".priority": 100, ".value": "a"}, "b": {".priority": 5, "x": 1}}
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Union

from firemock.core import paths
from firemock.core.ordering import Priority, is_valid_priority
from firemock.core.tree.node import EMPTY, Node, Scalar
from firemock.errors import InvalidDataError, InvalidPathError

VALUE_KEY = ".value"
PRIORITY_KEY = ".priority"
META_KEYS = frozenset({VALUE_KEY, PRIORITY_KEY})


@dataclass(frozen=True)
class AbsentWrite:
    """Removes the node and everything below it."""


@dataclass(frozen=True)
class ScalarWrite:
    value: Scalar
    priority: Priority = None
    has_priority: bool = False


@dataclass(frozen=True)
class SubtreeWrite:
    children: Dict[str, "NodeWrite"] = field(default_factory=dict)
    priority: Priority = None
    has_priority: bool = False


NodeWrite = Union[AbsentWrite, ScalarWrite, SubtreeWrite]


def _check_priority(priority: Any, path: str) -> Priority:
    if not is_valid_priority(priority):
        raise InvalidDataError(f"Invalid priority {priority!r}", path=path)
    if isinstance(priority, float) and not math.isfinite(priority):
        raise InvalidDataError(f"Invalid priority {priority!r}", path=path)
    return priority


def _check_scalar(value: Any, path: str) -> Scalar:
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidDataError(f"Cannot store non-finite number {value!r}", path=path)
    return value


def _as_mapping(data: Any) -> Mapping[str, Any]:
    if isinstance(data, (list, tuple)):
        return {str(index): item for index, item in enumerate(data)}
    return data


def parse_write(data: Any, path: str = "") -> NodeWrite:
    """Resolve raw data into a ``NodeWrite``.

    Raises:
        InvalidDataError: unsupported value type, bad priority, or
            ``.value`` mixed with child keys.
    """
    if data is None:
        return AbsentWrite()
    if isinstance(data, (bool, int, float, str)):
        return ScalarWrite(value=_check_scalar(data, path))
    if not isinstance(data, (Mapping, list, tuple)):
        raise InvalidDataError(f"Unsupported value of type {type(data).__name__}", path=path)

    mapping = _as_mapping(data)
    has_priority = PRIORITY_KEY in mapping
    priority = _check_priority(mapping.get(PRIORITY_KEY), path) if has_priority else None

    if VALUE_KEY in mapping:
        extra = sorted(str(key) for key in mapping if key not in META_KEYS)
        if extra:
            raise InvalidDataError(f"'.value' cannot be combined with child keys {extra}", path=path)
        inner = parse_write(mapping[VALUE_KEY], path)
        if isinstance(inner, ScalarWrite):
            return ScalarWrite(value=inner.value, priority=priority, has_priority=has_priority)
        if isinstance(inner, SubtreeWrite):
            return SubtreeWrite(children=inner.children, priority=priority, has_priority=has_priority)
        return inner

    children: Dict[str, NodeWrite] = {}
    for raw_key, raw_value in mapping.items():
        if raw_key in META_KEYS:
            continue
        key = str(raw_key)
        child_path = f"{path}/{key}" if path else key
        try:
            paths.validate_key(key, child_path)
        except InvalidPathError as exc:
            raise InvalidDataError(f"Invalid key {key!r}", path=path) from exc
        children[key] = parse_write(raw_value, child_path)
    return SubtreeWrite(children=children, priority=priority, has_priority=has_priority)


def apply_write(existing: Node, write: NodeWrite) -> Node:
    """Build the node that results from applying ``write`` over ``existing``.

    A node keeps its previous priority unless the write names one. A
    subtree write that leaves no existing child yields ``EMPTY``; an empty
    mapping is an absent value and carries no priority.
    """
    if isinstance(write, AbsentWrite):
        return EMPTY
    priority = write.priority if write.has_priority else existing.priority
    if isinstance(write, ScalarWrite):
        return Node(value=write.value, priority=priority)

    children: Dict[str, Node] = {}
    for name, child_write in write.children.items():
        child = apply_write(existing.child(name), child_write)
        if child.exists:
            children[name] = child
    if not children:
        return EMPTY
    return Node(children=children, priority=priority)


__all__ = [
    "AbsentWrite",
    "META_KEYS",
    "NodeWrite",
    "PRIORITY_KEY",
    "ScalarWrite",
    "SubtreeWrite",
    "VALUE_KEY",
    "apply_write",
    "parse_write",
]
