"""In-memory ordered tree addressed by slash-delimited paths."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Sequence

from firemock.core import paths
from firemock.core.ordering import Priority
from firemock.core.tree.node import EMPTY, Node
from firemock.core.tree.writes import AbsentWrite, NodeWrite, ScalarWrite, SubtreeWrite, apply_write, parse_write
from firemock.errors import InvalidDataError

logger = logging.getLogger(__name__)

_WRITE_TYPES = (AbsentWrite, ScalarWrite, SubtreeWrite)


def _rebuild(node: Node, segments: Sequence[str], fn: Callable[[Node], Node]) -> Node:
    if not segments:
        return fn(node)
    head = segments[0]
    return node.with_child(head, _rebuild(node.child(head), segments[1:], fn))


def _as_write(data: Any, path: str) -> NodeWrite:
    if isinstance(data, _WRITE_TYPES):
        return data
    return parse_write(data, path)


class OrderedTree:
    """Copy-on-write tree of ``Node`` objects.

    Every mutation swaps in a new root; previously returned nodes stay valid
    and unchanged, which is what lets the diff engine compare before/after
    states without copying.
    """

    def __init__(self, data: Any = None):
        self._root: Node = EMPTY
        if data is not None:
            self.write("", data)

    @property
    def root(self) -> Node:
        return self._root

    def read(self, path: str) -> Node:
        return self._root.descend(paths.split(path))

    def value(self, path: str) -> Any:
        return self.read(path).to_value()

    def priority(self, path: str) -> Priority:
        return self.read(path).priority

    def ordered_children(self, path: str) -> List[str]:
        return list(self.read(path).order)

    def write(self, path: str, data: Any) -> Node:
        """Replace the subtree at ``path``; returns the new root."""
        write = _as_write(data, path)
        self._swap(path, lambda node: apply_write(node, write))
        return self._root

    def update(self, path: str, values: Mapping[str, Any]) -> Node:
        """Write each relative path in ``values`` below ``path`` in one step."""
        root = self._root
        base = paths.split(path)
        for relative, data in values.items():
            segments = base + paths.split(relative)
            write = _as_write(data, paths.SEPARATOR.join(segments))
            root = _rebuild(root, segments, lambda node, w=write: apply_write(node, w))
        self._set_root(root)
        return self._root

    def remove(self, path: str) -> Node:
        return self.write(path, AbsentWrite())

    def set_priority(self, path: str, priority: Priority) -> Node:
        if not paths.normalize(path):
            raise InvalidDataError("The root location cannot have a priority")
        self._swap(path, lambda node: node.with_priority(priority))
        return self._root

    def _swap(self, path: str, fn: Callable[[Node], Node]) -> None:
        self._set_root(_rebuild(self._root, paths.split(path), fn))

    def _set_root(self, root: Node) -> None:
        if root.priority is not None:
            root = root.with_priority(None)
        logger.debug("Tree root replaced (exists=%s)", root.exists)
        self._root = root


__all__ = ["OrderedTree"]
