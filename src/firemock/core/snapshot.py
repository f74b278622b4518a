"""Read-only point-in-time views handed to listeners and callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator, List, Optional

from firemock.core import paths
from firemock.core.ordering import Priority
from firemock.core.tree.node import Node

if TYPE_CHECKING:
    from firemock.client import MockClient


@dataclass(frozen=True)
class Snapshot:
    """Immutable snapshot of a location.

    The wrapped ``Node`` is never mutated by the tree (writes replace nodes),
    and ``val()`` builds fresh containers on every call, so a snapshot cannot
    be used to alter live data.
    """

    path: str
    node: Node
    ref: Optional["MockClient"] = None

    @property
    def key(self) -> Optional[str]:
        return paths.key_of(self.path)

    def val(self) -> Any:
        return self.node.to_value()

    def export_val(self) -> Any:
        return self.node.export()

    def get_priority(self) -> Priority:
        return self.node.priority if self.node.exists else None

    def exists(self) -> bool:
        return self.node.exists

    def child(self, relative_path: str) -> "Snapshot":
        child_path = paths.join(self.path, relative_path)
        ref = self.ref.child(relative_path) if self.ref is not None else None
        return Snapshot(path=child_path, node=self.node.descend(paths.split(relative_path)), ref=ref)

    def has_child(self, relative_path: str) -> bool:
        return self.node.descend(paths.split(relative_path)).exists

    def has_children(self) -> bool:
        return self.node.has_children

    def num_children(self) -> int:
        return len(self.node.order) if self.node.value is None else 0

    def keys(self) -> List[str]:
        return list(self.node.order) if self.node.value is None else []

    def __iter__(self) -> Iterator["Snapshot"]:
        for name in self.keys():
            yield self.child(name)

    def for_each(self, callback: Callable[["Snapshot"], Any]) -> bool:
        """Call ``callback`` per child in order; stop early when it returns ``True``."""
        for child in self:
            if callback(child) is True:
                return True
        return False

    def __repr__(self) -> str:
        return f"Snapshot(path={self.path!r}, value={self.val()!r}, priority={self.get_priority()!r})"


__all__ = ["Snapshot"]
