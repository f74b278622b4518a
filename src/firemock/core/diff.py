"""
Child-level diffing between two states of one location.

Given the node at a path before and after a mutation, the diff engine
produces the ordered list of child events a realtime client would observe:

1. ``child_removed`` for every child that disappeared (old order)
2. walking the new order, with ``prev_name`` taken from the new order:
   - ``child_added`` for new children
   - ``child_changed`` for children whose value or priority changed in place
   - ``child_moved`` for children whose own priority change altered their
     position among the surviving siblings (preceded by ``child_changed``
     when the value changed as well)

Siblings that only shift because others were inserted or removed produce no
event.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from firemock.core.events import EventType
from firemock.core.tree.node import Node


@dataclass(frozen=True)
class ChildChange:
    """One child-level event computed for a parent location."""

    event_type: EventType
    name: str
    node: Node
    prev_name: Optional[str] = None


@dataclass(frozen=True)
class PathDiff:
    """Everything that changed at one listened-to location."""

    path: str
    before: Node
    after: Node
    changes: List[ChildChange] = field(default_factory=list)


def _ranks(order: List[str], keep: set) -> Dict[str, int]:
    return {name: index for index, name in enumerate(n for n in order if n in keep)}


def _content_changed(before: Node, after: Node) -> bool:
    return not before.with_priority(after.priority).same_as(after)


def diff_children(before: Node, after: Node) -> List[ChildChange]:
    """Ordered child events turning ``before`` into ``after``."""
    old_order = list(before.order)
    new_order = list(after.order)
    old_names = set(old_order)
    new_names = set(new_order)

    changes: List[ChildChange] = []
    for name in old_order:
        if name not in new_names:
            changes.append(ChildChange(event_type=EventType.CHILD_REMOVED, name=name, node=before.child(name)))

    common = old_names & new_names
    old_rank = _ranks(old_order, common)
    new_rank = _ranks(new_order, common)

    prev_name: Optional[str] = None
    for name in new_order:
        node = after.child(name)
        if name not in old_names:
            changes.append(
                ChildChange(event_type=EventType.CHILD_ADDED, name=name, node=node, prev_name=prev_name)
            )
        else:
            previous = before.child(name)
            if not previous.same_as(node):
                moved = previous.priority != node.priority and old_rank[name] != new_rank[name]
                if not moved or _content_changed(previous, node):
                    changes.append(
                        ChildChange(event_type=EventType.CHILD_CHANGED, name=name, node=node, prev_name=prev_name)
                    )
                if moved:
                    changes.append(
                        ChildChange(event_type=EventType.CHILD_MOVED, name=name, node=node, prev_name=prev_name)
                    )
        prev_name = name
    return changes


def diff_path(path: str, old_root: Node, new_root: Node) -> Optional[PathDiff]:
    """Diff the location ``path`` between two roots; ``None`` when unchanged."""
    segments = [segment for segment in path.split("/") if segment]
    before = old_root.descend(segments)
    after = new_root.descend(segments)
    if before is after or (not before.exists and not after.exists):
        return None
    if before.same_as(after):
        return None
    return PathDiff(path=path, before=before, after=after, changes=diff_children(before, after))


__all__ = ["ChildChange", "PathDiff", "diff_children", "diff_path"]
