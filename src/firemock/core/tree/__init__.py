"""
Ordered tree storage.

Components:
- Node: immutable value-or-children container with a priority
- NodeWrite variants: written data resolved before mutation
- OrderedTree: copy-on-write tree addressed by paths
"""

from firemock.core.tree.node import EMPTY, Node
from firemock.core.tree.ordered_tree import OrderedTree
from firemock.core.tree.writes import (
    AbsentWrite,
    NodeWrite,
    ScalarWrite,
    SubtreeWrite,
    apply_write,
    parse_write,
)

__all__ = [
    "EMPTY",
    "Node",
    "OrderedTree",
    "AbsentWrite",
    "NodeWrite",
    "ScalarWrite",
    "SubtreeWrite",
    "apply_write",
    "parse_write",
]
