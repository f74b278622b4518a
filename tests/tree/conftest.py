"""
Shared fixtures for ordered tree tests.
"""

import pytest

from firemock.core.tree import EMPTY, Node, OrderedTree, apply_write, parse_write


def _build(data) -> Node:
    return apply_write(EMPTY, parse_write(data))


@pytest.fixture
def build():
    """Turn raw data into a Node through the same write path as the client."""
    return _build


@pytest.fixture
def tree() -> OrderedTree:
    """A tree holding a few prioritized children under /list."""
    return OrderedTree(
        {
            "list": {
                "a": {".priority": 1, ".value": "alpha"},
                "b": {".priority": 2, ".value": "bravo"},
                "c": {".priority": 3, ".value": "charlie"},
            }
        }
    )
