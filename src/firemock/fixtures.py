"""Data loaded into a ``MockClient`` created without explicit data."""

from __future__ import annotations

import copy
from typing import Any, Dict

DEFAULT_DATA: Dict[str, Any] = {
    "data": {
        "a": {"aString": "alpha", "aNumber": 1, "aBoolean": False},
        "b": {"aString": "bravo", "aNumber": 2, "aBoolean": True},
        "c": {"aString": "charlie", "aNumber": 3, "aBoolean": True},
        "d": {"aString": "delta", "aNumber": 4, "aBoolean": True},
        "e": {"aString": "echo", "aNumber": 5},
    },
    "index": {
        "b": True,
        "c": 1,
        "e": False,
        "z": True,
    },
    "ordered": {
        "null_a": {"aNumber": 0, "aLetter": "a"},
        "null_b": {"aNumber": 0, "aLetter": "b"},
        "null_c": {"aNumber": 0, "aLetter": "c"},
        "num_1_a": {".priority": 1, "aNumber": 1},
        "num_1_b": {".priority": 1, "aNumber": 1},
        "num_2": {".priority": 2, "aNumber": 2},
        "num_3": {".priority": 3, "aNumber": 3},
        "char_a_1": {".priority": "a", "aNumber": 1, "aLetter": "a"},
        "char_a_2": {".priority": "a", "aNumber": 2, "aLetter": "a"},
        "char_b": {".priority": "b", "aLetter": "b"},
        "char_c": {".priority": "c", "aLetter": "c"},
    },
}


def default_data() -> Dict[str, Any]:
    """A private copy of ``DEFAULT_DATA``."""
    return copy.deepcopy(DEFAULT_DATA)


__all__ = ["DEFAULT_DATA", "default_data"]
