"""Path utilities for slash-delimited database locations.

Paths are stored in canonical form: no leading or trailing separator and no
empty segments. The root location is the empty string.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from firemock.errors import InvalidPathError

SEPARATOR = "/"
FORBIDDEN_CHARACTERS = frozenset(".#$[]")


def validate_key(key: str, path: str = "") -> str:
    """Return ``key`` unchanged or raise ``InvalidPathError``."""
    if not isinstance(key, str) or not key:
        raise InvalidPathError(path or str(key), str(key))
    for ch in key:
        if ch in FORBIDDEN_CHARACTERS or ch == SEPARATOR or ord(ch) < 0x20 or ord(ch) == 0x7F:
            raise InvalidPathError(path or key, key)
    return key


def split(path: str) -> List[str]:
    """Split a path into validated segments, ignoring empty ones."""
    if not isinstance(path, str):
        raise InvalidPathError(repr(path))
    segments = [segment for segment in path.split(SEPARATOR) if segment]
    for segment in segments:
        validate_key(segment, path)
    return segments


def normalize(path: str) -> str:
    """Canonicalize a path: ``'/a//b/'`` becomes ``'a/b'``."""
    return SEPARATOR.join(split(path))


def join(base: str, relative: str) -> str:
    """Resolve ``relative`` below the canonical path ``base``."""
    tail = normalize(relative)
    if not base:
        return tail
    if not tail:
        return base
    return f"{base}{SEPARATOR}{tail}"


def parent_of(path: str) -> Optional[str]:
    if not path:
        return None
    head, _sep, _tail = path.rpartition(SEPARATOR)
    return head


def key_of(path: str) -> Optional[str]:
    if not path:
        return None
    return path.rpartition(SEPARATOR)[2]


def depth(path: str) -> int:
    return 0 if not path else path.count(SEPARATOR) + 1


@dataclass(frozen=True)
class DatabaseUrl:
    """A parsed ``scheme://host/path`` location.

    ``root_url`` always ends with a separator unless the URL had no host
    (``'Mock://'``), in which case it is just ``scheme://``.
    """

    root_url: str
    path: str

    @classmethod
    def parse(cls, url: str) -> "DatabaseUrl":
        scheme, marker, rest = url.partition("://")
        if not marker:
            # No scheme: treat the whole string as a path under the default root.
            return cls(root_url="Mock://", path=normalize(url))
        host, _sep, path = rest.partition(SEPARATOR)
        root = f"{scheme}://{host}/" if host else f"{scheme}://"
        return cls(root_url=root, path=normalize(path))


__all__ = [
    "SEPARATOR",
    "DatabaseUrl",
    "depth",
    "join",
    "key_of",
    "normalize",
    "parent_of",
    "split",
    "validate_key",
]
