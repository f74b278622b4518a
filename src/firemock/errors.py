"""Exception types raised synchronously by the mock client."""

from __future__ import annotations


class FiremockError(Exception):
    """Base class for errors raised or delivered by firemock."""


class InvalidPathError(FiremockError, ValueError):
    """A path contains a segment the store would reject."""

    def __init__(self, path: str, segment: str | None = None):
        self.path = path
        self.segment = segment
        if segment is None:
            message = f"Invalid path: {path!r}"
        else:
            message = f"Invalid path segment {segment!r} in {path!r}"
        super().__init__(message)


class InvalidDataError(FiremockError, ValueError):
    """Written data contains an invalid key or priority."""

    def __init__(self, message: str, *, path: str = ""):
        self.path = path
        self.message = message
        where = f" at '/{path}'" if path else ""
        super().__init__(f"{message}{where}")


__all__ = ["FiremockError", "InvalidPathError", "InvalidDataError"]
