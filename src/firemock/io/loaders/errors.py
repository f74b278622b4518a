from __future__ import annotations

"""Errors raised while reading fixture, scenario and config files."""

import json
import os
from typing import Iterable, Optional

import yaml
from pydantic import ValidationError

from firemock.errors import InvalidDataError


class LoaderError(RuntimeError):
    """A file could not be turned into data, a scenario or a config.

    ``position`` is ``(line, column)`` (1-based) for syntax errors and
    ``data_path`` the offending location for data the store would reject.
    """

    def __init__(self, file_path: str, message: str, *, cause: Exception | None = None):
        self.file_path = file_path
        self.message = message
        self.cause = cause
        self.position = self._position(cause)
        self.data_path = cause.path if isinstance(cause, InvalidDataError) else None
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        where = self._display_path(self.file_path)
        if self.position is not None:
            where = f"{where}:{self.position[0]}:{self.position[1]}"
        base = f"{self.message} ({where})"
        if isinstance(self.cause, ValidationError):
            return f"{base}: {self._summarize(self.cause.errors())}"
        if isinstance(self.cause, yaml.MarkedYAMLError):
            return f"{base}: {self.cause.problem or self.cause}"
        if self.cause is not None:
            return f"{base}: {self.cause}"
        return base

    @staticmethod
    def _position(cause: Optional[Exception]) -> Optional[tuple]:
        if isinstance(cause, yaml.MarkedYAMLError) and cause.problem_mark is not None:
            return cause.problem_mark.line + 1, cause.problem_mark.column + 1
        if isinstance(cause, json.JSONDecodeError):
            return cause.lineno, cause.colno
        return None

    @staticmethod
    def _display_path(path: str) -> str:
        try:
            return os.path.relpath(path)
        except ValueError:  # pragma: no cover - different drive on Windows
            return path

    @staticmethod
    def _summarize(errors: Iterable[dict]) -> str:
        error_list = list(errors)
        shown = [
            f"{'.'.join(str(part) for part in err.get('loc', ())) or '<root>'}: {err.get('msg') or err.get('type')}"
            for err in error_list[:3]
        ]
        if len(error_list) > len(shown):
            shown.append(f"... ({len(error_list) - len(shown)} more)")
        return "; ".join(shown)

    def __str__(self) -> str:
        return self._build_message()


__all__ = ["LoaderError"]
