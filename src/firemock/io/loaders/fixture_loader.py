from __future__ import annotations

"""Load initial database contents from YAML or JSON files."""

import json
import logging
import os
from typing import Any

import yaml

from firemock.core.tree import parse_write
from firemock.errors import InvalidDataError
from firemock.io.loaders.errors import LoaderError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def read_data_file(path: str) -> Any:
    """Parse ``path`` as JSON (``.json``) or YAML (anything else)."""
    if not os.path.exists(path):
        raise LoaderError(path, "File not found")
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.endswith(".json"):
                return json.load(f)
            return yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise LoaderError(path, "Could not parse file", cause=exc) from exc


def load_fixture(path: str) -> Any:
    """Read database contents and check they can be stored.

    Expected format (YAML shown; JSON works the same)::

        data:
          a: {.priority: 1, .value: alpha}
          b: bravo
    """
    data = read_data_file(path)
    try:
        parse_write(data)
    except InvalidDataError as exc:
        raise LoaderError(path, "Invalid fixture data", cause=exc) from exc
    logger.info("Loaded fixture from %s", path)
    return data


__all__ = ["load_fixture", "read_data_file"]
