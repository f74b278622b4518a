from __future__ import annotations

"""Load ``ClientConfig`` from a YAML file."""

from pydantic import ValidationError

from firemock.config import ClientConfig
from firemock.io.loaders.errors import LoaderError
from firemock.io.loaders.fixture_loader import read_data_file


def load_config(path: str) -> ClientConfig:
    """Expected format::

    auto_flush: true        # or false, or a delay in milliseconds
    auth_ttl_seconds: 3600
    """
    data = read_data_file(path) or {}
    try:
        return ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise LoaderError(path, "Invalid client configuration", cause=exc) from exc


__all__ = ["load_config"]
