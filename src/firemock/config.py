"""Client configuration."""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, field_validator

from firemock.core.auth import DEFAULT_TTL_SECONDS
from firemock.core.scheduling import validate_setting


class ClientConfig(BaseModel):
    """Settings shared by every client derived from one root client.

    ``auto_flush`` is ``False`` (manual), ``True`` (flush right after each
    queued operation) or a delay in milliseconds.
    """

    auto_flush: Union[bool, int, float] = False
    auth_ttl_seconds: int = DEFAULT_TTL_SECONDS

    @field_validator("auto_flush")
    @classmethod
    def validate_auto_flush(cls, v: Union[bool, int, float]) -> Union[bool, int, float]:
        return validate_setting(v)

    @field_validator("auth_ttl_seconds")
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("auth_ttl_seconds must be positive")
        return v


__all__ = ["ClientConfig"]
