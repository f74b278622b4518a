"""Authentication stub.

No credential is ever validated: every request succeeds unless a failure was
injected for it. The stub only tracks the resulting auth state and notifies
``on_auth`` observers when it changes.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from firemock.core.events import safe_call

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60


class AuthResult(BaseModel):
    """Payload delivered to a successful ``auth`` callback."""

    auth: Dict[str, Any] = Field(default_factory=dict)
    expires: int
    token: Optional[str] = None


class AuthStub:
    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._state: Optional[AuthResult] = None
        self._observers: List[Callable[[Optional[AuthResult]], Any]] = []

    @property
    def state(self) -> Optional[AuthResult]:
        return self._state

    def authenticate(self, credential: Any) -> AuthResult:
        token = credential if isinstance(credential, str) else None
        payload: Dict[str, Any] = {"uid": "mock-user", "provider": "custom"}
        if isinstance(credential, dict):
            payload.update(credential)
        elif token is not None:
            payload["token"] = token
        result = AuthResult(auth=payload, expires=int(self._clock()) + self.ttl_seconds, token=token)
        self._set_state(result)
        return result

    def change_state(self, auth_data: Optional[Dict[str, Any]]) -> None:
        """Replace the auth state directly, as if the server pushed it."""
        if auth_data is None:
            self._set_state(None)
            return
        data = dict(auth_data)
        expires = data.pop("expires", int(self._clock()) + self.ttl_seconds)
        token = data.pop("token", None)
        auth = data.pop("auth", data)
        self._set_state(AuthResult(auth=auth, expires=expires, token=token))

    def unauth(self) -> None:
        self._set_state(None)

    def add_observer(self, callback: Callable[[Optional[AuthResult]], Any]) -> None:
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[Optional[AuthResult]], Any]) -> None:
        self._observers = [item for item in self._observers if item != callback]

    def _set_state(self, state: Optional[AuthResult]) -> None:
        if state == self._state:
            return
        self._state = state
        logger.debug("Auth state changed: %s", "signed out" if state is None else state.auth.get("uid"))
        for observer in list(self._observers):
            safe_call(observer, state, description="auth observer")


__all__ = ["AuthResult", "AuthStub", "DEFAULT_TTL_SECONDS"]
