"""Transaction evaluation.

There is a single writer, so there is no contention to simulate: a
transaction commits when its update function returns a value and aborts when
it returns ``None`` or raises.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class TransactionOutcome(BaseModel):
    committed: bool
    value: Any = None
    error: Optional[BaseException] = None

    model_config = {"arbitrary_types_allowed": True}

    @classmethod
    def commit(cls, value: Any) -> "TransactionOutcome":
        return cls(committed=True, value=value)

    @classmethod
    def abort(cls, error: Optional[BaseException] = None) -> "TransactionOutcome":
        return cls(committed=False, error=error)


class TransactionEngine:
    """Runs update functions against a private copy of the current value."""

    def evaluate(self, update_fn: Callable[[Any], Any], current: Any) -> TransactionOutcome:
        try:
            result = update_fn(copy.deepcopy(current))
        except Exception as exc:
            logger.debug("Transaction update function raised %r", exc)
            return TransactionOutcome.abort(exc)
        if result is None:
            return TransactionOutcome.abort()
        return TransactionOutcome.commit(result)


__all__ = ["TransactionEngine", "TransactionOutcome"]
