from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Callable

from rich.logging import RichHandler


def log_calls(logger_name: str | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to log calls and their duration at DEBUG level, and errors with traceback."""

    def _decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        name = logger_name or func.__module__
        logger = logging.getLogger(name)

        @wraps(func)
        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            if not logger.isEnabledFor(logging.DEBUG):
                return func(*args, **kwargs)
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.exception("Error in %s: %s", func.__qualname__, e)
                raise
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug("%s returned %r in %.2fms", func.__qualname__, result, elapsed_ms)
            return result

        return _wrapper

    return _decorator


def configure_logging(verbose: bool = False) -> None:
    """Route firemock logs through rich; DEBUG when ``verbose``."""
    level = logging.DEBUG if verbose else logging.WARNING
    package_logger = logging.getLogger("firemock")
    if not any(isinstance(handler, RichHandler) for handler in package_logger.handlers):
        package_logger.addHandler(RichHandler(show_path=False, rich_tracebacks=True))
    package_logger.setLevel(level)
