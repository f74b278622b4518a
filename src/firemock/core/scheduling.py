"""Automatic flush scheduling.

``True`` flushes right after each enqueue, a number of milliseconds schedules
a flush on a timer, and ``False`` leaves flushing to the caller. Every mode
ends up calling the same flush function.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable, Optional, Union

logger = logging.getLogger(__name__)

AutoFlushSetting = Union[bool, int, float]


def validate_setting(setting: Any) -> AutoFlushSetting:
    if isinstance(setting, bool):
        return setting
    if isinstance(setting, (int, float)) and setting >= 0:
        return setting
    raise ValueError(f"auto_flush expects True, False or a non-negative delay in ms, got {setting!r}")


class FlushScheduler:
    """Decides when the owning client state flushes on its own."""

    def __init__(self, flush: Callable[[], Any], setting: AutoFlushSetting = False):
        self._flush = flush
        self._setting: AutoFlushSetting = validate_setting(setting)
        self._handle: Optional[Union[asyncio.TimerHandle, threading.Timer]] = None
        self._lock = threading.Lock()

    @property
    def setting(self) -> AutoFlushSetting:
        return self._setting

    @property
    def immediate(self) -> bool:
        return self._setting is True

    @property
    def scheduled(self) -> bool:
        return self._handle is not None

    def configure(self, setting: AutoFlushSetting) -> None:
        self._setting = validate_setting(setting)
        if self._setting is False:
            self.cancel()
        logger.debug("Auto flush set to %r", self._setting)

    def on_enqueue(self) -> None:
        if self._setting is True:
            self._flush()
        elif self._setting is not False:
            self.schedule(self._setting)

    def schedule(self, delay_ms: float) -> None:
        """Arrange one flush ``delay_ms`` from now unless one is already due."""
        with self._lock:
            if self._handle is not None:
                return
            delay = max(float(delay_ms), 0.0) / 1000.0
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                timer = threading.Timer(delay, self._run)
                timer.daemon = True
                self._handle = timer
                timer.start()
            else:
                self._handle = loop.call_later(delay, self._run)
        logger.debug("Flush scheduled in %.3fs", delay)

    def cancel(self) -> None:
        with self._lock:
            handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()

    def _run(self) -> None:
        with self._lock:
            self._handle = None
        self._flush()


__all__ = ["AutoFlushSetting", "FlushScheduler", "validate_setting"]
