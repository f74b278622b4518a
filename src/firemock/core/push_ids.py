"""Chronologically sortable keys for ``push``.

A key is 8 characters of millisecond timestamp followed by 12 random
characters, all drawn from an alphabet whose ASCII order matches its index.
Keys generated within the same millisecond increment the random suffix, so
lexical order always equals generation order.
"""

from __future__ import annotations

import random
import time
from typing import Callable, List, Optional

PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"


class PushIdGenerator:
    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        self._clock = clock
        self._rng = rng or random.Random()
        self._last_time = -1
        self._last_random: List[int] = [0] * 12

    def next_id(self) -> str:
        now = int(self._clock() * 1000)
        duplicate = now == self._last_time
        self._last_time = now

        time_chars = []
        remaining = now
        for _ in range(8):
            time_chars.append(PUSH_CHARS[remaining % 64])
            remaining //= 64
        if remaining:
            raise ValueError("Timestamp does not fit in a push id")
        time_chars.reverse()

        if not duplicate:
            self._last_random = [self._rng.randrange(64) for _ in range(12)]
        else:
            index = 11
            while index >= 0 and self._last_random[index] == 63:
                self._last_random[index] = 0
                index -= 1
            if index >= 0:
                self._last_random[index] += 1

        return "".join(time_chars) + "".join(PUSH_CHARS[value] for value in self._last_random)


__all__ = ["PUSH_CHARS", "PushIdGenerator"]
