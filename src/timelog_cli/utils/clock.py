"""Clock sources returning the current instant in milliseconds since the epoch."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Anything that can tell the current time in epoch milliseconds."""

    def now_ms(self) -> int: ...


class SystemClock:
    """Wall clock backed by ``time.time()``."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class FixedClock:
    """Manually driven clock for deterministic tests and replays."""

    def __init__(self, start_ms: int = 0):
        self._now = int(start_ms)

    def now_ms(self) -> int:
        return self._now

    def set(self, now_ms: int) -> None:
        """Jump to an absolute instant."""
        self._now = int(now_ms)

    def advance(self, delta_ms: int) -> int:
        """Move forward by *delta_ms* and return the new instant."""
        self._now += int(delta_ms)
        return self._now
