"""Time sources for the interval session; swappable for deterministic tests."""

from __future__ import annotations

import threading
import time
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current wall-clock time in epoch seconds."""
    def now(self) -> float:
        ...


class SystemClock:
    """Clock backed by the system wall clock."""

    def now(self) -> float:
        return time.time()


class ManualClock:
    """Virtual clock that only moves when told to.

    The clock may be moved backwards with :meth:`set` to simulate wall-clock
    adjustments.
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._lock = threading.Lock()

    def now(self) -> float:
        with self._lock:
            return self._now

    def advance(self, seconds: float) -> float:
        with self._lock:
            self._now += float(seconds)
            return self._now

    def set(self, timestamp: float) -> None:
        with self._lock:
            self._now = float(timestamp)
