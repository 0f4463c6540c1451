"""
Clock sources for the tick driver.

Engine code never reads real time directly; it is handed deltas computed
from one of these.
"""

from __future__ import annotations

import threading
import time
from typing import Protocol


class Clock(Protocol):
    """Monotonic clock abstraction."""

    def now(self) -> float:
        """Return monotonic seconds."""


class MonotonicClock:
    """Production clock backed by :func:`time.monotonic`."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """
    Hand-driven clock for tests and headless simulation.

    Parameters
    ----------
    start : float
        Initial reading.
    auto_advance : float
        Seconds added after every :meth:`now` call (0 = frozen until
        :meth:`advance` is called).
    """

    def __init__(self, start: float = 0.0, auto_advance: float = 0.0) -> None:
        self._now = start
        self.auto_advance = auto_advance
        self._lock = threading.Lock()

    def now(self) -> float:
        with self._lock:
            reading = self._now
            self._now += self.auto_advance
            return reading

    def advance(self, seconds: float) -> None:
        with self._lock:
            self._now += seconds
