"""
Tick driver: the cancellable repeating timer behind a running match.

A daemon thread waits on a stop event between ticks, measures the real
time elapsed since the previous tick and feeds it to
:meth:`MatchEngine.advance`.  Cancelling only prevents future ticks; the
engine is consistent after every ``advance`` so nothing is rolled back.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from elixir_counter.core.clock import Clock, MonotonicClock
from elixir_counter.core.engine import MatchEngine
from elixir_counter.utils.constants import DEFAULT_TICK_INTERVAL

logger = logging.getLogger(__name__)


class TickDriver:
    """
    Calls ``engine.advance(dt)`` every *interval* seconds while running.

    Parameters
    ----------
    engine : MatchEngine
        Engine to drive.
    clock : Clock, optional
        Source of monotonic readings.  Defaults to :class:`MonotonicClock`.
    interval : float
        Seconds to wait between ticks.  Engine results do not depend on it.
    """

    def __init__(
        self,
        engine: MatchEngine,
        clock: Optional[Clock] = None,
        interval: float = DEFAULT_TICK_INTERVAL,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.engine = engine
        self.clock: Clock = clock or MonotonicClock()
        self.interval = interval

        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self._last: float = 0.0
        self._guard = threading.Lock()

    @property
    def is_alive(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        """Start ticking (restarting if already running)."""
        self.cancel()
        with self._guard:
            self._stop = threading.Event()
            self._last = self.clock.now()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop,),
                name="elixir-tick-driver",
                daemon=True,
            )
            self._thread.start()
        logger.debug("Tick driver started (interval=%.3fs)", self.interval)

    def cancel(self, timeout: Optional[float] = None) -> None:
        """Stop future ticks and wait for the thread to exit."""
        with self._guard:
            thread = self._thread
            self._stop.set()
            self._thread = None
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout)
        logger.debug("Tick driver cancelled")

    def tick(self) -> float:
        """Run one driver iteration synchronously; return the delta applied."""
        now = self.clock.now()
        dt = max(0.0, now - self._last)
        self._last = now
        self.engine.advance(dt)
        return dt

    # ── thread body ───────────────────────────────────────────────────────

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            try:
                self.tick()
            except Exception:
                # engine state is committed before observers run
                logger.exception("Tick failed")
            if not self.engine.is_running:
                logger.debug("Engine stopped; tick driver exiting")
                break
