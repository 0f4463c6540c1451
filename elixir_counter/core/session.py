"""
MatchSession: an engine and its tick driver wired together.

This is the surface a presentation adapter talks to: lifecycle commands
start and stop the driver alongside the engine, and closing the session
guarantees no background ticking outlives it.
"""

from __future__ import annotations

from typing import Callable, Optional

from elixir_counter.core.clock import Clock
from elixir_counter.core.config import MatchConfig
from elixir_counter.core.driver import TickDriver
from elixir_counter.core.engine import MatchEngine, Observer
from elixir_counter.core.state import MatchSnapshot
from elixir_counter.utils.constants import DEFAULT_TICK_INTERVAL


class MatchSession:
    """Owns one :class:`MatchEngine` and one :class:`TickDriver`."""

    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        clock: Optional[Clock] = None,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
    ) -> None:
        self.engine = MatchEngine(config)
        self.driver = TickDriver(self.engine, clock=clock, interval=tick_interval)
        self.has_started: bool = False

    # ── lifecycle ─────────────────────────────────────────────────────────

    def start(self) -> None:
        self.driver.cancel()
        self.engine.start()
        self.has_started = True
        self.driver.start()

    def reset(self) -> None:
        self.driver.cancel()
        self.engine.reset()
        self.has_started = False

    def pause(self) -> None:
        self.engine.pause()
        self.driver.cancel()

    def resume(self) -> bool:
        if not self.has_started:
            return False
        resumed = self.engine.resume()
        if resumed:
            self.driver.start()
        return resumed

    def toggle_start(self) -> None:
        """Start when idle, reset when running."""
        if self.engine.is_running:
            self.reset()
        else:
            self.start()

    def spend(self, amount: int) -> int:
        return self.engine.spend(amount)

    # ── observation ───────────────────────────────────────────────────────

    def snapshot(self) -> MatchSnapshot:
        return self.engine.snapshot()

    def subscribe(self, callback: Observer) -> Callable[[], None]:
        return self.engine.subscribe(callback)

    # ── teardown ──────────────────────────────────────────────────────────

    def close(self) -> None:
        self.driver.cancel()

    def __enter__(self) -> "MatchSession":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
