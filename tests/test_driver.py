"""
Tests for the clock sources, tick driver, match session and recorder.

Threaded tests use :class:`ManualClock` so every tick applies a known
delta regardless of scheduler jitter.
"""

from __future__ import annotations

import time
from typing import Callable

import numpy as np
import pytest

from elixir_counter.core.clock import ManualClock, MonotonicClock
from elixir_counter.core.config import MatchConfig
from elixir_counter.core.driver import TickDriver
from elixir_counter.core.engine import MatchEngine
from elixir_counter.core.recorder import MatchRecorder
from elixir_counter.core.session import MatchSession
from elixir_counter.core.state import MatchSnapshot, PhaseSpec
from elixir_counter.utils.constants import REGULATION_DURATION, STARTING_ELIXIR

# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def _wait_for(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    """Poll *predicate* until it holds or *timeout* expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.001)
    return predicate()


def _short_config(seconds: int = 1) -> MatchConfig:
    return MatchConfig(phases=(PhaseSpec(seconds),), overdraw_allowance=0)


# ═══════════════════════════════════════════════════════════════════════════════
# Clocks
# ═══════════════════════════════════════════════════════════════════════════════


class TestClocks:
    def test_monotonic_clock_never_goes_back(self) -> None:
        clock = MonotonicClock()
        a = clock.now()
        b = clock.now()
        assert b >= a

    def test_manual_clock(self) -> None:
        clock = ManualClock(start=10.0)
        assert clock.now() == 10.0
        clock.advance(2.5)
        assert clock.now() == 12.5

    def test_manual_clock_auto_advance(self) -> None:
        clock = ManualClock(auto_advance=0.5)
        assert [clock.now() for _ in range(3)] == [0.0, 0.5, 1.0]


# ═══════════════════════════════════════════════════════════════════════════════
# Tick driver
# ═══════════════════════════════════════════════════════════════════════════════


class TestTickDriver:
    """Repeating timer that feeds real time to the engine."""

    def test_tick_applies_elapsed_time(self) -> None:
        clock = ManualClock()
        engine = MatchEngine()
        engine.start()
        driver = TickDriver(engine, clock=clock)
        clock.advance(1.0)
        assert driver.tick() == 1.0
        assert engine.remaining_seconds == REGULATION_DURATION - 1

    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError):
            TickDriver(MatchEngine(), interval=0)

    def test_cancel_before_start_is_harmless(self) -> None:
        driver = TickDriver(MatchEngine())
        driver.cancel()
        assert not driver.is_alive

    def test_thread_advances_and_cancels(self) -> None:
        engine = MatchEngine()
        engine.start()
        driver = TickDriver(engine, clock=ManualClock(auto_advance=0.5), interval=0.001)
        driver.start()
        try:
            assert _wait_for(lambda: engine.remaining_seconds <= REGULATION_DURATION - 10)
        finally:
            driver.cancel()
        assert not driver.is_alive

        frozen = engine.remaining_seconds
        time.sleep(0.05)
        assert engine.remaining_seconds == frozen

    def test_thread_exits_at_match_end(self) -> None:
        engine = MatchEngine(_short_config(1))
        engine.start()
        driver = TickDriver(engine, clock=ManualClock(auto_advance=0.5), interval=0.001)
        driver.start()
        assert _wait_for(lambda: not driver.is_alive)
        assert engine.is_finished
        driver.cancel()

    def test_failing_observer_does_not_stop_ticking(self) -> None:
        """An observer error is logged; the match keeps running and ticking."""
        engine = MatchEngine()
        calls = []

        def _flaky(snap: MatchSnapshot) -> None:
            calls.append(snap)
            if len(calls) == 3:
                raise RuntimeError("observer failure")

        engine.subscribe(_flaky)
        engine.start()
        driver = TickDriver(engine, clock=ManualClock(auto_advance=0.1), interval=0.001)
        driver.start()
        try:
            assert _wait_for(lambda: engine.remaining_seconds <= REGULATION_DURATION - 2)
            assert driver.is_alive
            assert engine.is_running
        finally:
            driver.cancel()

    def test_restart_does_not_credit_paused_time(self) -> None:
        clock = ManualClock()
        engine = MatchEngine()
        engine.start()
        driver = TickDriver(engine, clock=clock, interval=60.0)
        driver.start()
        driver.cancel()
        clock.advance(30.0)  # time spent "paused"
        driver.start()
        driver.cancel()
        clock.advance(1.0)
        driver.tick()
        assert engine.remaining_seconds == REGULATION_DURATION - 1


# ═══════════════════════════════════════════════════════════════════════════════
# Session
# ═══════════════════════════════════════════════════════════════════════════════


class TestMatchSession:
    """Engine + driver lifecycle."""

    def test_lifecycle_controls_driver(self) -> None:
        with MatchSession(clock=ManualClock(), tick_interval=0.01) as session:
            session.start()
            assert session.driver.is_alive
            assert session.snapshot().is_running

            session.pause()
            assert not session.driver.is_alive
            assert not session.snapshot().is_running

            assert session.resume()
            assert session.driver.is_alive

            session.reset()
            assert not session.driver.is_alive
            snap = session.snapshot()
            assert snap.remaining_seconds == REGULATION_DURATION
            assert snap.resource == STARTING_ELIXIR

    def test_resume_before_first_start(self) -> None:
        with MatchSession(clock=ManualClock()) as session:
            assert session.resume() is False
            assert not session.driver.is_alive

    def test_toggle_start(self) -> None:
        with MatchSession(clock=ManualClock(), tick_interval=0.01) as session:
            session.toggle_start()
            assert session.engine.is_running
            session.toggle_start()
            assert not session.engine.is_running
            assert not session.has_started

    def test_close_cancels_driver(self) -> None:
        session = MatchSession(clock=ManualClock(), tick_interval=0.01)
        session.start()
        session.close()
        assert not session.driver.is_alive

    def test_spend_and_subscribe(self) -> None:
        with MatchSession(clock=ManualClock()) as session:
            seen = []
            session.subscribe(seen.append)
            assert session.spend(3) == 3
            assert seen[-1].resource == STARTING_ELIXIR - 3

    def test_pause_from_observer_on_driver_thread(self) -> None:
        """An observer may pause the session from inside a tick."""
        session = MatchSession(clock=ManualClock(auto_advance=0.5), tick_interval=0.001)

        def _pause_after_two_seconds(snap: MatchSnapshot) -> None:
            if snap.is_running and snap.remaining_seconds <= REGULATION_DURATION - 2:
                session.pause()

        session.subscribe(_pause_after_two_seconds)
        try:
            session.start()
            assert _wait_for(lambda: not session.driver.is_alive)
            assert not session.engine.is_running
            assert session.engine.remaining_seconds == REGULATION_DURATION - 2
        finally:
            session.close()


# ═══════════════════════════════════════════════════════════════════════════════
# Recorder
# ═══════════════════════════════════════════════════════════════════════════════


class TestMatchRecorder:
    """Snapshot timeline and numpy export."""

    def test_records_every_notification(self) -> None:
        clock = ManualClock()
        engine = MatchEngine()
        recorder = MatchRecorder(clock)
        recorder.attach(engine)

        engine.start()
        for _ in range(30):
            clock.advance(0.1)
            engine.advance(0.1)

        assert len(recorder) == 31
        arrays = recorder.to_arrays()
        assert set(arrays) == {"time", "remaining_seconds", "resource", "phase_index", "multiplier"}
        assert all(a.shape == (31,) for a in arrays.values())
        assert arrays["remaining_seconds"][-1] == REGULATION_DURATION - 3
        assert arrays["resource"][0] == STARTING_ELIXIR
        assert recorder.resource_gained() == 1
        assert np.all(np.diff(arrays["time"]) >= 0)

    def test_detach_stops_recording(self) -> None:
        engine = MatchEngine()
        recorder = MatchRecorder(ManualClock())
        recorder.attach(engine)
        engine.start()
        recorder.detach()
        engine.advance(1.0)
        assert len(recorder) == 1

    def test_reset_and_empty_export(self) -> None:
        recorder = MatchRecorder(ManualClock())
        assert recorder.resource_gained() == 0
        assert recorder.to_arrays()["resource"].size == 0
        engine = MatchEngine()
        recorder.attach(engine)
        engine.start()
        recorder.reset()
        assert recorder.frames == []
