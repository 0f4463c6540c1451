"""
MatchEngine: the countdown and elixir state machine.

Owns the phase/clock state and the :class:`ElixirSystem`, exposes the
lifecycle and spend commands, and advances itself by arbitrary wall-clock
deltas.  Every public method is serialised on one re-entrant lock, so a
driver thread and a UI thread can share an engine safely.
"""

from __future__ import annotations

import logging
import threading
from fractions import Fraction
from typing import Callable, List, Optional

from elixir_counter.core.config import MatchConfig
from elixir_counter.core.state import MatchSnapshot, MatchState, PhaseSpec
from elixir_counter.systems.elixir import ElixirSystem
from elixir_counter.utils.converters import format_time, quantize_with_residue
from elixir_counter.utils.validators import (
    InvalidConfigError,
    validate_config,
    validate_delta,
    validate_spend,
)

logger = logging.getLogger(__name__)

Observer = Callable[[MatchSnapshot], None]


class MatchEngine:
    """
    Countdown-and-accrual engine for one match.

    Parameters
    ----------
    config : MatchConfig, optional
        Phase table and elixir economy.  Defaults to the two-phase variant.

    Raises
    ------
    InvalidConfigError
        If *config* cannot drive a match (see :func:`validate_config`).
    """

    def __init__(self, config: Optional[MatchConfig] = None) -> None:
        self.config: MatchConfig = config or MatchConfig.two_phase()
        err = validate_config(self.config)
        if err is not None:
            raise InvalidConfigError(err)

        self.elixir_system = ElixirSystem(
            cap=self.config.resource_cap,
            starting=self.config.starting_resource,
            overdraw_allowance=self.config.overdraw_allowance,
        )
        self._state = self._initial_state()
        self._observers: List[Observer] = []
        self._lock = threading.RLock()

    # ══════════════════════════════════════════════════════════════════════
    # Public API
    # ══════════════════════════════════════════════════════════════════════

    @property
    def phase_spec(self) -> PhaseSpec:
        return self.config.phases[self._state.phase_index]

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def resource(self) -> int:
        return self.elixir_system.level

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def is_finished(self) -> bool:
        """True once the last phase has run out."""
        return (
            self._state.remaining_seconds == 0
            and self._state.phase_index == len(self.config.phases) - 1
        )

    @property
    def current_interval(self) -> Fraction:
        """Seconds per elixir at the current phase and remaining time."""
        return self.phase_spec.rate.interval_at(
            self._state.remaining_seconds, self.config.base_interval
        )

    # ── lifecycle ─────────────────────────────────────────────────────────

    def start(self) -> None:
        """Restart from the first phase and run."""
        with self._lock:
            self._restore_initial()
            self._state.is_running = True
        logger.info(
            "Match started: %d phase(s), %ds total",
            len(self.config.phases),
            self.config.total_duration,
        )
        self._notify()

    def reset(self) -> None:
        """Restore the initial configuration without running."""
        with self._lock:
            self._restore_initial()
        logger.info("Match reset")
        self._notify()

    def pause(self) -> None:
        """Stop advancing; carries are kept so resuming loses nothing."""
        with self._lock:
            self._state.is_running = False
        self._notify()

    def resume(self) -> bool:
        """
        Run again if any time is left.

        Returns ``False`` ("nothing to resume") when the clock is at zero or
        the engine is already running.
        """
        with self._lock:
            if self._state.remaining_seconds <= 0:
                logger.debug("Resume ignored: no time remaining")
                return False
            if self._state.is_running:
                return False
            self._state.is_running = True
        self._notify()
        return True

    # ── commands ──────────────────────────────────────────────────────────

    def spend(self, amount: int) -> int:
        """
        Subtract elixir under the variant's overdraw policy.

        Returns the amount actually deducted; non-positive amounts are
        ignored and return 0.
        """
        err = validate_spend(amount)
        if err is not None:
            logger.debug("Spend ignored: %s", err)
            return 0
        with self._lock:
            spent = self.elixir_system.spend(int(amount))
        self._notify()
        return spent

    def advance(self, delta_seconds: float) -> None:
        """
        Advance the match clock and elixir by *delta_seconds* of real time.

        The delta is walked in segments that end on whole-second boundaries
        of the match clock, so the accrual interval always reflects the
        remaining time at the start of each segment.  Splitting one delta
        into several calls gives the same result.  A delta that exhausts a
        phase carries its leftover into the next phase; one that exhausts
        the last phase stops the match.
        """
        err = validate_delta(delta_seconds)
        if err is not None:
            logger.debug("Advance ignored: %s", err)
            return

        with self._lock:
            if not self._state.is_running or self._state.remaining_seconds == 0:
                return

            budget, self._state.time_residue = quantize_with_residue(
                delta_seconds, self._state.time_residue
            )
            while budget > 0 and self._state.is_running:
                step = min(budget, 1 - self._state.match_accumulator)
                self.elixir_system.accrue(step, self.current_interval)
                self._state.match_accumulator += step
                budget -= step

                if self._state.match_accumulator >= 1:
                    self._state.match_accumulator -= 1
                    self._state.remaining_seconds -= 1
                    if self._state.remaining_seconds == 0:
                        self._complete_phase()
                    else:
                        # Settle the carry at the (possibly faster) new rate
                        self.elixir_system.accrue(0, self.current_interval)
        self._notify()

    # ── observation ───────────────────────────────────────────────────────

    def snapshot(self) -> MatchSnapshot:
        """Build a :class:`MatchSnapshot` of the current state."""
        with self._lock:
            state = self._state
            spec = self.phase_spec
            rule = spec.rate
            return MatchSnapshot(
                phase=spec.phase,
                phase_index=state.phase_index,
                remaining_seconds=state.remaining_seconds,
                resource=self.elixir_system.level,
                resource_cap=self.config.resource_cap,
                is_running=state.is_running,
                is_past_threshold=rule.is_past_threshold(state.remaining_seconds),
                multiplier=rule.multiplier_at(state.remaining_seconds),
                max_spend=(
                    self.elixir_system.max_spend if self.config.allows_overdraw else None
                ),
                formatted_time=format_time(state.remaining_seconds),
                is_finished=self.is_finished,
            )

    def subscribe(self, callback: Observer) -> Callable[[], None]:
        """
        Call *callback* with a fresh snapshot after every state change.

        Returns a function that removes the subscription.
        """
        with self._lock:
            self._observers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._observers:
                    self._observers.remove(callback)

        return _unsubscribe

    # ══════════════════════════════════════════════════════════════════════
    # Internal
    # ══════════════════════════════════════════════════════════════════════

    def _initial_state(self) -> MatchState:
        return MatchState(
            phase_index=0,
            remaining_seconds=self.config.phases[0].duration_seconds,
        )

    def _restore_initial(self) -> None:
        self._state = self._initial_state()
        self.elixir_system.reset()

    def _complete_phase(self) -> None:
        """Move to the next phase, or stop the match after the last one."""
        state = self._state
        state.match_accumulator = Fraction(0)
        self.elixir_system.clear_carry()

        next_index = state.phase_index + 1
        if next_index < len(self.config.phases):
            state.phase_index = next_index
            state.remaining_seconds = self.config.phases[next_index].duration_seconds
            logger.info(
                "Phase %d complete; entering %s (%ds)",
                next_index - 1,
                self._phase_name(next_index),
                state.remaining_seconds,
            )
        else:
            state.is_running = False
            logger.info("Match ended")

    def _phase_name(self, index: int) -> str:
        phase = self.config.phases[index].phase
        return phase.value if phase is not None else f"phase {index}"

    def _notify(self) -> None:
        with self._lock:
            observers = list(self._observers)
        if not observers:
            return
        snap = self.snapshot()
        for callback in observers:
            callback(snap)
