"""
State definitions for the match engine.

Provides the phase table building blocks (:class:`RateRule`,
:class:`PhaseSpec`), the engine-private mutable :class:`MatchState` and the
read-only :class:`MatchSnapshot` handed to presentation adapters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Optional, Union

from elixir_counter.utils.constants import ELIXIR_INTERVAL, THRESHOLD_SECONDS
from elixir_counter.utils.converters import interval_for


class Phase(Enum):
    REGULATION = "regulation"
    OVERTIME = "overtime"


@dataclass(frozen=True)
class RateRule:
    """Accrual multiplier before and at/below the threshold."""

    multiplier: Union[int, Fraction] = 1
    boosted_multiplier: Union[int, Fraction] = 2
    threshold_seconds: int = THRESHOLD_SECONDS

    def is_past_threshold(self, remaining_seconds: int) -> bool:
        return remaining_seconds <= self.threshold_seconds

    def multiplier_at(self, remaining_seconds: int) -> Union[int, Fraction]:
        if self.is_past_threshold(remaining_seconds):
            return self.boosted_multiplier
        return self.multiplier

    def interval_at(
        self, remaining_seconds: int, base_interval: Fraction = ELIXIR_INTERVAL
    ) -> Fraction:
        """Seconds per elixir with *remaining_seconds* left in the phase."""
        return interval_for(self.multiplier_at(remaining_seconds), base_interval)


@dataclass(frozen=True)
class PhaseSpec:
    """One row of the phase table."""

    duration_seconds: int
    rate: RateRule = field(default_factory=RateRule)
    phase: Optional[Phase] = None  # None for the unnamed single-phase variant


@dataclass
class MatchState:
    """Mutable clock state owned by :class:`MatchEngine`."""

    phase_index: int
    remaining_seconds: int  # [0, phase duration]
    is_running: bool = False
    match_accumulator: Fraction = Fraction(0)  # always < 1 after advance
    time_residue: Fraction = Fraction(0)  # sub-microsecond carry between deltas


@dataclass(frozen=True)
class MatchSnapshot:
    """Read-only view of the engine after a command or tick."""

    phase: Optional[Phase]
    phase_index: int
    remaining_seconds: int
    resource: int  # [0, resource_cap]
    resource_cap: int
    is_running: bool
    is_past_threshold: bool
    multiplier: Union[int, Fraction]
    max_spend: Optional[int]  # None when the variant has no overdraw
    formatted_time: str  # "M:SS"
    is_finished: bool

    @property
    def can_resume(self) -> bool:
        return not self.is_running and self.remaining_seconds > 0

    @property
    def is_capped(self) -> bool:
        return self.resource >= self.resource_cap
