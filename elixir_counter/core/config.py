"""
Match configuration and the two built-in variants.

A variant is nothing more than a phase table plus the elixir economy
around it; the engine's control flow is the same for every table.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Tuple

from elixir_counter.core.state import Phase, PhaseSpec, RateRule
from elixir_counter.utils.constants import (
    ELIXIR_INTERVAL,
    NO_OVERDRAW,
    OVERDRAW_ALLOWANCE,
    OVERTIME_DURATION,
    OVERTIME_MULTIPLIERS,
    REGULATION_DURATION,
    REGULATION_MULTIPLIERS,
    RESOURCE_CAP,
    SINGLE_PHASE_DURATION,
    SINGLE_PHASE_MULTIPLIERS,
    STARTING_ELIXIR,
    THRESHOLD_SECONDS,
)

TWO_PHASE = "two_phase"
SINGLE_PHASE = "single_phase"
VARIANTS: Tuple[str, ...] = (TWO_PHASE, SINGLE_PHASE)


@dataclass(frozen=True)
class MatchConfig:
    """
    Everything a :class:`MatchEngine` needs to run one match.

    Parameters
    ----------
    phases : tuple[PhaseSpec, ...]
        Ordered phase table; the match ends after the last entry.
    starting_resource : int
        Elixir after ``start`` / ``reset``.
    resource_cap : int
        Upper bound for elixir; accrual stops and carry is dropped here.
    overdraw_allowance : int
        How far a spend may exceed the current level (clamped at 0).
    base_interval : Fraction
        Seconds per elixir at multiplier 1.
    """

    phases: Tuple[PhaseSpec, ...]
    starting_resource: int = STARTING_ELIXIR
    resource_cap: int = RESOURCE_CAP
    overdraw_allowance: int = OVERDRAW_ALLOWANCE
    base_interval: Fraction = ELIXIR_INTERVAL

    @classmethod
    def two_phase(cls) -> "MatchConfig":
        """Regulation (180 s) then overtime (120 s), overdraw of 2."""
        return cls(
            phases=(
                PhaseSpec(
                    duration_seconds=REGULATION_DURATION,
                    rate=RateRule(*REGULATION_MULTIPLIERS, threshold_seconds=THRESHOLD_SECONDS),
                    phase=Phase.REGULATION,
                ),
                PhaseSpec(
                    duration_seconds=OVERTIME_DURATION,
                    rate=RateRule(*OVERTIME_MULTIPLIERS, threshold_seconds=THRESHOLD_SECONDS),
                    phase=Phase.OVERTIME,
                ),
            ),
            overdraw_allowance=OVERDRAW_ALLOWANCE,
        )

    @classmethod
    def single_phase(cls) -> "MatchConfig":
        """One 180 s phase, double rate for the last minute, no overdraw."""
        return cls(
            phases=(
                PhaseSpec(
                    duration_seconds=SINGLE_PHASE_DURATION,
                    rate=RateRule(*SINGLE_PHASE_MULTIPLIERS, threshold_seconds=THRESHOLD_SECONDS),
                ),
            ),
            overdraw_allowance=NO_OVERDRAW,
        )

    @classmethod
    def for_variant(cls, name: str) -> "MatchConfig":
        if name == TWO_PHASE:
            return cls.two_phase()
        if name == SINGLE_PHASE:
            return cls.single_phase()
        raise ValueError(f"Unknown variant {name!r}; expected one of {VARIANTS}")

    @property
    def allows_overdraw(self) -> bool:
        return self.overdraw_allowance > 0

    @property
    def total_duration(self) -> int:
        return sum(spec.duration_seconds for spec in self.phases)
