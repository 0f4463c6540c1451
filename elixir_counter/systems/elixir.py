"""
Elixir management system.

Holds the integer elixir level and its sub-unit carry, applies accrual
through :func:`accrue` and enforces the spend (overdraw) policy.
"""

from __future__ import annotations

from fractions import Fraction

from elixir_counter.core.scheduler import accrue
from elixir_counter.utils.constants import NO_OVERDRAW, RESOURCE_CAP, STARTING_ELIXIR
from elixir_counter.utils.converters import Number


class ElixirSystem:
    """Tracks the elixir level for one match."""

    def __init__(
        self,
        cap: int = RESOURCE_CAP,
        starting: int = STARTING_ELIXIR,
        overdraw_allowance: int = NO_OVERDRAW,
    ) -> None:
        self.cap: int = cap
        self.starting: int = starting
        self.overdraw_allowance: int = overdraw_allowance
        self.level: int = starting
        self.accumulator: Fraction = Fraction(0)

    @property
    def max_spend(self) -> int:
        """Largest amount a single spend can deduct right now."""
        return self.level + self.overdraw_allowance

    def accrue(self, delta_seconds: Number, interval: Number) -> int:
        """Add *delta_seconds* of generation at *interval*; return elixir gained."""
        result = accrue(delta_seconds, self.accumulator, interval, self.level, self.cap)
        self.level += result.increments
        self.accumulator = result.accumulator
        return result.increments

    def spend(self, amount: int) -> int:
        """
        Deduct up to ``min(amount, level + overdraw_allowance)``, floored at 0.

        Returns the amount actually removed from the level.  The carry is
        kept, so partial progress toward the next elixir survives a spend.
        """
        if amount <= 0:
            return 0
        allowed = min(amount, self.max_spend)
        new_level = max(0, self.level - allowed)
        spent = self.level - new_level
        self.level = new_level
        return spent

    def clear_carry(self) -> None:
        self.accumulator = Fraction(0)

    def reset(self) -> None:
        self.level = self.starting
        self.accumulator = Fraction(0)
