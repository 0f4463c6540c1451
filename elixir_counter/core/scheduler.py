"""
Accrual scheduler.

Converts elapsed time into whole elixir increments.  All quantities are
exact rationals (:class:`fractions.Fraction`), so carrying the remainder
from one call to the next never drifts, however many ticks a match lasts.
"""

from __future__ import annotations

from fractions import Fraction
from typing import NamedTuple

from elixir_counter.utils.converters import Number, quantize_seconds


class AccrualResult(NamedTuple):
    increments: int
    accumulator: Fraction


def accrue(
    delta_seconds: Number,
    accumulator: Number,
    interval: Number,
    level: int,
    cap: int,
) -> AccrualResult:
    """
    Return how many increments *delta_seconds* earns and the carry left over.

    ``increments = floor((accumulator + delta) / interval)``, bounded so that
    ``level + increments <= cap``.  Whenever the level is (or ends up) at
    the cap the carry is dropped: nothing is banked while full.
    """
    if level >= cap:
        return AccrualResult(0, Fraction(0))

    interval = Fraction(interval)
    if interval <= 0:
        raise ValueError(f"interval must be positive, got {interval}")

    total = quantize_seconds(accumulator) + quantize_seconds(delta_seconds)
    earned, remainder = divmod(total, interval)
    earned = int(earned)

    headroom = cap - level
    if earned >= headroom:
        return AccrualResult(headroom, Fraction(0))
    return AccrualResult(earned, remainder)
