"""
Time and rate conversions shared by the engine and its adapters.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Tuple, Union

from elixir_counter.utils.constants import ELIXIR_INTERVAL, TIME_QUANTUM_US

Number = Union[int, float, Fraction]


def format_time(seconds: int) -> str:
    """Render whole seconds as ``M:SS`` (e.g. ``3:00``, ``0:59``)."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def quantize_seconds(delta: Number) -> Fraction:
    """
    Convert a wall-clock delta into an exact rational number of seconds.

    The value is rounded to the nearest microsecond so that deltas which
    agree to the microsecond always sum to the same total, however they
    are split across calls.
    """
    if isinstance(delta, Fraction):
        return delta
    return Fraction(round(delta * TIME_QUANTUM_US), TIME_QUANTUM_US)


def interval_for(multiplier: Number, base_interval: Fraction = ELIXIR_INTERVAL) -> Fraction:
    """Seconds per elixir at *multiplier* times the base rate."""
    return Fraction(base_interval) / Fraction(multiplier)


def quantize_with_residue(delta: Number, residue: Fraction) -> Tuple[Fraction, Fraction]:
    """
    Quantise ``residue + delta`` to whole microseconds.

    Returns ``(quantised, new_residue)``.  Feeding the residue back into the
    next call keeps the running total exact: a delta sequence is consumed to
    within half a microsecond of its true sum, however it is split.
    """
    exact = delta if isinstance(delta, Fraction) else Fraction(float(delta))
    total = residue + exact
    micros = round(total * TIME_QUANTUM_US)
    quantised = Fraction(micros, TIME_QUANTUM_US)
    return quantised, total - quantised
