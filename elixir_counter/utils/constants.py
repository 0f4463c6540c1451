"""
All match constants in a single place.

Phase durations, elixir economy, rate multipliers, overdraw policy and
driver cadence for both the two-phase and the single-phase variant.
"""

from __future__ import annotations

from fractions import Fraction

# ────────────────────────────── PHASES ─────────────────────────────────────────
REGULATION_DURATION: int = 180  # seconds (3 minutes)
OVERTIME_DURATION: int = 120  # seconds (2 minutes)
SINGLE_PHASE_DURATION: int = 180
THRESHOLD_SECONDS: int = 60  # rate boost once remaining <= this

# ────────────────────────────── ELIXIR ─────────────────────────────────────────
RESOURCE_CAP: int = 10
STARTING_ELIXIR: int = 5
ELIXIR_INTERVAL: Fraction = Fraction(14, 5)  # 2.8 s per elixir at 1x

# Multipliers: (before threshold, at/below threshold)
REGULATION_MULTIPLIERS: tuple[int, int] = (1, 2)
OVERTIME_MULTIPLIERS: tuple[int, int] = (2, 3)
SINGLE_PHASE_MULTIPLIERS: tuple[int, int] = (1, 2)

# ────────────────────────────── SPEND POLICY ───────────────────────────────────
OVERDRAW_ALLOWANCE: int = 2  # two-phase variant: spend up to resource + 2
NO_OVERDRAW: int = 0

# ────────────────────────────── TIMING ─────────────────────────────────────────
DEFAULT_TICK_INTERVAL: float = 0.1  # seconds between driver ticks
TIME_QUANTUM_US: int = 1_000_000  # deltas are rounded to whole microseconds

# ────────────────────────────── DISPLAY ────────────────────────────────────────
RATE_LABELS: dict[int, str] = {
    1: "Single Elixir",
    2: "Double Elixir",
    3: "Triple Elixir",
}
SPEND_BUTTON_ROWS: tuple[tuple[int, ...], ...] = ((1, 2, 3), (4, 5, 6), (7, 8, 9))
