"""
Command and configuration validation utilities.

Command validators return ``None`` when the input is acceptable and a
human-readable reason otherwise; the engine turns a reason into a no-op.
"""

from __future__ import annotations

import math
import numbers
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from elixir_counter.core.config import MatchConfig


class InvalidConfigError(Exception):
    """Raised when a :class:`MatchConfig` cannot drive a match."""


def validate_spend(amount: int) -> Optional[str]:
    """Reject non-integer and non-positive spend amounts."""
    if isinstance(amount, bool) or not isinstance(amount, numbers.Integral):
        return f"Spend amount must be an integer, got {amount!r}"
    if amount <= 0:
        return f"Spend amount must be positive, got {amount}"
    return None


def validate_delta(delta_seconds: float) -> Optional[str]:
    """Reject negative or non-finite time deltas."""
    try:
        value = float(delta_seconds)
    except (TypeError, ValueError):
        return f"Delta must be a number, got {delta_seconds!r}"
    if not math.isfinite(value):
        return f"Delta must be finite, got {delta_seconds}"
    if value < 0:
        return f"Delta must be non-negative, got {delta_seconds}"
    return None


def validate_config(config: "MatchConfig") -> Optional[str]:
    """
    Return ``None`` if *config* is usable, otherwise the first problem found.

    Rules
    -----
    * At least one phase.
    * Every phase lasts a positive whole number of seconds.
    * Every rate multiplier is positive and the threshold is non-negative.
    * The starting level lies in ``[0, resource_cap]`` and the cap is positive.
    * The overdraw allowance is non-negative.
    * The base interval is positive.
    """
    if not config.phases:
        return "Phase table is empty"

    for idx, spec in enumerate(config.phases):
        if not isinstance(spec.duration_seconds, int) or spec.duration_seconds <= 0:
            return f"Phase {idx} duration must be a positive integer, got {spec.duration_seconds!r}"
        rule = spec.rate
        if rule.multiplier <= 0 or rule.boosted_multiplier <= 0:
            return f"Phase {idx} multipliers must be positive"
        if rule.threshold_seconds < 0:
            return f"Phase {idx} threshold must be non-negative"

    if config.resource_cap <= 0:
        return f"Resource cap must be positive, got {config.resource_cap}"
    if not 0 <= config.starting_resource <= config.resource_cap:
        return (
            f"Starting resource {config.starting_resource} outside "
            f"[0, {config.resource_cap}]"
        )
    if config.overdraw_allowance < 0:
        return f"Overdraw allowance must be non-negative, got {config.overdraw_allowance}"
    if config.base_interval <= 0:
        return f"Base interval must be positive, got {config.base_interval}"

    return None  # valid
