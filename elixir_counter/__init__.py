"""
Elixir Counter: real-time match clock and elixir accrual simulator.

A headless engine for a timed Clash Royale style match (regulation then
overtime) that counts down, accrues elixir at phase- and time-dependent
rates, and validates spends, plus a threaded tick driver, a recorder and
an optional pygame front end.
"""

from elixir_counter.core.clock import ManualClock, MonotonicClock
from elixir_counter.core.config import MatchConfig
from elixir_counter.core.driver import TickDriver
from elixir_counter.core.engine import MatchEngine
from elixir_counter.core.recorder import MatchRecorder
from elixir_counter.core.session import MatchSession
from elixir_counter.core.state import (
    MatchSnapshot,
    Phase,
    PhaseSpec,
    RateRule,
)
from elixir_counter.utils.validators import InvalidConfigError

__version__ = "0.1.0"

__all__ = [
    "MatchEngine",
    "MatchSession",
    "MatchConfig",
    "MatchSnapshot",
    "MatchRecorder",
    "Phase",
    "PhaseSpec",
    "RateRule",
    "TickDriver",
    "ManualClock",
    "MonotonicClock",
    "InvalidConfigError",
]
