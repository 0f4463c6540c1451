"""
Match recorder.

Subscribes to a :class:`MatchEngine` and keeps every notified snapshot
together with the clock reading at which it was observed.  The timeline
can be exported as numpy arrays for plotting or offline analysis of the
elixir curve.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import numpy as np

from elixir_counter.core.clock import Clock, MonotonicClock
from elixir_counter.core.engine import MatchEngine
from elixir_counter.core.state import MatchSnapshot


@dataclass
class FrameRecord:
    """One observed snapshot."""

    time: float
    snapshot: MatchSnapshot


class MatchRecorder:
    """Accumulates :class:`FrameRecord` objects while attached.

    Typical usage::

        recorder = MatchRecorder(clock)
        recorder.attach(engine)
        # ... run the match ...
        arrays = recorder.to_arrays()
        recorder.detach()
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock: Clock = clock or MonotonicClock()
        self._frames: List[FrameRecord] = []
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def frames(self) -> List[FrameRecord]:
        return list(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def attach(self, engine: MatchEngine) -> None:
        """Start recording *engine* (detaching from any previous one)."""
        self.detach()
        self._unsubscribe = engine.subscribe(self.record)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def record(self, snapshot: MatchSnapshot) -> None:
        self._frames.append(FrameRecord(time=self.clock.now(), snapshot=snapshot))

    def reset(self) -> None:
        self._frames = []

    # ── export ────────────────────────────────────────────────────────────

    def to_arrays(self) -> Dict[str, np.ndarray]:
        """Return the timeline as column arrays, one entry per frame."""
        snaps = [f.snapshot for f in self._frames]
        return {
            "time": np.array([f.time for f in self._frames], dtype=np.float64),
            "remaining_seconds": np.array([s.remaining_seconds for s in snaps], dtype=np.int32),
            "resource": np.array([s.resource for s in snaps], dtype=np.int32),
            "phase_index": np.array([s.phase_index for s in snaps], dtype=np.int32),
            "multiplier": np.array([float(s.multiplier) for s in snaps], dtype=np.float64),
        }

    def resource_gained(self) -> int:
        """Sum of the positive level steps between consecutive frames."""
        resource = self.to_arrays()["resource"]
        if resource.size < 2:
            return 0
        steps = np.diff(resource)
        return int(steps[steps > 0].sum())
