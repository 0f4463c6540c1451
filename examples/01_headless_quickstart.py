#!/usr/bin/env python
"""
Example 1: headless match simulation.

Shows how to:
  • Build a MatchEngine for either variant.
  • Drive it with fixed ticks (no real waiting) and spend elixir.
  • Record the timeline and summarise the elixir curve.

Usage
-----
    python examples/01_headless_quickstart.py --variant two_phase --tick 0.1
"""

from __future__ import annotations

import argparse
import logging
import sys

sys.path.insert(0, ".")

from elixir_counter.core.clock import ManualClock
from elixir_counter.core.config import VARIANTS, MatchConfig
from elixir_counter.core.engine import MatchEngine
from elixir_counter.core.recorder import MatchRecorder


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless elixir counter run")
    parser.add_argument("--variant", choices=VARIANTS, default="two_phase")
    parser.add_argument("--tick", type=float, default=0.1, help="seconds per tick")
    parser.add_argument("--spend-at", type=int, default=8,
                        help="spend whenever elixir reaches this level")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    clock = ManualClock()
    engine = MatchEngine(MatchConfig.for_variant(args.variant))
    recorder = MatchRecorder(clock)
    recorder.attach(engine)

    print("═" * 60)
    print(f"  Headless match: {args.variant}, tick={args.tick}s")
    print("═" * 60)

    engine.start()
    spent = 0
    step = 0
    report_every = max(1, round(15.0 / args.tick))
    while engine.is_running:
        clock.advance(args.tick)
        engine.advance(args.tick)
        step += 1

        if engine.resource >= args.spend_at:
            spent += engine.spend(4)

        if step % report_every == 0:
            snap = engine.snapshot()
            phase = snap.phase.value if snap.phase is not None else "match"
            print(
                f"  [{snap.formatted_time:>5}] {phase:<10} "
                f"x{snap.multiplier}  elixir={snap.resource:2d}"
            )

    recorder.detach()
    print("─" * 60)
    print(f"  Ticks:          {step}")
    print(f"  Elixir gained:  {recorder.resource_gained()}")
    print(f"  Elixir spent:   {spent}")
    print(f"  Frames logged:  {len(recorder)}")
    print("═" * 60)


if __name__ == "__main__":
    main()
