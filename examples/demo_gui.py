#!/usr/bin/env python
"""
Demo: the elixir counter in a pygame window, ticking in real time.

Usage
-----
    python examples/demo_gui.py [--variant single_phase]

Controls: click the buttons, or SPACE = start/reset, P = pause/resume,
1-9 = spend.  Press **ESC** or close the window to quit.
"""

from __future__ import annotations

import argparse
import logging
import sys

# Ensure the package is importable when running from the repo root
sys.path.insert(0, ".")

from elixir_counter.core.config import VARIANTS, MatchConfig
from elixir_counter.core.session import MatchSession
from elixir_counter.visualization.renderer import MatchRenderer


def main() -> None:
    parser = argparse.ArgumentParser(description="Elixir counter GUI")
    parser.add_argument("--variant", choices=VARIANTS, default="two_phase")
    parser.add_argument("--fps", type=int, default=30)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    title = "Elixir Counter" if args.variant == "two_phase" else "Elixir Counter (classic)"
    with MatchSession(MatchConfig.for_variant(args.variant)) as session:
        renderer = MatchRenderer(session, fps=args.fps, title=title)
        try:
            while renderer.render():
                pass
        except KeyboardInterrupt:
            pass
        finally:
            renderer.close()


if __name__ == "__main__":
    main()
