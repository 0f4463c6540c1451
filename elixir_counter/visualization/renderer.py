"""
Pygame renderer: the elixir counter screen.

Draws the match timer, the elixir level and bar, and the control buttons
(Start/Reset, Pause/Resume, and a 3x3 grid of spend buttons) for a
:class:`MatchSession`, and turns clicks and key presses into session
commands.  Layout and hit-testing are plain functions so they work without
a display; pygame is imported only when a window is opened.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional, Tuple, Union

from elixir_counter.utils.constants import RATE_LABELS, SPEND_BUTTON_ROWS

if TYPE_CHECKING:
    from fractions import Fraction

    from elixir_counter.core.session import MatchSession
    from elixir_counter.core.state import MatchSnapshot

# ── Lazy pygame import (only when renderer is actually used) ──────────
_pg: Any = None


def _ensure_pygame() -> Any:
    global _pg
    if _pg is None:
        import pygame

        _pg = pygame
    return _pg


# ══════════════════════════════════════════════════════════════════════════
# Colour palette
# ══════════════════════════════════════════════════════════════════════════

COL_BG = (35, 28, 22)
COL_TEXT = (255, 255, 255)
COL_TEXT_DIM = (150, 150, 150)
COL_TEXT_SHADOW = (30, 30, 30)
COL_BAR_BG = (70, 70, 70)
COL_BAR_SINGLE = (70, 110, 220)
COL_BAR_BOOSTED = (170, 70, 200)
COL_FULL = (80, 200, 100)
COL_BUTTON = (60, 60, 80)
COL_BUTTON_PRIMARY = (50, 110, 210)
COL_BUTTON_DISABLED = (45, 45, 50)
COL_BUTTON_BORDER = (180, 160, 130)

# ══════════════════════════════════════════════════════════════════════════
# Layout constants
# ══════════════════════════════════════════════════════════════════════════

WIN_W = 360
WIN_H = 600
MARGIN_SIDE = 24

TIMER_Y = 70
RATE_LABEL_Y = 115
ELIXIR_VALUE_Y = 190
BAR_Y = 240
BAR_H = 16

CONTROL_Y = 280
CONTROL_W = 130
CONTROL_H = 40
CONTROL_GAP = 12

SPEND_Y = 370
SPEND_W = 80
SPEND_H = 44
SPEND_GAP = 12

Rect = Tuple[int, int, int, int]  # (left, top, width, height)

# Button actions
ACTION_START = "start"
ACTION_RESET = "reset"
ACTION_PAUSE = "pause"
ACTION_RESUME = "resume"
ACTION_SPEND = "spend"


@dataclass(frozen=True)
class Button:
    label: str
    rect: Rect
    action: str
    enabled: bool = True
    amount: Optional[int] = None  # only for spend buttons
    primary: bool = False

    def contains(self, pos: Tuple[int, int]) -> bool:
        x, y = pos
        left, top, width, height = self.rect
        return left <= x < left + width and top <= y < top + height


# ══════════════════════════════════════════════════════════════════════════
# Layout helpers
# ══════════════════════════════════════════════════════════════════════════


def rate_label(multiplier: Union[int, "Fraction"]) -> str:
    """``Single Elixir`` / ``Double Elixir`` / ``Triple Elixir`` (or ``Nx Elixir``)."""
    if multiplier == int(multiplier) and int(multiplier) in RATE_LABELS:
        return RATE_LABELS[int(multiplier)]
    return f"{float(multiplier):g}x Elixir"


def build_buttons(snapshot: "MatchSnapshot", has_started: bool) -> List[Button]:
    """
    Lay out the control buttons for *snapshot*.

    * The first control is Reset while running, Start otherwise.
    * The second is Pause while running, otherwise Resume, which is
      disabled before the first start and once no time is left.
    * Spend buttons are disabled while the level is 0.
    """
    buttons: List[Button] = []

    row_w = 2 * CONTROL_W + CONTROL_GAP
    left = (WIN_W - row_w) // 2
    if snapshot.is_running:
        buttons.append(
            Button("Reset", (left, CONTROL_Y, CONTROL_W, CONTROL_H), ACTION_RESET, primary=True)
        )
        buttons.append(
            Button("Pause", (left + CONTROL_W + CONTROL_GAP, CONTROL_Y, CONTROL_W, CONTROL_H),
                   ACTION_PAUSE)
        )
    else:
        buttons.append(
            Button("Start", (left, CONTROL_Y, CONTROL_W, CONTROL_H), ACTION_START, primary=True)
        )
        buttons.append(
            Button(
                "Resume",
                (left + CONTROL_W + CONTROL_GAP, CONTROL_Y, CONTROL_W, CONTROL_H),
                ACTION_RESUME,
                enabled=has_started and snapshot.can_resume,
            )
        )

    grid_w = 3 * SPEND_W + 2 * SPEND_GAP
    grid_left = (WIN_W - grid_w) // 2
    for row_idx, row in enumerate(SPEND_BUTTON_ROWS):
        top = SPEND_Y + row_idx * (SPEND_H + SPEND_GAP)
        for col_idx, amount in enumerate(row):
            rect = (grid_left + col_idx * (SPEND_W + SPEND_GAP), top, SPEND_W, SPEND_H)
            buttons.append(
                Button(
                    f"-{amount}",
                    rect,
                    ACTION_SPEND,
                    enabled=snapshot.resource > 0,
                    amount=amount,
                )
            )
    return buttons


def hit_test(buttons: List[Button], pos: Tuple[int, int]) -> Optional[Button]:
    """Return the enabled button under *pos*, if any."""
    for button in buttons:
        if button.enabled and button.contains(pos):
            return button
    return None


def dispatch(session: "MatchSession", button: Button) -> None:
    """Issue the session command bound to *button*."""
    if button.action == ACTION_START:
        session.start()
    elif button.action == ACTION_RESET:
        session.reset()
    elif button.action == ACTION_PAUSE:
        session.pause()
    elif button.action == ACTION_RESUME:
        session.resume()
    elif button.action == ACTION_SPEND and button.amount is not None:
        session.spend(button.amount)
    else:
        raise ValueError(f"Unknown button action: {button.action}")


def _draw_text(
    surface: Any,
    text: str,
    pos: Tuple[int, int],
    font: Any,
    colour: Tuple[int, int, int] = COL_TEXT,
    shadow: bool = True,
) -> None:
    """Render centred text with optional drop shadow."""
    if shadow:
        shadow_surf = font.render(text, True, COL_TEXT_SHADOW)
        r = shadow_surf.get_rect()
        r.center = (pos[0] + 1, pos[1] + 1)
        surface.blit(shadow_surf, r)

    text_surf = font.render(text, True, colour)
    r = text_surf.get_rect()
    r.center = pos
    surface.blit(text_surf, r)


# ══════════════════════════════════════════════════════════════════════════
# Main Renderer class
# ══════════════════════════════════════════════════════════════════════════


class MatchRenderer:
    """Pygame window bound to a :class:`MatchSession`.

    Call :meth:`render` in a loop; it polls input, dispatches commands and
    draws the latest snapshot.  The session keeps ticking on its own
    driver thread, so the render rate only affects smoothness.

    Parameters
    ----------
    session : MatchSession
        Session to display and control.
    fps : int
        Target rendering framerate.
    title : str
        Window title.
    """

    def __init__(
        self,
        session: "MatchSession",
        fps: int = 30,
        title: str = "Elixir Counter",
    ) -> None:
        self.session = session
        self.fps = fps
        self.title = title

        self._screen: Any = None
        self._clock: Any = None
        self._font_md: Any = None
        self._font_lg: Any = None
        self._font_xl: Any = None
        self._initialised: bool = False
        self._buttons: List[Button] = []

    # ── lifecycle ──────────────────────────────────────────────────────────

    def _init_pygame(self) -> None:
        if self._initialised:
            return
        pg = _ensure_pygame()
        pg.init()
        pg.display.set_caption(self.title)
        self._screen = pg.display.set_mode((WIN_W, WIN_H))
        self._clock = pg.time.Clock()
        self._font_md = pg.font.SysFont("consolas", 18, bold=True)
        self._font_lg = pg.font.SysFont("consolas", 48, bold=True)
        self._font_xl = pg.font.SysFont("consolas", 64, bold=True)
        self._initialised = True

    def close(self) -> None:
        """Shut down the pygame window."""
        if self._initialised:
            pg = _ensure_pygame()
            pg.quit()
            self._initialised = False

    def poll_events(self) -> bool:
        """Process input. Returns ``False`` if the user closed the window."""
        pg = _ensure_pygame()
        for event in pg.event.get():
            if event.type == pg.QUIT:
                return False
            if event.type == pg.KEYDOWN:
                if event.key == pg.K_ESCAPE:
                    return False
                self._handle_key(event)
            elif event.type == pg.MOUSEBUTTONDOWN and event.button == 1:
                button = hit_test(self._buttons, event.pos)
                if button is not None:
                    dispatch(self.session, button)
        return True

    def _handle_key(self, event: Any) -> None:
        pg = _ensure_pygame()
        if event.key == pg.K_SPACE:
            self.session.toggle_start()
        elif event.key == pg.K_p:
            if self.session.engine.is_running:
                self.session.pause()
            else:
                self.session.resume()
        elif event.unicode and event.unicode in "123456789":
            self.session.spend(int(event.unicode))

    # ── main render ───────────────────────────────────────────────────────

    def render(self) -> bool:
        """Draw one frame. Returns ``False`` if window was closed."""
        self._init_pygame()
        pg = _ensure_pygame()

        snap = self.session.snapshot()
        self._buttons = build_buttons(snap, self.session.has_started)

        if not self.poll_events():
            return False

        # Re-read: a click may have changed the state
        snap = self.session.snapshot()
        self._buttons = build_buttons(snap, self.session.has_started)

        self._screen.fill(COL_BG)
        self._draw_header(snap)
        self._draw_elixir(snap)
        self._draw_buttons()

        pg.display.flip()
        self._clock.tick(self.fps)
        return True

    def _draw_header(self, snap: "MatchSnapshot") -> None:
        _draw_text(self._screen, "Elixir Counter", (WIN_W // 2, 24), self._font_md)
        _draw_text(self._screen, snap.formatted_time, (WIN_W // 2, TIMER_Y), self._font_lg)

        label = rate_label(snap.multiplier)
        if snap.phase is not None:
            label = f"{snap.phase.value.title()} - {label}"
        colour = COL_BAR_BOOSTED if snap.multiplier > 1 else COL_TEXT_DIM
        _draw_text(self._screen, label, (WIN_W // 2, RATE_LABEL_Y), self._font_md, colour)

    def _draw_elixir(self, snap: "MatchSnapshot") -> None:
        pg = _ensure_pygame()
        colour = COL_FULL if snap.is_capped else COL_TEXT
        _draw_text(self._screen, str(snap.resource), (WIN_W // 2, ELIXIR_VALUE_Y),
                   self._font_xl, colour)

        bar_w = WIN_W - 2 * MARGIN_SIDE
        bg = pg.Rect(MARGIN_SIDE, BAR_Y, bar_w, BAR_H)
        pg.draw.rect(self._screen, COL_BAR_BG, bg, border_radius=8)

        fill_w = int(bar_w * snap.resource / snap.resource_cap)
        if fill_w > 0:
            fill_col = COL_BAR_BOOSTED if snap.multiplier > 1 else COL_BAR_SINGLE
            fill = pg.Rect(MARGIN_SIDE, BAR_Y, fill_w, BAR_H)
            pg.draw.rect(self._screen, fill_col, fill, border_radius=8)

    def _draw_buttons(self) -> None:
        pg = _ensure_pygame()
        for button in self._buttons:
            if not button.enabled:
                fill = COL_BUTTON_DISABLED
            elif button.primary:
                fill = COL_BUTTON_PRIMARY
            else:
                fill = COL_BUTTON
            rect = pg.Rect(*button.rect)
            pg.draw.rect(self._screen, fill, rect, border_radius=6)
            pg.draw.rect(self._screen, COL_BUTTON_BORDER, rect, 2, border_radius=6)
            left, top, width, height = button.rect
            colour = COL_TEXT if button.enabled else COL_TEXT_DIM
            _draw_text(self._screen, button.label, (left + width // 2, top + height // 2),
                       self._font_md, colour, shadow=False)
