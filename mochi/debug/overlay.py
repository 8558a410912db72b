"""Debug HUD overlay: state readout drawn over the bottom of the face.

The text is built by :func:`hud_lines` so the readout can be checked
without a display; :class:`DebugOverlay` only blits it.  A permission
denial notice stays on screen for ``NOTICE_SECONDS`` of session time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pygame

if TYPE_CHECKING:
    from mochi.state.permission import PermissionPrompt
    from mochi.state.session import Session

NOTICE_SECONDS = 4.0
LINE_H = 17

Color = tuple[int, int, int]

_STATE_COLOR: Color = (160, 200, 255)
_DIM_COLOR: Color = (125, 135, 145)
_NOTICE_COLOR: Color = (255, 200, 80)
_HELP_COLOR: Color = (80, 85, 95)

HELP = (
    "tap/click: happy  double-tap/D: next mood  SPACE: tap  1-5: lock  0: idle",
    "M: ask for motion  Y/N: answer  arrows: tilt  J: jolt  H: hud  Q: quit",
)


def _permission_label(session: Session, prompt: PermissionPrompt) -> str:
    label = session.permission.state.name.lower()
    if prompt.pending:
        return f"{label}, waiting for Y/N"
    if session.permission.denied:
        return f"{label}, denied"
    return label


def hud_lines(
    session: Session,
    prompt: PermissionPrompt,
    frame_ms: float = 0.0,
    notice: str | None = None,
) -> list[tuple[str, Color]]:
    """Text rows for the HUD, top to bottom."""
    mood = session.mood
    blink = session.blink
    accel = session.motion.state
    timer = "locked" if mood.locked else f"{mood.remaining:.2f}s left"

    rows: list[tuple[str, Color]] = [
        (
            f"{mood.kind.name:<6} {timer:<12} blink {blink.closure:.2f} "
            f"(next in {blink.next_blink:.1f}s)",
            _STATE_COLOR,
        ),
        (
            f"accel {accel.filtered_x:+.2f} {accel.filtered_y:+.2f} "
            f"{accel.filtered_z:+.2f}  motion: {_permission_label(session, prompt)}",
            _DIM_COLOR,
        ),
        (f"t {session.elapsed:7.1f}s  frame {frame_ms:4.1f}ms", _DIM_COLOR),
    ]
    if notice:
        rows.append((notice, _NOTICE_COLOR))
    rows.extend((line, _HELP_COLOR) for line in HELP)
    return rows


class DebugOverlay:
    """Blits :func:`hud_lines` onto a pygame surface."""

    def __init__(self) -> None:
        self.font: pygame.font.Font | None = None
        self.frame_time_ms: float = 0.0
        self._notice: str | None = None
        self._notice_until: float = 0.0

    def show_notice(self, text: str, now: float) -> None:
        self._notice = text
        self._notice_until = now + NOTICE_SECONDS

    def current_notice(self, now: float) -> str | None:
        if self._notice is not None and now > self._notice_until:
            self._notice = None
        return self._notice

    def render(
        self,
        surface: pygame.Surface,
        y_offset: int,
        session: Session,
        prompt: PermissionPrompt,
    ) -> None:
        if self.font is None:
            self.font = pygame.font.SysFont("monospace", 14)

        rows = hud_lines(
            session,
            prompt,
            self.frame_time_ms,
            self.current_notice(session.elapsed),
        )
        for i, (text, color) in enumerate(rows):
            surface.blit(self.font.render(text, True, color), (10, y_offset + i * LINE_H))
