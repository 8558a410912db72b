"""Event timeline: a strip of recent mood, motion and blink history.

Moods are drawn as colored spans lasting until the next mood change, so
the strip reads as "what the face was showing when".  Bumps and turns
are ticks in the lower half, blinks are dots on the centre line.

Timestamps are session time, not wall time, so a paused session freezes
the strip instead of scrolling it empty.  Events logged during a frame
are held until advance() is called with that frame's session time, and
advance() also drops events older than the visible window whether or not
the strip is being drawn.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import pygame

from mochi.state.constants import MOOD_COLORS, Mood
from mochi.state.motion import MotionEvent

if TYPE_CHECKING:
    from mochi.state.session import Session

_MOTION_COLORS = {
    MotionEvent.BUMP: (255, 255, 255),
    MotionEvent.TURN: (255, 150, 40),
}
_BLINK_COLOR = (110, 110, 120)

Color = tuple[int, int, int]


@dataclass(slots=True)
class TimelineEvent:
    timestamp: float
    kind: str  # "mood" | "motion" | "blink"
    label: str
    color: Color


class Timeline:
    """Rolling log of face events with a pygame renderer."""

    WINDOW_SEC = 15.0
    STRIP_H = 30
    KEEP_MARGIN = 2.0  # seconds kept past the left edge

    def __init__(self) -> None:
        self.events: list[TimelineEvent] = []
        self.now: float = 0.0
        self._pending: list[tuple[str, str, Color]] = []
        self._font: pygame.font.Font | None = None
        self._last_mood: Mood | None = None
        # Mood in effect before the oldest retained event.
        self._mood_before: TimelineEvent | None = None
        self._session: Session | None = None
        self._prev_blink_phase = 0.0

    def attach(self, session: Session) -> None:
        """Record *session*'s mood changes, motion events and blinks."""
        self._session = session
        session.mood.add_listener(lambda _old, new: self.log_mood(new))
        session.add_motion_listener(self.log_motion)

    def log_mood(self, mood: Mood) -> None:
        if mood == self._last_mood:
            return
        self._last_mood = mood
        color = MOOD_COLORS.get(mood, (150, 150, 150))
        self._pending.append(("mood", mood.name, color))

    def log_motion(self, event: MotionEvent) -> None:
        self._pending.append(("motion", event.name, _MOTION_COLORS[event]))

    def log_blink(self) -> None:
        self._pending.append(("blink", "", _BLINK_COLOR))

    def advance(self, now: float) -> None:
        """Close the frame at session time *now*: stamp, then prune."""
        self.now = now
        if self._session is not None:
            phase = self._session.blink.phase
            if phase > 0.0 and self._prev_blink_phase == 0.0:
                self.log_blink()
            self._prev_blink_phase = phase
        for kind, label, color in self._pending:
            self.events.append(TimelineEvent(now, kind, label, color))
        self._pending.clear()
        self.prune()

    def prune(self) -> None:
        cutoff = self.now - self.WINDOW_SEC - self.KEEP_MARGIN
        kept = []
        for event in self.events:
            if event.timestamp > cutoff:
                kept.append(event)
            elif event.kind == "mood":
                self._mood_before = event
        self.events = kept

    # ── Rendering ────────────────────────────────────────────────

    def _x(self, t: float, x: int, width: int) -> int:
        frac = (t - (self.now - self.WINDOW_SEC)) / self.WINDOW_SEC
        return x + int(min(max(frac, 0.0), 1.0) * width)

    def render(self, surface: pygame.Surface, x: int, y: int, width: int) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont("monospace", 11)
        h = self.STRIP_H

        frame = pygame.Rect(x, y, width, h)
        pygame.draw.rect(surface, (25, 25, 30), frame)

        moods = [e for e in self.events if e.kind == "mood"]
        if self._mood_before is not None:
            moods.insert(0, self._mood_before)
        for i, event in enumerate(moods):
            end = moods[i + 1].timestamp if i + 1 < len(moods) else self.now
            x0 = self._x(event.timestamp, x, width)
            x1 = self._x(end, x, width)
            if x1 > x0:
                pygame.draw.rect(surface, event.color, (x0, y + 2, x1 - x0, h // 2 - 3))

        mid = y + h // 2
        for event in self.events:
            if event.timestamp < self.now - self.WINDOW_SEC:
                continue
            ex = self._x(event.timestamp, x, width)
            if event.kind == "motion":
                pygame.draw.line(surface, event.color, (ex, mid), (ex, y + h - 3), 2)
                tag = self._font.render(event.label[0], True, event.color)
                surface.blit(tag, (ex + 3, y + h - 13))
            elif event.kind == "blink":
                pygame.draw.circle(surface, event.color, (ex, mid), 2)

        pygame.draw.rect(surface, (50, 50, 60), frame, 1)
        age = self._font.render(f"-{int(self.WINDOW_SEC)}s", True, (60, 60, 70))
        surface.blit(age, (x + 3, y + h - 12))
