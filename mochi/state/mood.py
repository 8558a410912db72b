"""Mood state machine.

One MoodState per session.  A mood is either timed (counts down to idle)
or locked (held until the next set_mood/cycle call).  Writers never queue:
the last call wins and overwrites any countdown in flight.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable

from mochi.state.constants import MOOD_CYCLE, TAP_MOOD_DURATION, Mood

log = logging.getLogger(__name__)

MoodListener = Callable[[Mood, Mood], None]


@dataclass
class MoodState:
    kind: Mood = Mood.IDLE
    remaining: float = 0.0
    locked: bool = False


class MoodStateMachine:
    """Holds the current mood and its countdown or lock."""

    def __init__(self) -> None:
        self.state = MoodState()
        self._listeners: list[MoodListener] = []

    @property
    def kind(self) -> Mood:
        return self.state.kind

    @property
    def remaining(self) -> float:
        return self.state.remaining

    @property
    def locked(self) -> bool:
        return self.state.locked

    def add_listener(self, cb: MoodListener) -> None:
        """Register cb(old, new), called after every change of kind."""
        self._listeners.append(cb)

    # ── Transitions ──────────────────────────────────────────────

    def set_mood(self, kind: Mood, duration: float | None) -> None:
        """Replace the mood.  duration=None (or +inf) locks it."""
        if duration is None or duration == math.inf:
            self._apply(kind, 0.0, True)
            return
        if not math.isfinite(duration) or duration < 0.0:
            duration = 0.0
        self._apply(kind, duration, False)

    def cycle(self) -> Mood:
        """Advance to the next mood in MOOD_CYCLE and lock it."""
        idx = MOOD_CYCLE.index(self.state.kind)
        nxt = MOOD_CYCLE[(idx + 1) % len(MOOD_CYCLE)]
        self._apply(nxt, 0.0, True)
        return nxt

    def tap(self, duration: float = TAP_MOOD_DURATION) -> bool:
        """Short happy flash.  Ignored while a manual lock is held.

        Only the lock flag protects a mood: a long but finite timed mood
        (set_mood(kind, 20.0)) is still replaced by a tap.
        """
        if self.state.locked:
            return False
        self.set_mood(Mood.HAPPY, duration)
        return True

    def update(self, dt: float) -> None:
        """Count down a timed mood; revert to idle when it runs out."""
        st = self.state
        if st.locked or (st.kind == Mood.IDLE and st.remaining == 0.0):
            return
        if not math.isfinite(dt) or dt < 0.0:
            dt = 0.0
        st.remaining = max(0.0, st.remaining - dt)
        if st.remaining == 0.0:
            self._apply(Mood.IDLE, 0.0, False)

    # ── Internals ────────────────────────────────────────────────

    def _apply(self, kind: Mood, remaining: float, locked: bool) -> None:
        old = self.state.kind
        self.state.kind = Mood(kind)
        self.state.remaining = remaining
        self.state.locked = locked
        if old != self.state.kind:
            log.debug(
                "mood %s -> %s (%s)",
                old.name,
                self.state.kind.name,
                "locked" if locked else f"{remaining:.2f}s",
            )
            for cb in self._listeners:
                cb(old, self.state.kind)
