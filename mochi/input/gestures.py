"""Tap / double-tap recognizer over raw press timestamps.

A press opens a window; a second press inside it is a double tap.  A
single tap is only reported once the window has closed, so a double tap
never also produces the happy flash of its first press.
"""

from __future__ import annotations

from enum import IntEnum

from mochi.state.constants import DOUBLE_TAP_WINDOW


class Gesture(IntEnum):
    TAP = 0
    DOUBLE_TAP = 1


class GestureRecognizer:
    def __init__(self, window: float = DOUBLE_TAP_WINDOW) -> None:
        self.window = window
        self._pending_at: float | None = None

    @property
    def pending(self) -> bool:
        return self._pending_at is not None

    def press(self, now: float) -> list[Gesture]:
        """Register a press at time *now*.

        Returns DOUBLE_TAP when it completes one, or the stale single TAP
        of an earlier press whose window closed without a poll().
        """
        out: list[Gesture] = []
        if self._pending_at is not None:
            if now - self._pending_at <= self.window:
                self._pending_at = None
                return [Gesture.DOUBLE_TAP]
            out.append(Gesture.TAP)
        self._pending_at = now
        return out

    def poll(self, now: float) -> Gesture | None:
        """Report the single tap whose double-tap window has closed."""
        if self._pending_at is not None and now - self._pending_at > self.window:
            self._pending_at = None
            return Gesture.TAP
        return None
