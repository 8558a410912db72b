"""Command bus — every input reaches the session through here.

Gesture, sensor and debug callbacks push commands between frames; the
frame loop dispatches them at the start of its update step, in arrival
order.  Handlers never touch Session state directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from mochi.state.constants import Mood
from mochi.state.motion import AccelSample, MotionEvent
from mochi.state.session import Session


# ── Command types ────────────────────────────────────────────────────


@dataclass
class TapCmd:
    """Single tap gesture."""


@dataclass
class DoubleTapCmd:
    """Double tap gesture: walk to the next mood and lock it."""


@dataclass
class SampleCmd:
    """One sensor tick.  sample=None means the reading was unavailable."""

    sample: AccelSample | None


@dataclass
class SetMoodCmd:
    """Debug override.  duration=None locks the mood."""

    mood: Mood
    duration: float | None = None


@dataclass
class PermissionResultCmd:
    granted: bool


Command = Union[TapCmd, DoubleTapCmd, SampleCmd, SetMoodCmd, PermissionResultCmd]


# ── Command Bus ──────────────────────────────────────────────────────


@dataclass
class CommandBus:
    """Queues commands and applies them to a Session once per frame."""

    _queue: list[Command] = field(default_factory=list)

    def push(self, cmd: Command) -> None:
        """Queue a command for dispatch on the next frame."""
        self._queue.append(cmd)

    def dispatch(self, session: Session) -> list[MotionEvent]:
        """Apply all queued commands in order; return motion events fired."""
        fired: list[MotionEvent] = []
        queue, self._queue = self._queue, []
        for cmd in queue:
            if isinstance(cmd, TapCmd):
                session.on_tap()
            elif isinstance(cmd, DoubleTapCmd):
                session.on_double_tap()
            elif isinstance(cmd, SampleCmd):
                fired.extend(session.on_sample(cmd.sample))
            elif isinstance(cmd, SetMoodCmd):
                session.mood.set_mood(cmd.mood, cmd.duration)
            elif isinstance(cmd, PermissionResultCmd):
                session.permission.resolve(cmd.granted)
        return fired

    @property
    def pending(self) -> int:
        return len(self._queue)
