"""Session context — the one owner of mood, blink and motion state.

Built once per run and driven only by the frame loop's update step (and
the input commands it dispatches).  Tests drive it directly with
synthetic dt and event sequences.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable

from mochi.config import MochiConfig
from mochi.state.blink import BlinkScheduler
from mochi.state.constants import Mood
from mochi.state.mood import MoodStateMachine
from mochi.state.motion import AccelSample, MotionEvent, MotionProcessor
from mochi.state.permission import PermissionGate

log = logging.getLogger(__name__)

MotionListener = Callable[[MotionEvent], None]


@dataclass(frozen=True)
class FaceSnapshot:
    """Read-only view handed to the renderer each frame."""

    mood: Mood
    closure: float
    elapsed: float


class Session:
    def __init__(
        self,
        cfg: MochiConfig | None = None,
        rng: random.Random | None = None,
        permission_granted: bool | None = None,
    ) -> None:
        cfg = cfg or MochiConfig()
        self.cfg = cfg
        if rng is None:
            rng = random.Random(cfg.seed)

        self.elapsed = 0.0
        self.mood = MoodStateMachine()
        self.blink = BlinkScheduler(
            interval_min=cfg.blink.interval_min_s,
            interval_max=cfg.blink.interval_max_s,
            duration=cfg.blink.duration_s,
            rng=rng,
        )
        self.motion = MotionProcessor(
            smoothing=cfg.motion.smoothing,
            bump_threshold=cfg.motion.bump_threshold,
            bump_cooldown=cfg.motion.bump_cooldown_s,
            turn_threshold=cfg.motion.turn_threshold,
            turn_cooldown=cfg.motion.turn_cooldown_s,
        )
        if permission_granted is None:
            permission_granted = not cfg.sensor.require_permission
        self.permission = PermissionGate(granted=permission_granted)

        self._motion_listeners: list[MotionListener] = []
        self.mood.add_listener(self._on_mood_change)

    def add_motion_listener(self, cb: MotionListener) -> None:
        self._motion_listeners.append(cb)

    # ── Gesture handlers ─────────────────────────────────────────

    def on_tap(self) -> None:
        self.mood.tap(self.cfg.mood.tap_duration_s)

    def on_double_tap(self) -> None:
        self.mood.cycle()

    # ── Sensor handler ───────────────────────────────────────────

    def on_sample(self, sample: AccelSample | None) -> list[MotionEvent]:
        """Feed one sensor tick.  Ignored unless motion access is granted."""
        if sample is None or not self.permission.granted:
            return []
        events = self.motion.process(sample, self.elapsed)
        for ev in events:
            if ev == MotionEvent.BUMP:
                self.mood.set_mood(Mood.SHOCK, self.cfg.mood.bump_duration_s)
                self.blink.trigger()
            elif ev == MotionEvent.TURN:
                self.mood.set_mood(Mood.ANGRY, self.cfg.mood.turn_duration_s)
            for cb in self._motion_listeners:
                cb(ev)
        return events

    # ── Per-frame ────────────────────────────────────────────────

    def update(self, dt: float) -> None:
        """Advance every timer by dt seconds (already clamped by the loop)."""
        self.elapsed += dt
        self.mood.update(dt)
        self.blink.update(dt)

    def snapshot(self) -> FaceSnapshot:
        return FaceSnapshot(
            mood=self.mood.kind,
            closure=self.blink.closure,
            elapsed=self.elapsed,
        )

    def _on_mood_change(self, old: Mood, new: Mood) -> None:
        if new == Mood.SHOCK:
            self.blink.trigger()
