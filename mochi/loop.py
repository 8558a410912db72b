"""Frame loop — dispatch input, update, render, once per display refresh.

Each tick:
1. dt = clamped delta from the previous tick's timestamp
2. Dispatch queued input commands (gestures, sensor ticks, permission)
3. Advance mood countdown and blink scheduler by dt
4. Render the snapshot and replay it onto the canvas

Everything runs on one thread; input callbacks only queue commands, so
nothing mutates the session while a tick is in progress.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Callable

from mochi.input.command_bus import CommandBus
from mochi.render.canvas import Canvas, DrawOp, replay
from mochi.render.face import render_snapshot
from mochi.state.constants import ANIM_FPS, MAX_FRAME_DT
from mochi.state.motion import MotionEvent
from mochi.state.session import FaceSnapshot, Session

log = logging.getLogger(__name__)

InputHook = Callable[[float], None]
FrameHook = Callable[[FaceSnapshot, list[MotionEvent]], None]


def clamp_dt(now: float, last: float | None, max_dt: float = MAX_FRAME_DT) -> float:
    """Seconds since *last*, clamped to [0, max_dt]."""
    if last is None:
        return 0.0
    dt = now - last
    if not math.isfinite(dt) or dt < 0.0:
        return 0.0
    return min(dt, max_dt)


class FrameLoop:
    def __init__(
        self,
        session: Session,
        canvas: Canvas,
        size: Callable[[], tuple[int, int]],
        bus: CommandBus | None = None,
        fps: int = ANIM_FPS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session = session
        self.canvas = canvas
        self.size = size
        self.bus = bus or CommandBus()
        self.fps = max(1, fps)
        self.clock = clock
        self.frames = 0
        self.last_ops: list[DrawOp] = []
        self.last_dt = 0.0
        self._last: float | None = None
        self._running = False
        self._input_hooks: list[InputHook] = []
        self._hooks: list[FrameHook] = []

    def add_input_hook(self, cb: InputHook) -> None:
        """cb(now) runs before dispatch; it may push commands onto the bus."""
        self._input_hooks.append(cb)

    def add_hook(self, cb: FrameHook) -> None:
        """cb(snapshot, motion_events) runs after each frame is drawn."""
        self._hooks.append(cb)

    def tick(self, now: float) -> list[DrawOp]:
        dt = clamp_dt(now, self._last)
        self._last = now
        self.last_dt = dt

        for hook in self._input_hooks:
            hook(now)
        events = self.bus.dispatch(self.session)
        self.session.update(dt)

        snap = self.session.snapshot()
        ops = render_snapshot(snap, self.size())
        replay(ops, self.canvas)

        self.last_ops = ops
        self.frames += 1
        for cb in self._hooks:
            cb(snap, events)
        return ops

    def stop(self) -> None:
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def run(self, max_frames: int | None = None) -> None:
        """Tick at fps until stop() (or max_frames), yielding between frames."""
        period = 1.0 / self.fps
        self._running = True
        log.info("frame loop started at %d fps", self.fps)
        while self._running:
            start = self.clock()
            self.tick(start)
            if max_frames is not None and self.frames >= max_frames:
                break
            spent = self.clock() - start
            await asyncio.sleep(max(0.0, period - spent))
        self._running = False
        log.info("frame loop stopped after %d frames", self.frames)
