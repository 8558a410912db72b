"""Keyboard / pointer handler — translates pygame events to Command objects.

All state changes go through the CommandBus (never direct Session mutation).
Pointer and touch presses feed the gesture recognizer; SPACE and D fire a
tap / double tap directly for quick testing.  The permission prompt runs
as a task and its answer is queued as a PermissionResultCmd.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import pygame

from mochi.input.command_bus import (
    CommandBus,
    DoubleTapCmd,
    PermissionResultCmd,
    SetMoodCmd,
    TapCmd,
)
from mochi.input.gestures import Gesture, GestureRecognizer
from mochi.state.constants import Mood

if TYPE_CHECKING:
    from mochi.input.sensors import SimulatedAccelerometer
    from mochi.state.permission import PermissionGate, PermissionPrompt

log = logging.getLogger(__name__)

_MOOD_KEYS = {
    pygame.K_1: Mood.IDLE,
    pygame.K_2: Mood.HAPPY,
    pygame.K_3: Mood.SLEEPY,
    pygame.K_4: Mood.ANGRY,
    pygame.K_5: Mood.SHOCK,
}


class KeyboardHandler:
    """Translates pygame events into CommandBus commands."""

    def __init__(
        self,
        bus: CommandBus,
        gestures: GestureRecognizer,
        gate: PermissionGate,
        prompt: PermissionPrompt,
        sensor: SimulatedAccelerometer | None = None,
    ) -> None:
        self.bus = bus
        self.gestures = gestures
        self.gate = gate
        self.prompt = prompt
        self.sensor = sensor
        self.show_hud: bool = True
        self.resized: tuple[int, int] | None = None
        self._quit_requested: bool = False
        self._permission_task: asyncio.Task | None = None

    @property
    def quit_requested(self) -> bool:
        return self._quit_requested

    def handle_event(self, event: pygame.event.Event, now: float) -> None:
        """Process a single pygame event received at time *now*."""
        if event.type == pygame.QUIT:
            self._quit_requested = True
        elif event.type == pygame.VIDEORESIZE:
            self.resized = (event.w, event.h)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._press(now)
        elif event.type == pygame.FINGERDOWN:
            self._press(now)
        elif event.type == pygame.KEYDOWN:
            self._key(event.key, now)

    def poll(self, now: float) -> None:
        """Per-frame work: flush expired single taps, apply held keys."""
        if self.gestures.poll(now) == Gesture.TAP:
            self.bus.push(TapCmd())
        if self.sensor is not None:
            self._held_keys(pygame.key.get_pressed())

    # ── Internals ────────────────────────────────────────────────

    def _press(self, now: float) -> None:
        for g in self.gestures.press(now):
            self.bus.push(DoubleTapCmd() if g == Gesture.DOUBLE_TAP else TapCmd())

    def _key(self, key: int, now: float) -> None:
        # ── Quit ─────────────────────────────────────────────
        if key in (pygame.K_q, pygame.K_ESCAPE):
            self._quit_requested = True
            return

        # ── Gestures ─────────────────────────────────────────
        if key == pygame.K_SPACE:
            self.bus.push(TapCmd())
            return
        if key == pygame.K_d:
            self.bus.push(DoubleTapCmd())
            return

        # ── Debug moods (locked); 0 releases back to idle ────
        mood = _MOOD_KEYS.get(key)
        if mood is not None:
            self.bus.push(SetMoodCmd(mood, None))
            return
        if key == pygame.K_0:
            self.bus.push(SetMoodCmd(Mood.IDLE, 0.0))
            return

        # ── Motion permission ────────────────────────────────
        if key == pygame.K_m:
            self._request_permission()
            return
        if key in (pygame.K_y, pygame.K_n) and self.prompt.pending:
            self.prompt.answer(key == pygame.K_y)
            return

        # ── Simulated jolt ───────────────────────────────────
        if key == pygame.K_j and self.sensor is not None:
            self.sensor.jolt()
            return

        # ── HUD ──────────────────────────────────────────────
        if key == pygame.K_h:
            self.show_hud = not self.show_hud
            return

    def _held_keys(self, keys: pygame.key.ScancodeWrapper) -> None:
        assert self.sensor is not None
        dx = int(keys[pygame.K_RIGHT]) - int(keys[pygame.K_LEFT])
        dy = int(keys[pygame.K_DOWN]) - int(keys[pygame.K_UP])
        if dx or dy:
            self.sensor.tilt(dx, dy)
        else:
            self.sensor.relax()

    def _request_permission(self) -> None:
        if self.gate.granted or self.gate.requesting:
            return
        log.info("requesting motion permission (answer Y/N)")
        self._permission_task = asyncio.get_running_loop().create_task(
            self._ask_permission()
        )

    async def _ask_permission(self) -> None:
        granted = await self.gate.ask(self.prompt.ask)
        if granted is not None:
            self.bus.push(PermissionResultCmd(granted))
