"""Sensor feeds.

A feed is anything with read() -> AccelSample | None.  The desktop build
has no accelerometer, so SimulatedAccelerometer stands in for one: held
arrow keys tilt it, the jolt key spikes z for one reading.  run_sensor()
polls a feed on the event loop and pushes each reading onto the bus.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Protocol

from mochi.input.command_bus import CommandBus, SampleCmd
from mochi.state.constants import (
    GRAVITY,
    SENSOR_HZ,
    SENSOR_NOISE,
    SIM_JOLT,
    SIM_TILT_DECAY,
    SIM_TILT_MAX,
    SIM_TILT_STEP,
)
from mochi.state.motion import AccelSample

log = logging.getLogger(__name__)


class SensorFeed(Protocol):
    def read(self) -> AccelSample | None: ...


class UnavailableSensor:
    """Feed for devices without an accelerometer."""

    def read(self) -> AccelSample | None:
        return None


class SimulatedAccelerometer:
    def __init__(self, noise: float = SENSOR_NOISE, rng: random.Random | None = None) -> None:
        self.noise = max(0.0, noise)
        self.tilt_x = 0.0
        self.tilt_y = 0.0
        self._jolt = 0.0
        self._rng = rng or random.Random()

    def tilt(self, dx: float, dy: float) -> None:
        """Nudge the tilt by (dx, dy) steps, clamped to +/- SIM_TILT_MAX."""
        self.tilt_x = max(-SIM_TILT_MAX, min(SIM_TILT_MAX, self.tilt_x + dx * SIM_TILT_STEP))
        self.tilt_y = max(-SIM_TILT_MAX, min(SIM_TILT_MAX, self.tilt_y + dy * SIM_TILT_STEP))

    def relax(self) -> None:
        """Ease back toward level (called on frames with no tilt key held)."""
        self.tilt_x *= SIM_TILT_DECAY
        self.tilt_y *= SIM_TILT_DECAY
        if abs(self.tilt_x) < 0.01:
            self.tilt_x = 0.0
        if abs(self.tilt_y) < 0.01:
            self.tilt_y = 0.0

    def jolt(self, amount: float = SIM_JOLT) -> None:
        self._jolt = amount

    def read(self) -> AccelSample | None:
        jolt, self._jolt = self._jolt, 0.0
        n = self.noise
        return AccelSample(
            x=self.tilt_x + (self._rng.gauss(0.0, n) if n else 0.0),
            y=self.tilt_y + (self._rng.gauss(0.0, n) if n else 0.0),
            z=GRAVITY + jolt + (self._rng.gauss(0.0, n) if n else 0.0),
        )


async def run_sensor(feed: SensorFeed, bus: CommandBus, hz: int = SENSOR_HZ) -> None:
    """Poll *feed* at *hz* until cancelled."""
    period = 1.0 / max(1, hz)
    log.info("sensor polling at %d Hz (%s)", hz, type(feed).__name__)
    while True:
        bus.push(SampleCmd(feed.read()))
        await asyncio.sleep(period)
