"""Motion signal processor — bump and turn detection from raw acceleration.

Samples include gravity.  Each axis runs through an exponential moving
average; a bump is the instantaneous z pulling away from its filtered
value, a turn is a sustained lateral (x or y) filtered acceleration.  The
two events have independent cooldowns and may fire on the same sample.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import IntEnum

from mochi.state.constants import (
    BUMP_COOLDOWN,
    BUMP_THRESHOLD,
    MOTION_SMOOTHING,
    TURN_COOLDOWN,
    TURN_THRESHOLD,
)

log = logging.getLogger(__name__)


class MotionEvent(IntEnum):
    BUMP = 0
    TURN = 1


@dataclass(frozen=True)
class AccelSample:
    """One accelerometer reading in m/s^2, gravity included."""

    x: float
    y: float
    z: float

    @property
    def finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)


@dataclass
class MotionFilterState:
    filtered_x: float = 0.0
    filtered_y: float = 0.0
    filtered_z: float = 0.0
    last_bump_at: float = -math.inf
    last_turn_at: float = -math.inf
    primed: bool = False


class MotionProcessor:
    """Turns a stream of AccelSample into MotionEvent lists."""

    def __init__(
        self,
        smoothing: float = MOTION_SMOOTHING,
        bump_threshold: float = BUMP_THRESHOLD,
        bump_cooldown: float = BUMP_COOLDOWN,
        turn_threshold: float = TURN_THRESHOLD,
        turn_cooldown: float = TURN_COOLDOWN,
    ) -> None:
        self.smoothing = max(0.0, min(1.0, smoothing))
        self.bump_threshold = bump_threshold
        self.bump_cooldown = bump_cooldown
        self.turn_threshold = turn_threshold
        self.turn_cooldown = turn_cooldown
        self.state = MotionFilterState()

    def reset(self) -> None:
        self.state = MotionFilterState()

    def process(self, sample: AccelSample | None, now: float) -> list[MotionEvent]:
        """Filter one sample taken at session time *now* (seconds).

        Missing or non-finite samples are skipped without touching the
        filter.  The first valid sample only seeds the filter, so resting
        gravity never reads as a bump.
        """
        if sample is None:
            return []
        if not sample.finite:
            log.debug("dropping non-finite sample %s", sample)
            return []

        st = self.state
        if not st.primed:
            st.filtered_x = sample.x
            st.filtered_y = sample.y
            st.filtered_z = sample.z
            st.primed = True
            return []

        a = self.smoothing
        st.filtered_x += (sample.x - st.filtered_x) * a
        st.filtered_y += (sample.y - st.filtered_y) * a
        st.filtered_z += (sample.z - st.filtered_z) * a

        events: list[MotionEvent] = []

        bump = abs(sample.z - st.filtered_z)
        if bump > self.bump_threshold and now - st.last_bump_at >= self.bump_cooldown:
            st.last_bump_at = max(st.last_bump_at, now)
            events.append(MotionEvent.BUMP)
            log.info("bump detected (dz=%.2f)", bump)

        lateral = max(abs(st.filtered_x), abs(st.filtered_y))
        if lateral > self.turn_threshold and now - st.last_turn_at >= self.turn_cooldown:
            st.last_turn_at = max(st.last_turn_at, now)
            events.append(MotionEvent.TURN)
            log.info("turn/accel detected (lateral=%.2f)", lateral)

        return events
