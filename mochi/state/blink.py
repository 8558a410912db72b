"""Blink scheduler — spontaneous and triggered eyelid closures.

phase runs 0 -> 1 at a fixed rate while a blink is in progress and is 0
otherwise.  closure follows a smoothstep ease: shut over the first half of
the phase, open again over the second half.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from mochi.state.constants import (
    BLINK_DURATION,
    BLINK_INTERVAL_MAX,
    BLINK_INTERVAL_MIN,
    BLINK_PHASE_START,
)


def _smoothstep(t: float) -> float:
    t = max(0.0, min(1.0, t))
    return t * t * (3.0 - 2.0 * t)


def closure_for_phase(phase: float) -> float:
    """Lid closure (0 = open, 1 = shut) at a given blink phase."""
    if phase <= 0.0 or phase >= 1.0:
        return 0.0
    if phase < 0.5:
        return _smoothstep(phase * 2.0)
    return _smoothstep((1.0 - phase) * 2.0)


@dataclass
class BlinkState:
    phase: float = 0.0
    closure: float = 0.0

    @property
    def active(self) -> bool:
        return self.phase > 0.0


class BlinkScheduler:
    """Counts down to the next spontaneous blink and animates blinks."""

    def __init__(
        self,
        interval_min: float = BLINK_INTERVAL_MIN,
        interval_max: float = BLINK_INTERVAL_MAX,
        duration: float = BLINK_DURATION,
        rng: random.Random | None = None,
    ) -> None:
        self.interval_min = interval_min
        self.interval_max = max(interval_min, interval_max)
        self.rate = 1.0 / max(duration, 1e-3)  # phase units per second
        self.state = BlinkState()
        self._rng = rng or random.Random()
        self.next_blink = self._draw_interval()

    @property
    def phase(self) -> float:
        return self.state.phase

    @property
    def closure(self) -> float:
        return self.state.closure

    def trigger(self) -> bool:
        """Start a blink.  No-op (returns False) while one is in progress."""
        if self.state.phase > 0.0:
            return False
        self.state.phase = BLINK_PHASE_START
        self.state.closure = closure_for_phase(self.state.phase)
        return True

    def update(self, dt: float) -> None:
        if dt < 0.0 or dt != dt:
            dt = 0.0

        st = self.state
        if st.phase > 0.0:
            st.phase += self.rate * dt
            if st.phase >= 1.0:
                st.phase = 0.0
        st.closure = closure_for_phase(st.phase)

        self.next_blink -= dt
        if self.next_blink <= 0.0:
            self.trigger()
            self.next_blink = self._draw_interval()

    def _draw_interval(self) -> float:
        return self._rng.uniform(self.interval_min, self.interval_max)
