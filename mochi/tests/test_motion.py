"""Tests for motion filtering: EMA, bump/turn detection, cooldowns."""

from __future__ import annotations

import math

import pytest

from mochi.state.constants import GRAVITY
from mochi.state.motion import AccelSample, MotionEvent, MotionProcessor

REST = AccelSample(0.0, 0.0, GRAVITY)


def _jolt(dz: float = 4.0) -> AccelSample:
    return AccelSample(0.0, 0.0, GRAVITY + dz)


def _settle(mp: MotionProcessor, start: float, end: float, step: float = 0.05) -> None:
    """Feed resting samples from start up to (not including) end."""
    t = start
    while t < end - 1e-9:
        assert mp.process(REST, t) == []
        t += step


class TestFilter:
    def test_first_sample_seeds_filter(self):
        mp = MotionProcessor()
        assert mp.process(REST, 0.0) == []
        assert mp.state.primed
        assert mp.state.filtered_z == GRAVITY

    def test_ema_step(self):
        mp = MotionProcessor(smoothing=0.12)
        mp.process(AccelSample(0.0, 0.0, 0.0), 0.0)
        mp.process(AccelSample(1.0, -2.0, 0.5), 0.01)
        assert mp.state.filtered_x == pytest.approx(0.12)
        assert mp.state.filtered_y == pytest.approx(-0.24)
        assert mp.state.filtered_z == pytest.approx(0.06)

    def test_missing_sample_skipped(self):
        mp = MotionProcessor()
        assert mp.process(None, 0.0) == []
        assert not mp.state.primed

    def test_non_finite_sample_skipped(self):
        mp = MotionProcessor()
        mp.process(REST, 0.0)
        assert mp.process(AccelSample(math.nan, 0.0, GRAVITY), 0.1) == []
        assert mp.process(AccelSample(0.0, math.inf, GRAVITY), 0.2) == []
        assert mp.state.filtered_x == 0.0
        assert mp.state.filtered_y == 0.0

    def test_jitter_does_not_fire(self):
        mp = MotionProcessor()
        mp.process(REST, 0.0)
        for i in range(1, 200):
            wobble = 0.5 if i % 2 else -0.5
            s = AccelSample(wobble, -wobble, GRAVITY + wobble)
            assert mp.process(s, i * 0.016) == []


class TestBump:
    def test_bump_fires(self):
        mp = MotionProcessor()
        mp.process(REST, 0.0)
        assert mp.process(_jolt(3.0), 0.0) == [MotionEvent.BUMP]
        assert mp.state.last_bump_at == 0.0

    def test_below_threshold_does_not_fire(self):
        mp = MotionProcessor()
        mp.process(REST, 0.0)
        assert mp.process(_jolt(2.0), 0.0) == []

    def test_negative_jolt_fires(self):
        mp = MotionProcessor()
        mp.process(REST, 0.0)
        assert mp.process(_jolt(-4.0), 0.5) == [MotionEvent.BUMP]

    def test_second_bump_inside_cooldown_suppressed(self):
        mp = MotionProcessor()
        mp.process(REST, 0.0)
        assert mp.process(_jolt(), 0.0) == [MotionEvent.BUMP]
        _settle(mp, 0.05, 1.0)
        assert mp.process(_jolt(), 1.0) == []
        assert mp.state.last_bump_at == 0.0

    def test_second_bump_after_cooldown_fires(self):
        mp = MotionProcessor()
        mp.process(REST, 0.0)
        assert mp.process(_jolt(), 0.0) == [MotionEvent.BUMP]
        _settle(mp, 0.05, 1.3)
        assert mp.process(_jolt(), 1.3) == [MotionEvent.BUMP]
        assert mp.state.last_bump_at == 1.3

    def test_cooldown_timestamps_never_decrease(self):
        mp = MotionProcessor()
        mp.process(REST, 0.0)
        mp.process(_jolt(), 5.0)
        mp.process(REST, 5.1)
        mp.process(_jolt(), 2.0)  # out-of-order timestamp
        assert mp.state.last_bump_at == 5.0


class TestTurn:
    def test_sustained_lateral_fires_turn(self):
        mp = MotionProcessor()
        mp.process(REST, 0.0)
        fired: list[tuple[float, MotionEvent]] = []
        t = 0.0
        for _ in range(60):
            t += 0.016
            for ev in mp.process(AccelSample(4.0, 0.0, GRAVITY), t):
                fired.append((t, ev))
        assert [ev for _, ev in fired] == [MotionEvent.TURN]

    def test_single_spike_does_not_fire_turn(self):
        mp = MotionProcessor()
        mp.process(REST, 0.0)
        assert mp.process(AccelSample(8.0, 0.0, GRAVITY), 0.1) == []

    def test_y_axis_also_counts(self):
        mp = MotionProcessor()
        mp.process(REST, 0.0)
        events: list[MotionEvent] = []
        for i in range(1, 60):
            events += mp.process(AccelSample(0.0, -4.0, GRAVITY), i * 0.016)
        assert events == [MotionEvent.TURN]

    def test_turn_cooldown(self):
        mp = MotionProcessor()
        mp.process(REST, 0.0)
        times: list[float] = []
        for i in range(1, 250):  # ~4 s of sustained cornering
            t = i * 0.016
            if mp.process(AccelSample(4.0, 0.0, GRAVITY), t):
                times.append(t)
        assert len(times) >= 2
        for a, b in zip(times, times[1:]):
            assert b - a >= 1.4 - 1e-9

    def test_bump_and_turn_same_sample(self):
        mp = MotionProcessor()
        mp.process(AccelSample(3.0, 0.0, GRAVITY), 0.0)
        # Filter is seeded with x=3.0 already over the turn threshold.
        events = mp.process(AccelSample(3.0, 0.0, GRAVITY + 4.0), 0.0)
        assert set(events) == {MotionEvent.BUMP, MotionEvent.TURN}
