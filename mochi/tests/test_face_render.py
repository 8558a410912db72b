"""Tests for the face renderer and expression table."""

from __future__ import annotations

import math

import pytest

from mochi.render.canvas import (
    Clear,
    FillCircle,
    FillRoundedRect,
    RecordingCanvas,
    StrokeArc,
    StrokeQuadraticCurve,
    quadratic_points,
    replay,
)
from mochi.render.expressions import EXPRESSIONS, Expression
from mochi.render.face import render_face
from mochi.state.constants import (
    CHEEK_COLOR,
    EYE_HEIGHT,
    MAX_LID_CLOSURE,
    MOUTH_Y,
    Mood,
)

SIZE = (800, 480)


def _eyes(ops):
    return [op for op in ops if isinstance(op, FillRoundedRect)]


def _curves(ops):
    return [op for op in ops if isinstance(op, StrokeQuadraticCurve)]


class TestExpressionTable:
    def test_every_mood_has_an_entry(self):
        assert set(EXPRESSIONS) == set(Mood)

    def test_entries_are_immutable(self):
        expr = EXPRESSIONS[Mood.HAPPY]
        with pytest.raises(AttributeError):
            expr.smile = 0.0  # type: ignore[misc]
        assert isinstance(expr, Expression)

    def test_angry_frowns_happy_smiles(self):
        assert EXPRESSIONS[Mood.ANGRY].smile < 0.0
        assert EXPRESSIONS[Mood.HAPPY].smile > 0.0


class TestDeterminism:
    @pytest.mark.parametrize("mood", list(Mood))
    def test_identical_inputs_identical_ops(self, mood):
        a = render_face(mood, 0.3, 12.34, SIZE)
        b = render_face(mood, 0.3, 12.34, SIZE)
        assert a == b

    def test_first_op_clears(self):
        ops = render_face(Mood.IDLE, 0.0, 0.0, SIZE)
        assert isinstance(ops[0], Clear)


class TestEyes:
    def test_two_eyes(self):
        assert len(_eyes(render_face(Mood.IDLE, 0.0, 0.0, SIZE))) == 2

    def test_blink_shrinks_eye_height(self):
        open_h = _eyes(render_face(Mood.IDLE, 0.0, 0.0, SIZE))[0].h
        half_h = _eyes(render_face(Mood.IDLE, 0.5, 0.0, SIZE))[0].h
        assert half_h == pytest.approx(open_h * 0.5)

    def test_closure_capped(self):
        eye = _eyes(render_face(Mood.IDLE, 1.0, 0.0, SIZE))[0]
        expected = SIZE[1] * EYE_HEIGHT * (1.0 - MAX_LID_CLOSURE)
        assert eye.h == pytest.approx(expected)
        assert eye.h > 0.0

    def test_squint_adds_to_blink(self):
        idle = _eyes(render_face(Mood.IDLE, 0.2, 0.0, SIZE))[0].h
        sleepy = _eyes(render_face(Mood.SLEEPY, 0.2, 0.0, SIZE))[0].h
        assert sleepy < idle

    def test_squint_plus_blink_never_negative(self):
        eye = _eyes(render_face(Mood.SLEEPY, 1.0, 0.0, SIZE))[0]
        assert eye.h > 0.0

    def test_out_of_range_closure_clamped(self):
        low = _eyes(render_face(Mood.IDLE, -5.0, 0.0, SIZE))[0].h
        nan = _eyes(render_face(Mood.IDLE, math.nan, 0.0, SIZE))[0].h
        opened = _eyes(render_face(Mood.IDLE, 0.0, 0.0, SIZE))[0].h
        assert low == pytest.approx(opened)
        assert nan == pytest.approx(opened)

    def test_breathing_changes_width_not_height(self):
        a = _eyes(render_face(Mood.IDLE, 0.0, 0.0, SIZE))[0]
        b = _eyes(render_face(Mood.IDLE, 0.0, 0.8, SIZE))[0]
        assert a.w != b.w
        assert a.h == b.h

    def test_geometry_scales_with_surface(self):
        small = _eyes(render_face(Mood.IDLE, 0.0, 0.0, (400, 240)))[0]
        large = _eyes(render_face(Mood.IDLE, 0.0, 0.0, (800, 480)))[0]
        assert large.w == pytest.approx(small.w * 2)
        assert large.h == pytest.approx(small.h * 2)


class TestMouth:
    def test_shock_draws_open_mouth(self):
        ops = render_face(Mood.SHOCK, 0.0, 0.0, SIZE)
        arcs = [op for op in ops if isinstance(op, StrokeArc)]
        assert len(arcs) == 1
        assert arcs[0].end - arcs[0].start == pytest.approx(2 * math.pi)

    def test_smile_control_point_below_corners(self):
        mouth = _curves(render_face(Mood.HAPPY, 0.0, 0.0, SIZE))[-1]
        (_, y0), (_, yc), (_, y2) = mouth.points
        assert y0 == y2 == pytest.approx(SIZE[1] * MOUTH_Y)
        assert yc > y0

    def test_frown_control_point_above_corners(self):
        mouth = _curves(render_face(Mood.ANGRY, 0.0, 0.0, SIZE))[-1]
        (_, y0), (_, yc), _ = mouth.points
        assert yc < y0

    def test_closed_moods_have_no_arc(self):
        for mood in (Mood.IDLE, Mood.HAPPY, Mood.SLEEPY, Mood.ANGRY):
            ops = render_face(mood, 0.0, 0.0, SIZE)
            assert not any(isinstance(op, StrokeArc) for op in ops)


class TestBrowsAndCheeks:
    def test_idle_has_no_brows(self):
        ops = render_face(Mood.IDLE, 0.0, 0.0, SIZE)
        assert len(_curves(ops)) == 1  # mouth only

    def test_angry_brows_slope_inward_down(self):
        ops = render_face(Mood.ANGRY, 0.0, 0.0, SIZE)
        curves = _curves(ops)
        assert len(curves) == 3
        left, right = curves[0], curves[1]
        # points run outer -> inner; inner end is lower (larger y)
        assert left.points[2][1] > left.points[0][1]
        assert right.points[2][1] > right.points[0][1]

    def test_cheeks_only_when_happy(self):
        for mood in Mood:
            ops = render_face(mood, 0.0, 0.0, SIZE)
            cheeks = [op for op in ops if isinstance(op, FillCircle)]
            if mood == Mood.HAPPY:
                assert len(cheeks) == 2
                assert all(c.color == CHEEK_COLOR for c in cheeks)
            else:
                assert cheeks == []


class TestCanvas:
    def test_replay_reproduces_ops(self):
        ops = render_face(Mood.HAPPY, 0.4, 3.0, SIZE)
        canvas = RecordingCanvas(*SIZE)
        replay(ops, canvas)
        assert canvas.ops == ops

    def test_replay_rejects_unknown_op(self):
        with pytest.raises(TypeError):
            replay([object()], RecordingCanvas())  # type: ignore[list-item]

    def test_quadratic_points_endpoints(self):
        pts = quadratic_points((0.0, 0.0), (5.0, 10.0), (10.0, 0.0), segments=4)
        assert len(pts) == 5
        assert pts[0] == (0.0, 0.0)
        assert pts[-1] == (10.0, 0.0)
        assert pts[2] == pytest.approx((5.0, 5.0))

    def test_zero_size_surface_does_not_fail(self):
        ops = render_face(Mood.SHOCK, 0.0, 0.0, (0, 0))
        assert ops
