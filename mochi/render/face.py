"""Face renderer — snapshot in, draw primitives out.

render_face() is a pure function of (mood, closure, elapsed, size): it
reads nothing else and mutates nothing, so identical inputs always give
identical primitive lists.
"""

from __future__ import annotations

import math

from mochi.render.canvas import (
    Clear,
    DrawOp,
    FillCircle,
    FillRoundedRect,
    StrokeArc,
    StrokeQuadraticCurve,
)
from mochi.render.expressions import Expression, expression_for
from mochi.state.constants import (
    BG_COLOR,
    BREATH_AMOUNT,
    BREATH_BOB,
    BREATH_SPEED,
    BROW_EPSILON,
    BROW_HALF_W,
    BROW_RAISE,
    BROW_TILT_DEPTH,
    CHEEK_COLOR,
    CHEEK_DX,
    CHEEK_DY,
    CHEEK_R,
    EYE_HEIGHT,
    EYE_SPACING,
    EYE_WIDTH,
    EYE_Y,
    FACE_COLOR,
    MAX_LID_CLOSURE,
    MOUTH_CURVE_DEPTH,
    MOUTH_HALF_W,
    MOUTH_OPEN_R,
    MOUTH_OPEN_THRESHOLD,
    MOUTH_THICKNESS,
    MOUTH_Y,
    Mood,
)
from mochi.state.session import FaceSnapshot


def _clamp(x: float, a: float, b: float) -> float:
    if x != x:  # NaN
        return a
    return max(a, min(b, x))


def breath(elapsed: float) -> float:
    """Breathing wave in [-1, 1]."""
    if not math.isfinite(elapsed):
        return 0.0
    return math.sin(elapsed * BREATH_SPEED)


def render_face(
    mood: Mood, closure: float, elapsed: float, size: tuple[int, int]
) -> list[DrawOp]:
    w = float(max(1, size[0]))
    h = float(max(1, size[1]))
    unit = min(w, h)
    expr = expression_for(mood)

    ops: list[DrawOp] = [Clear(BG_COLOR)]

    cx = w / 2
    b = breath(elapsed)

    # ── Eyes ─────────────────────────────────────────────────────
    lid = _clamp(_clamp(closure, 0.0, 1.0) + expr.squint, 0.0, MAX_LID_CLOSURE)
    eye_w = w * EYE_WIDTH * (1.0 + BREATH_AMOUNT * b)
    eye_h = h * EYE_HEIGHT * (1.0 - lid)
    eye_cy = h * EYE_Y + h * BREATH_BOB * b
    eye_top = eye_cy - h * EYE_HEIGHT / 2
    radius = min(eye_w, eye_h) / 2

    for ex in (cx - w * EYE_SPACING, cx + w * EYE_SPACING):
        ops.append(
            FillRoundedRect(
                ex - eye_w / 2, eye_cy - eye_h / 2, eye_w, eye_h, radius, FACE_COLOR
            )
        )

    # ── Brows ────────────────────────────────────────────────────
    if abs(expr.brow_tilt) > BROW_EPSILON:
        ops.extend(_brows(expr, cx, eye_top, w, h, unit))

    # ── Cheeks ───────────────────────────────────────────────────
    if mood == Mood.HAPPY:
        cheek_y = eye_cy + h * CHEEK_DY
        for ex, side in ((cx - w * EYE_SPACING, -1.0), (cx + w * EYE_SPACING, 1.0)):
            ops.append(
                FillCircle(ex + side * w * CHEEK_DX, cheek_y, unit * CHEEK_R, CHEEK_COLOR)
            )

    # ── Mouth ────────────────────────────────────────────────────
    ops.append(_mouth(expr, cx, w, h, unit))
    return ops


def render_snapshot(snap: FaceSnapshot, size: tuple[int, int]) -> list[DrawOp]:
    return render_face(snap.mood, snap.closure, snap.elapsed, size)


def _brows(
    expr: Expression, cx: float, eye_top: float, w: float, h: float, unit: float
) -> list[DrawOp]:
    tilt = _clamp(expr.brow_tilt, -1.0, 1.0)
    by = eye_top - h * BROW_RAISE
    half = w * BROW_HALF_W
    drop = h * BROW_TILT_DEPTH * tilt
    thick = unit * MOUTH_THICKNESS * 0.8
    ops: list[DrawOp] = []
    for ex, inward in ((cx - w * EYE_SPACING, 1.0), (cx + w * EYE_SPACING, -1.0)):
        inner = (ex + inward * half, by + drop)
        outer = (ex - inward * half, by - drop)
        mid = ((inner[0] + outer[0]) / 2, (inner[1] + outer[1]) / 2)
        ops.append(StrokeQuadraticCurve((outer, mid, inner), thick, FACE_COLOR))
    return ops


def _mouth(expr: Expression, cx: float, w: float, h: float, unit: float) -> DrawOp:
    my = h * MOUTH_Y
    open_frac = _clamp(expr.mouth_open, 0.0, 1.0)
    if open_frac > MOUTH_OPEN_THRESHOLD:
        r = unit * MOUTH_OPEN_R * (0.6 + 0.4 * open_frac)
        return StrokeArc(cx, my, r, 0.0, 2 * math.pi, unit * MOUTH_THICKNESS, FACE_COLOR)

    half = w * MOUTH_HALF_W
    # Canvas y grows downward: a smile pulls the control point down.
    ctrl_y = my + h * MOUTH_CURVE_DEPTH * _clamp(expr.smile, -1.0, 1.0)
    return StrokeQuadraticCurve(
        ((cx - half, my), (cx, ctrl_y), (cx + half, my)),
        unit * MOUTH_THICKNESS,
        FACE_COLOR,
    )
