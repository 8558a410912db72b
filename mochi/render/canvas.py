"""Draw primitives and the canvases that consume them.

render_face() returns a list of primitives; replay() feeds them to any
Canvas.  PygameCanvas draws to a pygame Surface, RecordingCanvas keeps the
calls for tests and headless runs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol, Sequence, Union

import pygame

Color = tuple[int, int, int]
Point = tuple[float, float]

CURVE_SEGMENTS = 24  # Polyline segments per quadratic curve


# ── Primitives ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Clear:
    color: Color


@dataclass(frozen=True)
class FillRoundedRect:
    x: float
    y: float
    w: float
    h: float
    radius: float
    color: Color


@dataclass(frozen=True)
class StrokeQuadraticCurve:
    points: tuple[Point, Point, Point]  # start, control, end
    width: float
    color: Color


@dataclass(frozen=True)
class StrokeArc:
    cx: float
    cy: float
    r: float
    start: float  # radians
    end: float
    width: float
    color: Color


@dataclass(frozen=True)
class FillCircle:
    cx: float
    cy: float
    r: float
    color: Color


DrawOp = Union[Clear, FillRoundedRect, StrokeQuadraticCurve, StrokeArc, FillCircle]


class Canvas(Protocol):
    def resize(self, width: int, height: int) -> None: ...

    def clear(self, color: Color) -> None: ...

    def fill_rounded_rect(
        self, x: float, y: float, w: float, h: float, radius: float, color: Color
    ) -> None: ...

    def stroke_quadratic_curve(
        self, points: Sequence[Point], width: float, color: Color
    ) -> None: ...

    def stroke_arc(
        self,
        cx: float,
        cy: float,
        r: float,
        start: float,
        end: float,
        width: float,
        color: Color,
    ) -> None: ...

    def fill_circle(self, cx: float, cy: float, r: float, color: Color) -> None: ...


def replay(ops: Sequence[DrawOp], canvas: Canvas) -> None:
    """Issue each primitive as a canvas call, in order."""
    for op in ops:
        if isinstance(op, Clear):
            canvas.clear(op.color)
        elif isinstance(op, FillRoundedRect):
            canvas.fill_rounded_rect(op.x, op.y, op.w, op.h, op.radius, op.color)
        elif isinstance(op, StrokeQuadraticCurve):
            canvas.stroke_quadratic_curve(op.points, op.width, op.color)
        elif isinstance(op, StrokeArc):
            canvas.stroke_arc(op.cx, op.cy, op.r, op.start, op.end, op.width, op.color)
        elif isinstance(op, FillCircle):
            canvas.fill_circle(op.cx, op.cy, op.r, op.color)
        else:
            raise TypeError(f"unknown draw op: {op!r}")


def quadratic_points(
    p0: Point, p1: Point, p2: Point, segments: int = CURVE_SEGMENTS
) -> list[Point]:
    """Sample a quadratic Bezier into segments+1 points."""
    out: list[Point] = []
    for i in range(segments + 1):
        t = i / segments
        u = 1.0 - t
        out.append(
            (
                u * u * p0[0] + 2 * u * t * p1[0] + t * t * p2[0],
                u * u * p0[1] + 2 * u * t * p1[1] + t * t * p2[1],
            )
        )
    return out


# ── Canvases ─────────────────────────────────────────────────────────


class RecordingCanvas:
    """Keeps every call as a primitive.  Used by tests and --headless."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.size = (width, height)
        self.ops: list[DrawOp] = []

    def resize(self, width: int, height: int) -> None:
        self.size = (width, height)

    def clear(self, color: Color) -> None:
        self.ops.append(Clear(color))

    def fill_rounded_rect(self, x, y, w, h, radius, color) -> None:
        self.ops.append(FillRoundedRect(x, y, w, h, radius, color))

    def stroke_quadratic_curve(self, points, width, color) -> None:
        p0, p1, p2 = points
        self.ops.append(StrokeQuadraticCurve((p0, p1, p2), width, color))

    def stroke_arc(self, cx, cy, r, start, end, width, color) -> None:
        self.ops.append(StrokeArc(cx, cy, r, start, end, width, color))

    def fill_circle(self, cx, cy, r, color) -> None:
        self.ops.append(FillCircle(cx, cy, r, color))


class PygameCanvas:
    """Immediate-mode drawing onto a pygame Surface."""

    def __init__(self, surface: pygame.Surface) -> None:
        self.surface = surface

    @property
    def size(self) -> tuple[int, int]:
        return self.surface.get_size()

    def resize(self, width: int, height: int) -> None:
        # Display surfaces are resized by pygame; off-screen ones are rebuilt.
        if self.surface.get_size() == (width, height):
            return
        if pygame.display.get_surface() is self.surface:
            return
        self.surface = pygame.Surface((max(1, width), max(1, height)))

    def clear(self, color: Color) -> None:
        self.surface.fill(color)

    def fill_rounded_rect(
        self, x: float, y: float, w: float, h: float, radius: float, color: Color
    ) -> None:
        rect = pygame.Rect(round(x), round(y), max(1, round(w)), max(1, round(h)))
        pygame.draw.rect(self.surface, color, rect, border_radius=max(0, round(radius)))

    def stroke_quadratic_curve(
        self, points: Sequence[Point], width: float, color: Color
    ) -> None:
        p0, p1, p2 = points
        pts = quadratic_points(p0, p1, p2)
        w = max(1, round(width))
        pygame.draw.lines(self.surface, color, False, pts, w)
        # Round caps
        for px, py in (pts[0], pts[-1]):
            pygame.draw.circle(self.surface, color, (px, py), w / 2)

    def stroke_arc(
        self,
        cx: float,
        cy: float,
        r: float,
        start: float,
        end: float,
        width: float,
        color: Color,
    ) -> None:
        rect = pygame.Rect(round(cx - r), round(cy - r), round(2 * r), round(2 * r))
        if end - start >= 2 * math.pi - 1e-6:
            pygame.draw.ellipse(self.surface, color, rect, max(1, round(width)))
            return
        # pygame measures angles counter-clockwise with y up
        pygame.draw.arc(self.surface, color, rect, -end, -start, max(1, round(width)))

    def fill_circle(self, cx: float, cy: float, r: float, color: Color) -> None:
        pygame.draw.circle(self.surface, color, (cx, cy), r)
