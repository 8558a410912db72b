"""Per-mood expression parameters.

Adding a mood means adding one Mood member and one EXPRESSIONS entry;
the check at the bottom refuses to import with a mood left out.
"""

from __future__ import annotations

from dataclasses import dataclass

from mochi.state.constants import Mood


@dataclass(frozen=True)
class Expression:
    smile: float  # Mouth curvature, negative = frown
    mouth_open: float  # 0..1, above MOUTH_OPEN_THRESHOLD draws the open mouth
    brow_tilt: float  # Positive = inner ends down (cross), negative = raised
    squint: float  # 0..1, added to blink closure


EXPRESSIONS: dict[Mood, Expression] = {
    Mood.IDLE: Expression(smile=0.15, mouth_open=0.0, brow_tilt=0.0, squint=0.0),
    Mood.HAPPY: Expression(smile=0.9, mouth_open=0.0, brow_tilt=0.0, squint=0.25),
    Mood.SLEEPY: Expression(smile=0.0, mouth_open=0.1, brow_tilt=-0.15, squint=0.55),
    Mood.ANGRY: Expression(smile=-0.6, mouth_open=0.0, brow_tilt=0.45, squint=0.2),
    Mood.SHOCK: Expression(smile=0.0, mouth_open=0.8, brow_tilt=-0.35, squint=0.0),
}

_missing = set(Mood) - set(EXPRESSIONS)
if _missing:
    raise RuntimeError(f"EXPRESSIONS missing moods: {sorted(m.name for m in _missing)}")


def expression_for(mood: Mood) -> Expression:
    return EXPRESSIONS[Mood(mood)]
