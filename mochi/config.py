"""Face configuration with defaults, loadable from YAML."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from mochi.state.constants import (
    ANIM_FPS,
    BLINK_DURATION,
    BLINK_INTERVAL_MAX,
    BLINK_INTERVAL_MIN,
    BUMP_COOLDOWN,
    BUMP_MOOD_DURATION,
    BUMP_THRESHOLD,
    DOUBLE_TAP_WINDOW,
    MOTION_SMOOTHING,
    SCREEN_H,
    SCREEN_W,
    SENSOR_HZ,
    SENSOR_NOISE,
    TAP_MOOD_DURATION,
    TURN_COOLDOWN,
    TURN_MOOD_DURATION,
    TURN_THRESHOLD,
)

log = logging.getLogger(__name__)


@dataclass
class DisplayConfig:
    width: int = SCREEN_W
    height: int = SCREEN_H
    fps: int = ANIM_FPS
    fullscreen: bool = False
    show_hud: bool = True
    show_timeline: bool = True


@dataclass
class MoodConfig:
    tap_duration_s: float = TAP_MOOD_DURATION
    bump_duration_s: float = BUMP_MOOD_DURATION
    turn_duration_s: float = TURN_MOOD_DURATION


@dataclass
class BlinkConfig:
    interval_min_s: float = BLINK_INTERVAL_MIN
    interval_max_s: float = BLINK_INTERVAL_MAX
    duration_s: float = BLINK_DURATION


@dataclass
class MotionConfig:
    smoothing: float = MOTION_SMOOTHING
    bump_threshold: float = BUMP_THRESHOLD
    bump_cooldown_s: float = BUMP_COOLDOWN
    turn_threshold: float = TURN_THRESHOLD
    turn_cooldown_s: float = TURN_COOLDOWN


@dataclass
class SensorConfig:
    enabled: bool = True
    hz: int = SENSOR_HZ
    require_permission: bool = True  # False: platform grants motion access up front
    noise: float = SENSOR_NOISE


@dataclass
class GestureConfig:
    double_tap_window_s: float = DOUBLE_TAP_WINDOW


@dataclass
class MochiConfig:
    display: DisplayConfig = field(default_factory=DisplayConfig)
    mood: MoodConfig = field(default_factory=MoodConfig)
    blink: BlinkConfig = field(default_factory=BlinkConfig)
    motion: MotionConfig = field(default_factory=MotionConfig)
    sensor: SensorConfig = field(default_factory=SensorConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    seed: int | None = None


_SECTIONS = ("display", "mood", "blink", "motion", "sensor", "gestures")


def _coerce(default: object, value: object) -> object:
    """Convert a YAML value to the type of the field default."""
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise TypeError(f"expected true/false, got {value!r}")
        return value
    if isinstance(default, (int, float)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"expected a number, got {value!r}")
        return type(default)(value)
    return value


def load_config(path: str | Path | None = None) -> MochiConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        return MochiConfig()

    path = Path(path)
    if not path.exists():
        log.warning("config file not found: %s, using defaults", path)
        return MochiConfig()

    try:
        import yaml  # type: ignore[import-untyped]

        with open(path) as f:
            raw = yaml.safe_load(f) or {}

        cfg = MochiConfig()
        for section_name in _SECTIONS:
            if section_name in raw:
                section = getattr(cfg, section_name)
                for k, v in (raw[section_name] or {}).items():
                    if not hasattr(section, k):
                        log.warning("unknown config key %s.%s ignored", section_name, k)
                        continue
                    try:
                        setattr(section, k, _coerce(getattr(section, k), v))
                    except (TypeError, ValueError, OverflowError):
                        log.warning(
                            "bad value %r for %s.%s, keeping default",
                            v, section_name, k,
                        )
        cfg.seed = raw.get("seed")

        log.info("config loaded from %s", path)
        return cfg
    except Exception as e:
        log.warning("config load error: %s, using defaults", e)
        return MochiConfig()
