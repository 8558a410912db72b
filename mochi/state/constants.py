"""Single source of truth for all tunable face values.

Config defaults (config.py) are taken from here, so a YAML file only needs
to name the values it changes.  Motion thresholds are in m/s^2 with gravity
included, matching what a phone accelerometer reports.
"""

from __future__ import annotations

from enum import IntEnum

# ══════════════════════════════════════════════════════════════════════
# DISPLAY
# ══════════════════════════════════════════════════════════════════════
SCREEN_W = 800
SCREEN_H = 480
ANIM_FPS = 60
BG_COLOR = (0, 0, 0)
FACE_COLOR = (255, 255, 255)
CHEEK_COLOR = (255, 120, 150)

# ══════════════════════════════════════════════════════════════════════
# FRAME LOOP
# ══════════════════════════════════════════════════════════════════════
MAX_FRAME_DT = 0.050  # Worst-case single-step advance (backgrounding, stalls)


# ══════════════════════════════════════════════════════════════════════
# MOODS
# ══════════════════════════════════════════════════════════════════════


class Mood(IntEnum):
    IDLE = 0
    HAPPY = 1
    SLEEPY = 2
    ANGRY = 3
    SHOCK = 4


# Double-tap walk order (wraps)
MOOD_CYCLE: tuple[Mood, ...] = (
    Mood.IDLE,
    Mood.HAPPY,
    Mood.SLEEPY,
    Mood.ANGRY,
    Mood.SHOCK,
)

TAP_MOOD_DURATION = 0.8  # Happy flash on single tap
BUMP_MOOD_DURATION = 0.9  # Shock after a jolt
TURN_MOOD_DURATION = 1.0  # Angry after a hard turn / acceleration

MOOD_COLORS: dict[Mood, tuple[int, int, int]] = {
    Mood.IDLE: (150, 150, 160),
    Mood.HAPPY: (255, 200, 80),
    Mood.SLEEPY: (90, 110, 200),
    Mood.ANGRY: (255, 60, 40),
    Mood.SHOCK: (200, 120, 255),
}

# ══════════════════════════════════════════════════════════════════════
# BLINK TIMING
# ══════════════════════════════════════════════════════════════════════
BLINK_INTERVAL_MIN = 1.6  # Seconds until next spontaneous blink
BLINK_INTERVAL_MAX = 3.8
BLINK_DURATION = 0.20  # Full close + reopen
BLINK_PHASE_START = 1e-3  # Phase set by trigger(); > 0 marks "in progress"

# ══════════════════════════════════════════════════════════════════════
# MOTION
# ══════════════════════════════════════════════════════════════════════
GRAVITY = 9.81
MOTION_SMOOTHING = 0.12  # EMA factor per sample
BUMP_THRESHOLD = 2.3  # |z - filtered z|
BUMP_COOLDOWN = 1.2
TURN_THRESHOLD = 2.5  # |filtered x| or |filtered y|
TURN_COOLDOWN = 1.4

# ══════════════════════════════════════════════════════════════════════
# SENSOR FEED (simulated accelerometer)
# ══════════════════════════════════════════════════════════════════════
SENSOR_HZ = 60
SENSOR_NOISE = 0.05  # Gaussian sigma per axis
SIM_TILT_STEP = 0.5  # m/s^2 per held-key frame
SIM_TILT_MAX = 6.0
SIM_JOLT = 4.0  # z spike injected by the jolt key
SIM_TILT_DECAY = 0.9  # Per frame when no arrow key is held

# ══════════════════════════════════════════════════════════════════════
# GESTURES
# ══════════════════════════════════════════════════════════════════════
DOUBLE_TAP_WINDOW = 0.30

# ══════════════════════════════════════════════════════════════════════
# FACE GEOMETRY (fractions of surface size)
# ══════════════════════════════════════════════════════════════════════
EYE_SPACING = 0.18  # Eye centre offset from face centre, x fraction of width
EYE_WIDTH = 0.14
EYE_HEIGHT = 0.20
EYE_Y = 0.44
MAX_LID_CLOSURE = 0.92  # Never collapse the eye to zero height
MOUTH_Y = 0.70
MOUTH_HALF_W = 0.12
MOUTH_CURVE_DEPTH = 0.10  # Control-point offset at curvature 1.0, y fraction of height
MOUTH_THICKNESS = 0.016  # Fraction of min(w, h)
MOUTH_OPEN_THRESHOLD = 0.35
MOUTH_OPEN_R = 0.07  # Fraction of min(w, h) at full open
BROW_EPSILON = 0.02
BROW_RAISE = 0.05  # Brow height above eye top, y fraction of height
BROW_TILT_DEPTH = 0.06
BROW_HALF_W = 0.065
CHEEK_DY = 0.13
CHEEK_DX = 0.03
CHEEK_R = 0.03

# ══════════════════════════════════════════════════════════════════════
# BREATHING
# ══════════════════════════════════════════════════════════════════════
BREATH_SPEED = 1.8  # rad/s
BREATH_AMOUNT = 0.04  # +/- 4% eye width
BREATH_BOB = 0.006  # +/- vertical bob, y fraction of height
