"""Enumerations and fixed constants for the life engine.

Point awards, retention windows and timer presets live here so the rest of
the engine never hard-codes them.
"""

from enum import Enum, IntEnum, auto


class GymDayType(str, Enum):
    """Gym session categories. Values match the stored log format."""

    PUSH = "Push Day"
    PULL = "Pull Day"
    LEGS = "Legs Day"
    CARDIO = "Cardio Day"  # generic cardio, never part of the rotation


# Structured weight days cycle in this order.
GYM_DAY_ROTATION: tuple[GymDayType, ...] = (
    GymDayType.PUSH,
    GymDayType.PULL,
    GymDayType.LEGS,
)


class ActivityType(str, Enum):
    """Kinds of entries on the daily schedule."""

    STUDY = "Study Session"
    GYM_WEIGHTS = "Gym - Weight Training"
    GYM_CARDIO = "Gym - Cardio"
    HOME_WORKOUT = "Home Quick-Hit"
    MEAL = "Meal"
    DRIVING = "Driving Class"
    MEDITATION = "Meditation"
    BREAK = "Break/Prep"


class ExerciseType(str, Enum):
    """Role of an exercise inside a structured workout plan."""

    WARMUP_DYNAMIC_STRETCH = "Dynamic Stretch"
    WARMUP_ACTIVATION = "Activation"
    WARMUP_CARDIO = "Cardio Warm-up"
    WARMUP_MOBILITY = "Mobility"
    WARMUP_FOAM_ROLL = "Warm-up Foam Roll"
    MAIN_COMPOUND = "Compound Lift"
    MAIN_ISOLATION = "Isolation Exercise"
    FINISHER = "Finisher"
    COOLDOWN_STRETCH = "Static Stretch"
    COOLDOWN_FOAM_ROLL = "Foam Roll"
    COOLDOWN_BREATHING = "Breathing Exercise"
    COOLDOWN_ACTIVITY = "Cool-down Activity"

    @property
    def is_warmup_or_cooldown(self) -> bool:
        return self.name.startswith(("WARMUP_", "COOLDOWN_"))


class SessionKind(str, Enum):
    """Timer-backed activity kinds."""

    WORKOUT = "workout"
    STUDY = "study"
    MEDITATION = "meditation"
    QUICK_HIT = "quick_hit"


class SessionState(IntEnum):
    """Lifecycle states of a timed session."""

    IDLE = auto()
    RUNNING = auto()
    PAUSED = auto()


class ActivitySource(str, Enum):
    """Where a Key Result contribution comes from."""

    STUDY = "study"
    WORKOUT = "workout"
    CARDIO = "cardio"
    MEAL = "meal"
    QUICK_HIT = "quick_hit"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    HIGH_CONTRAST = "high-contrast"


class NotificationPermission(str, Enum):
    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


# ---------------------------------------------------------------------------
# Points
# ---------------------------------------------------------------------------

POINTS_WEIGHT_SESSION: int = 30
POINTS_OTHER_GYM_SESSION: int = 15
POINTS_QUICK_HIT: int = 15
POINTS_MEAL_LOGGED: int = 5
POINTS_MEDITATION: int = 10
POINTS_DEFAULT_ACTIVITY: int = 10
POINTS_PER_STUDY_HOUR: int = 5
POINTS_PER_STUDY_HOUR_COMPLETION: int = 10
POINTS_PER_BADGE: int = 50

# Schedule id the quick-hit circuit marks as done (earns no extra points).
QUICK_HIT_ACTIVITY_ID: str = "home_workout_am"

# ---------------------------------------------------------------------------
# Retention windows (days)
# ---------------------------------------------------------------------------

MEAL_RETENTION_DAYS: int = 30
STUDY_LOG_RETENTION_DAYS: int = 90

# ---------------------------------------------------------------------------
# Timer presets (seconds)
# ---------------------------------------------------------------------------

QUICK_HIT_DURATION_S: int = 5 * 60
MEDITATION_DURATION_S: int = 15 * 60
STUDY_CAP_DURATION_S: int = 10 * 3600
GYM_REST_DURATION_S: int = 90
TICK_INTERVAL_S: float = 1.0

QUICK_HIT_TARGET_REPS: int = 30
