"""Data models for the life engine."""

from life_engine.models.enums import (
    ActivitySource,
    ActivityType,
    ExerciseType,
    GymDayType,
    NotificationPermission,
    SessionKind,
    SessionState,
    Theme,
)
from life_engine.models.logs import (
    CardioLog,
    MealAnalysis,
    StudySessionLog,
    WorkoutLog,
)
from life_engine.models.okr import KeyResult, Objective, current_quarter
from life_engine.models.schedule import DAILY_SCHEDULE, ScheduleActivity
from life_engine.models.workout import PlanExercise

__all__ = [
    "ActivitySource",
    "ActivityType",
    "CardioLog",
    "DAILY_SCHEDULE",
    "ExerciseType",
    "GymDayType",
    "KeyResult",
    "MealAnalysis",
    "NotificationPermission",
    "Objective",
    "PlanExercise",
    "ScheduleActivity",
    "SessionKind",
    "SessionState",
    "StudySessionLog",
    "Theme",
    "WorkoutLog",
    "current_quarter",
]
