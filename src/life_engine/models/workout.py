"""Exercises as they appear inside a structured gym plan."""

from __future__ import annotations

from dataclasses import dataclass

from life_engine.models.enums import ExerciseType


@dataclass(frozen=True)
class PlanExercise:
    id: str
    name: str
    type: ExerciseType
    sets_reps: str = ""
    equipment: str = ""
    segment: str | None = None
    muscle_group: str | None = None
    cues: str = ""
    notes: str | None = None


def parse_exercise_type(value: str | None, default: ExerciseType) -> ExerciseType:
    """Match *value* against enum values or names, e.g. "Compound Lift" or "MainCompound"."""
    if not value:
        return default
    try:
        return ExerciseType(value)
    except ValueError:
        pass
    squashed = value.replace("_", "").replace(" ", "").lower()
    for member in ExerciseType:
        if member.name.replace("_", "").lower() == squashed:
            return member
        if member.value.replace(" ", "").replace("-", "").lower() == squashed:
            return member
    return default
