"""Append-only activity log records.

Dates are ISO ``YYYY-MM-DD`` strings so that retention filtering can compare
them lexicographically. An empty date means "stamp with today on append".
Records serialize to the camelCase dict format used by the persisted store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from life_engine.models.enums import ExerciseType, GymDayType


def _opt_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class WorkoutLog:
    """One logged exercise set. Several sets are several entries."""

    exercise_id: str
    reps: int
    weight: float
    sets: int = 1
    date: str = ""
    exercise_name: str | None = None
    muscle_group: str | None = None
    day_type: GymDayType | None = None
    linked_kr_id: str | None = None
    exercise_type: ExerciseType | None = None
    target_sets_reps: str | None = None

    @property
    def volume(self) -> float:
        return self.reps * self.weight * self.sets

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "exerciseId": self.exercise_id,
            "exerciseName": self.exercise_name,
            "sets": self.sets,
            "reps": self.reps,
            "weight": self.weight,
            "date": self.date,
            "muscleGroup": self.muscle_group,
            "dayType": self.day_type.value if self.day_type else None,
            "linkedKRId": self.linked_kr_id,
            "exerciseType": self.exercise_type.value if self.exercise_type else None,
            "targetSetsReps": self.target_sets_reps,
        })

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkoutLog:
        day_type = data.get("dayType")
        exercise_type = data.get("exerciseType")
        return cls(
            exercise_id=data["exerciseId"],
            exercise_name=data.get("exerciseName"),
            sets=int(data.get("sets") or 1),
            reps=int(data.get("reps", 0)),
            weight=float(data.get("weight", 0)),
            date=data.get("date", ""),
            muscle_group=data.get("muscleGroup"),
            day_type=GymDayType(day_type) if day_type else None,
            linked_kr_id=data.get("linkedKRId"),
            exercise_type=ExerciseType(exercise_type) if exercise_type else None,
            target_sets_reps=data.get("targetSetsReps"),
        )


@dataclass(frozen=True)
class CardioLog:
    """One cardio session."""

    duration_minutes: float
    type: str | None = None
    calories_burned: float | None = None
    distance_km: float | None = None
    date: str = ""
    linked_kr_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "type": self.type,
            "durationMinutes": self.duration_minutes,
            "caloriesBurned": self.calories_burned,
            "distanceKm": self.distance_km,
            "date": self.date,
            "linkedKRId": self.linked_kr_id,
        })

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CardioLog:
        return cls(
            type=data.get("type"),
            duration_minutes=float(data["durationMinutes"]),
            calories_burned=_opt_float(data.get("caloriesBurned")),
            distance_km=_opt_float(data.get("distanceKm")),
            date=data.get("date", ""),
            linked_kr_id=data.get("linkedKRId"),
        )


@dataclass(frozen=True)
class StudySessionLog:
    """One completed study session."""

    duration_minutes: float
    topic: str
    date: str = ""
    linked_kr_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "date": self.date,
            "durationMinutes": self.duration_minutes,
            "topic": self.topic,
            "linkedKRId": self.linked_kr_id,
        })

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StudySessionLog:
        return cls(
            date=data.get("date", ""),
            duration_minutes=float(data["durationMinutes"]),
            topic=data.get("topic", ""),
            linked_kr_id=data.get("linkedKRId"),
        )


@dataclass(frozen=True)
class MealAnalysis:
    """An AI-estimated (or manually entered) meal breakdown."""

    meal_name: str | None = None
    calories: float | None = None
    protein_grams: float | None = None
    carb_grams: float | None = None
    fat_grams: float | None = None
    notes: str | None = None
    date: str = ""
    linked_kr_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "mealName": self.meal_name,
            "calories": self.calories,
            "proteinGrams": self.protein_grams,
            "carbGrams": self.carb_grams,
            "fatGrams": self.fat_grams,
            "notes": self.notes,
            "date": self.date,
            "linkedKRId": self.linked_kr_id,
        })

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MealAnalysis:
        return cls(
            meal_name=data.get("mealName"),
            calories=_opt_float(data.get("calories")),
            protein_grams=_opt_float(data.get("proteinGrams")),
            carb_grams=_opt_float(data.get("carbGrams")),
            fat_grams=_opt_float(data.get("fatGrams")),
            notes=data.get("notes"),
            date=data.get("date", ""),
            linked_kr_id=data.get("linkedKRId"),
        )
