"""Append-only activity logs with retention windows.

Meals are pruned to the trailing 30 days when loaded; study logs are pruned
to the trailing 90 days on every study append. Workout and cardio logs grow
without bound.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, timedelta
from typing import Callable, TypeVar

from life_engine.models.enums import MEAL_RETENTION_DAYS, STUDY_LOG_RETENTION_DAYS
from life_engine.models.logs import CardioLog, MealAnalysis, StudySessionLog, WorkoutLog
from life_engine.store import PersistentStore, StoreKey

logger = logging.getLogger(__name__)

_LogT = TypeVar("_LogT", WorkoutLog, CardioLog, StudySessionLog, MealAnalysis)


def retention_cutoff(today: date, days: int) -> str:
    """ISO date string *days* before *today*; entries dated before it are dropped."""
    return (today - timedelta(days=days)).isoformat()


def prune_before(logs: list[_LogT], cutoff: str) -> list[_LogT]:
    """Keep entries dated on or after *cutoff* (ISO strings sort chronologically)."""
    return [log for log in logs if log.date and log.date >= cutoff]


class ActivityLogAggregator:
    """Owns the workout, cardio, study and meal logs."""

    def __init__(
        self,
        store: PersistentStore,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._today = today
        self._workouts = self._load(StoreKey.WORKOUT_LOGS, WorkoutLog.from_dict)
        self._cardio = self._load(StoreKey.CARDIO_LOGS, CardioLog.from_dict)
        self._study = self._load(StoreKey.STUDY_SESSION_LOGS, StudySessionLog.from_dict)
        meals = self._load(StoreKey.DAILY_NUTRITION, MealAnalysis.from_dict)
        self._meals = prune_before(meals, retention_cutoff(today(), MEAL_RETENTION_DAYS))
        if len(self._meals) != len(meals):
            logger.info("Pruned %d meals older than %d days", len(meals) - len(self._meals), MEAL_RETENTION_DAYS)
            self._persist(StoreKey.DAILY_NUTRITION, self._meals)

    # -- Read access -------------------------------------------------------

    @property
    def workout_logs(self) -> tuple[WorkoutLog, ...]:
        return tuple(self._workouts)

    @property
    def cardio_logs(self) -> tuple[CardioLog, ...]:
        return tuple(self._cardio)

    @property
    def study_logs(self) -> tuple[StudySessionLog, ...]:
        return tuple(self._study)

    @property
    def meal_logs(self) -> tuple[MealAnalysis, ...]:
        return tuple(self._meals)

    def meals_for_day(self, day: date | None = None) -> tuple[MealAnalysis, ...]:
        day_str = (day or self._today()).isoformat()
        return tuple(m for m in self._meals if m.date == day_str)

    def daily_nutrition_totals(self, day: date | None = None) -> dict[str, float]:
        """Sum calories and macros for *day* (default today)."""
        totals = {"calories": 0.0, "protein_grams": 0.0, "carb_grams": 0.0, "fat_grams": 0.0}
        for meal in self.meals_for_day(day):
            totals["calories"] += meal.calories or 0.0
            totals["protein_grams"] += meal.protein_grams or 0.0
            totals["carb_grams"] += meal.carb_grams or 0.0
            totals["fat_grams"] += meal.fat_grams or 0.0
        return totals

    # -- Appends -----------------------------------------------------------

    def append_workout_log(self, log: WorkoutLog) -> WorkoutLog:
        log = self._stamp(log)
        self._workouts.append(log)
        self._persist(StoreKey.WORKOUT_LOGS, self._workouts)
        return log

    def append_cardio_log(self, log: CardioLog) -> CardioLog:
        log = self._stamp(log)
        self._cardio.append(log)
        self._persist(StoreKey.CARDIO_LOGS, self._cardio)
        return log

    def append_study_log(self, log: StudySessionLog) -> StudySessionLog:
        log = self._stamp(log)
        cutoff = retention_cutoff(self._today(), STUDY_LOG_RETENTION_DAYS)
        self._study = prune_before(self._study, cutoff)
        self._study.append(log)
        self._persist(StoreKey.STUDY_SESSION_LOGS, self._study)
        return log

    def append_meal_log(self, meal: MealAnalysis) -> MealAnalysis:
        meal = self._stamp(meal)
        self._meals.append(meal)
        self._persist(StoreKey.DAILY_NUTRITION, self._meals)
        return meal

    # -- Internal ----------------------------------------------------------

    def _stamp(self, log: _LogT) -> _LogT:
        if log.date:
            return log
        return dataclasses.replace(log, date=self._today().isoformat())

    def _load(self, key: str, parse: Callable[[dict], _LogT]) -> list[_LogT]:
        logs: list[_LogT] = []
        for raw in self._store.get_list(key):
            try:
                logs.append(parse(raw))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed %s entry: %s", key, exc)
        return logs

    def _persist(self, key: str, logs: list) -> None:
        self._store.set(key, [log.to_dict() for log in logs])
