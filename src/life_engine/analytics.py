"""Derived dashboards: day and week bucketing over the activity logs.

All functions are pure: they take log tuples and return plain frames or
dataclasses, so the presentation layer can chart them directly. Weeks are
labelled by the ISO date of their Monday.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from life_engine.models.enums import GymDayType
from life_engine.models.logs import CardioLog, MealAnalysis, StudySessionLog, WorkoutLog

logger = logging.getLogger(__name__)

VOLUME_CATEGORIES: tuple[str, ...] = ("Push", "Pull", "Legs", "Other")

_MUSCLE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Push", ("chest", "shoulder", "tricep")),
    ("Pull", ("back", "bicep")),
    ("Legs", ("quad", "hamstring", "glute")),
)
_DAY_CATEGORY = {
    GymDayType.PUSH: "Push",
    GymDayType.PULL: "Pull",
    GymDayType.LEGS: "Legs",
}

DAILY_WINDOW_DAYS = 30


def volume_category(log: WorkoutLog) -> str:
    """Push/Pull/Legs/Other, by day type first, then muscle-group keywords."""
    if log.day_type in _DAY_CATEGORY:
        return _DAY_CATEGORY[log.day_type]
    muscle = (log.muscle_group or "").lower()
    for category, keywords in _MUSCLE_KEYWORDS:
        if any(k in muscle for k in keywords):
            return category
    return "Other"


def week_start(day: str | date) -> date:
    if isinstance(day, str):
        day = date.fromisoformat(day)
    return day - timedelta(days=day.weekday())


def _valid_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except (TypeError, ValueError):
        logger.warning("Skipping log with malformed date %r", value)
        return False
    return True


def _dated(logs: Iterable) -> list:
    """Logs carrying a parseable ISO date; undated or malformed ones are skipped."""
    return [log for log in logs if log.date and _valid_date(log.date)]


def weekly_volume(logs: Sequence[WorkoutLog]) -> pd.DataFrame:
    """Total volume (reps * weight * sets) per week and category.

    Returns one row per week with at least some volume, indexed by week
    start, with a column per entry of ``VOLUME_CATEGORIES``.
    """
    rows = [
        {"week": week_start(log.date), "category": volume_category(log), "volume": log.volume}
        for log in _dated(logs)
    ]
    if not rows:
        return pd.DataFrame(columns=list(VOLUME_CATEGORIES), dtype=float)
    frame = pd.DataFrame(rows)
    table = frame.pivot_table(
        index="week", columns="category", values="volume", aggfunc="sum", fill_value=0.0
    )
    table = table.reindex(columns=list(VOLUME_CATEGORIES), fill_value=0.0).astype(float)
    table = table[table.sum(axis=1) > 0].sort_index()
    table.columns.name = None
    return table


def weekly_cardio(logs: Sequence[CardioLog]) -> pd.DataFrame:
    """Summed duration (min), calories and distance (km) per week."""
    columns = ["duration", "calories", "distance"]
    rows = [
        {
            "week": week_start(log.date),
            "duration": log.duration_minutes,
            "calories": log.calories_burned or 0.0,
            "distance": log.distance_km or 0.0,
        }
        for log in _dated(logs)
    ]
    if not rows:
        return pd.DataFrame(columns=columns, dtype=float)
    table = pd.DataFrame(rows).groupby("week")[columns].sum().sort_index()
    return table[table["duration"] > 0]


def _trailing_days(today: date, days: int) -> pd.DatetimeIndex:
    return pd.date_range(end=pd.Timestamp(today), periods=days, freq="D")


def daily_study_hours(
    logs: Sequence[StudySessionLog], today: date, days: int = DAILY_WINDOW_DAYS
) -> pd.Series:
    """Hours studied on each of the trailing *days*, zero-filled, oldest first."""
    index = _trailing_days(today, days)
    dated = _dated(logs)
    if not dated:
        return pd.Series(np.zeros(len(index)), index=index, name="hours")
    frame = pd.DataFrame(
        {"date": pd.to_datetime([log.date for log in dated]),
         "hours": [log.duration_minutes / 60 for log in dated]}
    )
    series = frame.groupby("date")["hours"].sum()
    return series.reindex(index, fill_value=0.0).rename("hours")


def daily_calories(
    meals: Sequence[MealAnalysis], today: date, days: int = DAILY_WINDOW_DAYS
) -> pd.Series:
    """Calories per day over the trailing window, only days with any logged."""
    index = _trailing_days(today, days)
    dated = [m for m in _dated(meals) if m.calories]
    if not dated:
        return pd.Series(dtype=float, name="calories")
    frame = pd.DataFrame(
        {"date": pd.to_datetime([m.date for m in dated]),
         "calories": [m.calories for m in dated]}
    )
    series = frame.groupby("date")["calories"].sum().reindex(index, fill_value=0.0)
    return series[series > 0].rename("calories")


def macro_split(meals: Sequence[MealAnalysis]) -> dict[str, float]:
    """Percentage of total macro grams from protein, carbs and fat.

    Rounded to one decimal; macros with no grams are omitted and an empty
    dict means nothing has been logged.
    """
    grams = np.array(
        [
            [m.protein_grams or 0.0, m.carb_grams or 0.0, m.fat_grams or 0.0]
            for m in meals
        ],
        dtype=float,
    ).reshape(-1, 3)
    totals = grams.sum(axis=0)
    total = totals.sum()
    if total <= 0:
        return {}
    percents = np.round(totals / total * 100, 1)
    return {
        name: float(value)
        for name, value in zip(("Protein", "Carbs", "Fat"), percents)
        if value > 0
    }


@dataclass(frozen=True)
class StudyProgress:
    total_hours: float
    target_hours: float
    percent: float
    days_remaining: int
    hours_needed_per_day: float


def study_progress(
    total_hours: float, target_hours: float, deadline: date, today: date
) -> StudyProgress:
    """Progress toward the study target and the daily pace still required."""
    percent = (total_hours / target_hours) * 100 if target_hours > 0 else 0.0
    days_remaining = max(0, (deadline - today).days)
    hours_remaining = target_hours - total_hours
    if hours_remaining <= 0 or days_remaining <= 0:
        per_day = 0.0
    else:
        per_day = hours_remaining / days_remaining
    return StudyProgress(
        total_hours=total_hours,
        target_hours=target_hours,
        percent=percent,
        days_remaining=days_remaining,
        hours_needed_per_day=per_day,
    )
