"""Tests for day/week bucketing and derived dashboards."""

from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from life_engine.analytics import (
    daily_calories,
    daily_study_hours,
    macro_split,
    study_progress,
    volume_category,
    week_start,
    weekly_cardio,
    weekly_volume,
)
from life_engine.models.enums import GymDayType
from life_engine.models.logs import CardioLog, MealAnalysis, StudySessionLog, WorkoutLog

TODAY = date(2025, 7, 15)  # a Tuesday


class TestVolumeCategory:
    def test_day_type_wins(self) -> None:
        log = WorkoutLog("row", 10, 50, day_type=GymDayType.PULL, muscle_group="Chest")
        assert volume_category(log) == "Pull"

    @pytest.mark.parametrize(
        "muscle, expected",
        [("Chest", "Push"), ("Triceps", "Push"), ("Upper Back", "Pull"), ("Glutes", "Legs"), ("Core", "Other")],
    )
    def test_muscle_keywords(self, muscle, expected) -> None:
        assert volume_category(WorkoutLog("x", 1, 1, muscle_group=muscle)) == expected

    def test_cardio_day_is_other(self) -> None:
        assert volume_category(WorkoutLog("x", 1, 1, day_type=GymDayType.CARDIO)) == "Other"


class TestWeekly:
    def test_week_start_is_monday(self) -> None:
        assert week_start("2025-07-15") == date(2025, 7, 14)
        assert week_start(date(2025, 7, 14)) == date(2025, 7, 14)

    def test_weekly_volume(self) -> None:
        logs = [
            WorkoutLog("bench", 10, 20, sets=3, date="2025-07-14", day_type=GymDayType.PUSH),
            WorkoutLog("row", 10, 30, sets=1, date="2025-07-16", day_type=GymDayType.PULL),
            WorkoutLog("squat", 5, 100, sets=5, date="2025-07-21", day_type=GymDayType.LEGS),
            WorkoutLog("undated", 5, 100),
        ]
        table = weekly_volume(logs)
        assert list(table.columns) == ["Push", "Pull", "Legs", "Other"]
        assert list(table.index) == [date(2025, 7, 14), date(2025, 7, 21)]
        assert table.loc[date(2025, 7, 14), "Push"] == 600
        assert table.loc[date(2025, 7, 14), "Pull"] == 300
        assert table.loc[date(2025, 7, 21), "Legs"] == 2500
        assert table.loc[date(2025, 7, 21), "Push"] == 0

    def test_weekly_volume_drops_zero_weeks(self) -> None:
        table = weekly_volume([WorkoutLog("plank", 0, 0, date="2025-07-14")])
        assert table.empty

    def test_weekly_volume_empty(self) -> None:
        assert weekly_volume([]).empty

    def test_weekly_cardio(self) -> None:
        logs = [
            CardioLog(30, calories_burned=300, distance_km=5, date="2025-07-14"),
            CardioLog(20, date="2025-07-15"),
        ]
        table = weekly_cardio(logs)
        row = table.loc[date(2025, 7, 14)]
        assert (row["duration"], row["calories"], row["distance"]) == (50, 300, 5)

    def test_weekly_cardio_empty(self) -> None:
        assert weekly_cardio([]).empty

    def test_malformed_dates_are_skipped(self, caplog) -> None:
        workouts = [
            WorkoutLog("bench", 10, 20, sets=3, date="2025-07-14", day_type=GymDayType.PUSH),
            WorkoutLog("bench", 10, 20, sets=3, date="14/07/2025", day_type=GymDayType.PUSH),
        ]
        cardio = [CardioLog(30, date="2025-07-14"), CardioLog(45, date="yesterday")]
        volume = weekly_volume(workouts)
        assert volume.loc[date(2025, 7, 14), "Push"] == 600
        assert weekly_cardio(cardio).loc[date(2025, 7, 14), "duration"] == 30
        assert "malformed date" in caplog.text

    def test_study_hours_skip_malformed_dates(self) -> None:
        logs = [StudySessionLog(60, "a", date="2025-07-15"), StudySessionLog(60, "b", date="not-a-date")]
        assert daily_study_hours(logs, TODAY).sum() == pytest.approx(1.0)


class TestDaily:
    def test_study_hours_zero_filled(self) -> None:
        logs = [
            StudySessionLog(90, "a", date="2025-07-15"),
            StudySessionLog(30, "b", date="2025-07-15"),
            StudySessionLog(60, "c", date="2025-07-01"),
            StudySessionLog(60, "too old", date="2025-05-01"),
        ]
        series = daily_study_hours(logs, TODAY)
        assert len(series) == 30
        assert series.index[-1] == pd.Timestamp("2025-07-15")
        assert series[pd.Timestamp("2025-07-15")] == pytest.approx(2.0)
        assert series[pd.Timestamp("2025-07-01")] == pytest.approx(1.0)
        assert series.sum() == pytest.approx(3.0)

    def test_study_hours_no_logs(self) -> None:
        series = daily_study_hours([], TODAY)
        assert len(series) == 30
        assert series.sum() == 0

    def test_calories_only_logged_days(self) -> None:
        meals = [
            MealAnalysis(calories=500, date="2025-07-15"),
            MealAnalysis(calories=700, date="2025-07-15"),
            MealAnalysis(calories=None, date="2025-07-14"),
            MealAnalysis(calories=400, date="2025-07-10"),
        ]
        series = daily_calories(meals, TODAY)
        assert list(series.values) == [400, 1200]

    def test_calories_empty(self) -> None:
        assert daily_calories([], TODAY).empty


class TestMacroSplit:
    def test_percentages(self) -> None:
        meals = [
            MealAnalysis(protein_grams=30, carb_grams=50, fat_grams=20),
            MealAnalysis(protein_grams=20, carb_grams=50, fat_grams=30),
        ]
        assert macro_split(meals) == {"Protein": 25.0, "Carbs": 50.0, "Fat": 25.0}

    def test_omits_zero_macros(self) -> None:
        assert macro_split([MealAnalysis(protein_grams=10)]) == {"Protein": 100.0}

    def test_empty(self) -> None:
        assert macro_split([]) == {}
        assert macro_split([MealAnalysis(calories=100)]) == {}


class TestStudyProgress:
    def test_pace(self) -> None:
        progress = study_progress(100, 500, date(2025, 8, 1), TODAY)
        assert progress.percent == pytest.approx(20.0)
        assert progress.days_remaining == 17
        assert progress.hours_needed_per_day == pytest.approx(400 / 17)

    def test_past_deadline(self) -> None:
        progress = study_progress(100, 500, date(2025, 7, 1), TODAY)
        assert progress.days_remaining == 0
        assert progress.hours_needed_per_day == 0

    def test_target_met(self) -> None:
        assert study_progress(600, 500, date(2025, 8, 1), TODAY).hours_needed_per_day == 0
