"""Tests for ActivityLogAggregator appends and retention windows."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from life_engine.activity_log import ActivityLogAggregator, prune_before, retention_cutoff
from life_engine.models.logs import CardioLog, MealAnalysis, StudySessionLog, WorkoutLog
from life_engine.store import MemoryStore, StoreKey

TODAY = date(2025, 7, 15)


def _days_ago(n: int) -> str:
    return (TODAY - timedelta(days=n)).isoformat()


class TestRetentionHelpers:
    def test_cutoff(self) -> None:
        assert retention_cutoff(TODAY, 90) == "2025-04-16"

    def test_prune_keeps_cutoff_day(self) -> None:
        logs = [StudySessionLog(30, "a", date="2025-04-15"), StudySessionLog(30, "b", date="2025-04-16")]
        assert [l.topic for l in prune_before(logs, "2025-04-16")] == ["b"]

    def test_prune_drops_undated(self) -> None:
        assert prune_before([StudySessionLog(30, "a")], "2025-01-01") == []


class TestStudyRetention:
    def test_append_prunes_older_than_ninety_days(self) -> None:
        history = [StudySessionLog(30, f"t{n}", date=_days_ago(n)).to_dict() for n in range(0, 120, 5)]
        store = MemoryStore({StoreKey.STUDY_SESSION_LOGS: history})
        logs = ActivityLogAggregator(store, today=lambda: TODAY)
        # Nothing is pruned until the next append.
        assert len(logs.study_logs) == 24

        logs.append_study_log(StudySessionLog(45, "Ethics"))

        cutoff = _days_ago(90)
        assert all(l.date >= cutoff for l in logs.study_logs)
        assert logs.study_logs[-1].topic == "Ethics"
        assert logs.study_logs[-1].date == TODAY.isoformat()
        assert len(store.get(StoreKey.STUDY_SESSION_LOGS)) == len(logs.study_logs)
        # 0, 5, ..., 90 days ago survive (19 entries) plus the new one.
        assert len(logs.study_logs) == 20


class TestMealRetention:
    def test_prunes_on_load_and_persists(self) -> None:
        meals = [
            MealAnalysis(meal_name="old", calories=500, date=_days_ago(31)).to_dict(),
            MealAnalysis(meal_name="recent", calories=400, date=_days_ago(2)).to_dict(),
        ]
        store = MemoryStore({StoreKey.DAILY_NUTRITION: meals})
        logs = ActivityLogAggregator(store, today=lambda: TODAY)
        assert [m.meal_name for m in logs.meal_logs] == ["recent"]
        assert len(store.get(StoreKey.DAILY_NUTRITION)) == 1

    def test_append_stamps_today_and_keeps_history(self) -> None:
        store = MemoryStore({
            StoreKey.DAILY_NUTRITION: [MealAnalysis(meal_name="yesterday", date=_days_ago(1)).to_dict()]
        })
        logs = ActivityLogAggregator(store, today=lambda: TODAY)
        stored = logs.append_meal_log(MealAnalysis(meal_name="lunch", calories=700))
        assert stored.date == TODAY.isoformat()
        assert len(logs.meal_logs) == 2

    def test_daily_totals(self) -> None:
        logs = ActivityLogAggregator(MemoryStore(), today=lambda: TODAY)
        logs.append_meal_log(MealAnalysis(calories=500, protein_grams=30, carb_grams=50, fat_grams=10))
        logs.append_meal_log(MealAnalysis(calories=300, protein_grams=20))
        logs.append_meal_log(MealAnalysis(calories=900, date=_days_ago(1)))
        totals = logs.daily_nutrition_totals()
        assert totals == {
            "calories": 800.0,
            "protein_grams": 50.0,
            "carb_grams": 50.0,
            "fat_grams": 10.0,
        }
        assert len(logs.meals_for_day(TODAY - timedelta(days=1))) == 1


class TestUnboundedLogs:
    def test_workout_and_cardio_keep_everything(self) -> None:
        store = MemoryStore({
            StoreKey.WORKOUT_LOGS: [WorkoutLog("squat", 5, 100, date="2020-01-01").to_dict()],
            StoreKey.CARDIO_LOGS: [CardioLog(30, date="2020-01-01").to_dict()],
        })
        logs = ActivityLogAggregator(store, today=lambda: TODAY)
        logs.append_workout_log(WorkoutLog("bench", 8, 60))
        logs.append_cardio_log(CardioLog(20))
        assert len(logs.workout_logs) == 2
        assert len(logs.cardio_logs) == 2
        assert store.get(StoreKey.WORKOUT_LOGS)[-1]["date"] == TODAY.isoformat()

    def test_explicit_date_is_kept(self) -> None:
        logs = ActivityLogAggregator(MemoryStore(), today=lambda: TODAY)
        stored = logs.append_cardio_log(CardioLog(20, date="2025-07-01"))
        assert stored.date == "2025-07-01"

    def test_malformed_entries_are_skipped(self) -> None:
        store = MemoryStore({StoreKey.CARDIO_LOGS: [{"type": "run"}, CardioLog(10, date="2025-07-01").to_dict()]})
        logs = ActivityLogAggregator(store, today=lambda: TODAY)
        assert len(logs.cardio_logs) == 1

    @pytest.mark.parametrize("key", [StoreKey.WORKOUT_LOGS, StoreKey.STUDY_SESSION_LOGS])
    def test_non_list_value_is_ignored(self, key) -> None:
        logs = ActivityLogAggregator(MemoryStore({key: "garbage"}), today=lambda: TODAY)
        assert logs.workout_logs == () and logs.study_logs == ()
