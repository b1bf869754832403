"""Tests for the gym day rotation and quick-hit streak."""

from __future__ import annotations

from datetime import date

from life_engine.ledger import ProgressLedger
from life_engine.models.enums import GymDayType
from life_engine.rotation import HabitRotationEngine
from life_engine.store import MemoryStore, StoreKey


class TestGymRotation:
    def setup_method(self) -> None:
        self.store = MemoryStore()
        self.ledger = ProgressLedger(self.store)
        self.engine = HabitRotationEngine(self.store, self.ledger)

    def test_weight_session_advances(self) -> None:
        self.engine.complete_gym_session(True, GymDayType.PUSH)
        assert self.engine.gym_day_index == 1
        assert self.engine.next_gym_day() == GymDayType.PULL
        assert self.store.get(StoreKey.GYM_DAY_INDEX) == 1

    def test_cardio_session_does_not_advance(self) -> None:
        self.engine.complete_gym_session(False, GymDayType.CARDIO)
        assert self.engine.gym_day_index == 0

    def test_weight_flag_on_cardio_day_does_not_advance(self) -> None:
        self.engine.complete_gym_session(True, GymDayType.CARDIO)
        assert self.engine.gym_day_index == 0

    def test_wraps_after_legs(self) -> None:
        for day in (GymDayType.PUSH, GymDayType.PULL, GymDayType.LEGS):
            self.engine.complete_gym_session(True, day)
        assert self.engine.next_gym_day() == GymDayType.PUSH

    def test_points(self) -> None:
        assert self.engine.complete_gym_session(True, GymDayType.PUSH) == 30
        assert self.engine.complete_gym_session(False, GymDayType.CARDIO) == 15
        assert self.ledger.points == 45

    def test_out_of_range_stored_index_wraps(self) -> None:
        store = MemoryStore({StoreKey.GYM_DAY_INDEX: 4})
        engine = HabitRotationEngine(store, ProgressLedger(store))
        assert engine.next_gym_day() == GymDayType.PULL


class TestQuickHitStreak:
    def setup_method(self) -> None:
        self.store = MemoryStore()
        self.ledger = ProgressLedger(self.store)
        self.engine = HabitRotationEngine(self.store, self.ledger)

    def test_same_day_twice_counts_streak_once_points_twice(self) -> None:
        self.engine.complete_quick_hit(date(2025, 7, 15))
        streak = self.engine.complete_quick_hit(date(2025, 7, 15))
        assert streak == 1
        assert self.ledger.points == 30

    def test_consecutive_days(self) -> None:
        self.engine.complete_quick_hit(date(2025, 7, 15))
        assert self.engine.complete_quick_hit(date(2025, 7, 16)) == 2
        assert self.engine.last_quick_hit_date == "2025-07-16"

    def test_accepts_iso_string(self) -> None:
        self.engine.complete_quick_hit("2025-07-15")
        assert self.store.get(StoreKey.LAST_QUICK_HIT_DATE) == "2025-07-15"

    def test_resumes_from_store(self) -> None:
        store = MemoryStore({StoreKey.QUICK_HIT_STREAK: 4, StoreKey.LAST_QUICK_HIT_DATE: "2025-07-14"})
        engine = HabitRotationEngine(store, ProgressLedger(store))
        assert engine.complete_quick_hit(date(2025, 7, 14)) == 4
        assert engine.complete_quick_hit(date(2025, 7, 15)) == 5
