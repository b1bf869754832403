"""Gym day rotation and the quick-hit daily streak."""

from __future__ import annotations

import logging
from datetime import date

from life_engine.ledger import ProgressLedger
from life_engine.models.enums import (
    GYM_DAY_ROTATION,
    POINTS_OTHER_GYM_SESSION,
    POINTS_QUICK_HIT,
    POINTS_WEIGHT_SESSION,
    GymDayType,
)
from life_engine.store import PersistentStore, StoreKey

logger = logging.getLogger(__name__)


class HabitRotationEngine:
    """Tracks the Push/Pull/Legs pointer and the quick-hit streak.

    Only a completed weight session on a non-cardio day advances the
    rotation. The streak grows at most once per calendar day, while every
    completed circuit earns points.
    """

    def __init__(self, store: PersistentStore, ledger: ProgressLedger) -> None:
        self._store = store
        self._ledger = ledger
        self._gym_day_index = store.get_int(StoreKey.GYM_DAY_INDEX, 0) % len(GYM_DAY_ROTATION)
        self._streak = max(store.get_int(StoreKey.QUICK_HIT_STREAK, 0), 0)
        self._last_quick_hit_date: str = store.get(StoreKey.LAST_QUICK_HIT_DATE) or ""

    @property
    def gym_day_index(self) -> int:
        return self._gym_day_index

    @property
    def quick_hit_streak(self) -> int:
        return self._streak

    @property
    def last_quick_hit_date(self) -> str:
        return self._last_quick_hit_date

    def next_gym_day(self) -> GymDayType:
        """The structured day suggested for the next weight session."""
        return GYM_DAY_ROTATION[self._gym_day_index]

    def complete_gym_session(self, is_weight_training: bool, day_type: GymDayType) -> int:
        """Record a finished gym session and return the points awarded."""
        if is_weight_training and day_type != GymDayType.CARDIO:
            self._gym_day_index = (self._gym_day_index + 1) % len(GYM_DAY_ROTATION)
            self._store.set(StoreKey.GYM_DAY_INDEX, self._gym_day_index)
            logger.info("Rotation advanced, next gym day: %s", self.next_gym_day().value)
        points = POINTS_WEIGHT_SESSION if is_weight_training else POINTS_OTHER_GYM_SESSION
        self._ledger.add_points(points)
        return points

    def complete_quick_hit(self, today: date | str | None = None) -> int:
        """Record a finished circuit and return the current streak."""
        if today is None:
            today = date.today()
        today_str = today.isoformat() if isinstance(today, date) else today
        if self._last_quick_hit_date != today_str:
            self._streak += 1
            self._store.set(StoreKey.QUICK_HIT_STREAK, self._streak)
            logger.info("Quick-hit streak now %d", self._streak)
        self._last_quick_hit_date = today_str
        self._store.set(StoreKey.LAST_QUICK_HIT_DATE, today_str)
        self._ledger.add_points(POINTS_QUICK_HIT)
        return self._streak
