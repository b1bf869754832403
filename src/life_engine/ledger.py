"""Points ledger: gamification counters and one-time activity completion."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from life_engine.models.enums import POINTS_DEFAULT_ACTIVITY, POINTS_PER_BADGE
from life_engine.store import PersistentStore, StoreKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    icon: str
    criteria: str


BADGES: tuple[Badge, ...] = (
    Badge("b1", "Early Riser", "☀️", "Complete 5 AM Quick-Hits"),
    Badge("b2", "Study Streak 7", "📚", "7 consecutive study days"),
    Badge("b3", "Gym Rat", "💪", "20 gym sessions logged"),
    Badge("b4", "Zen Master", "🧘", "10 meditation sessions"),
    Badge("b5", "100 Hour Club", "💯", "Log 100 study hours"),
)


class ProgressLedger:
    """Owns ``points`` and the set of completed activity ids.

    Completion is idempotent: an id earns its points the first time only.
    """

    def __init__(self, store: PersistentStore) -> None:
        self._store = store
        self._points = store.get_int(StoreKey.POINTS, 0)
        # A list keeps completion order stable in the stored document.
        self._completed: list[str] = [
            str(a) for a in store.get_list(StoreKey.COMPLETED_ACTIVITIES)
        ]
        self._completed_set = set(self._completed)

    @property
    def points(self) -> int:
        return self._points

    @property
    def completed_activities(self) -> frozenset[str]:
        return frozenset(self._completed_set)

    def add_points(self, amount: float) -> int:
        """Add *amount* (floored to an int) and return the new total."""
        self._points += math.floor(amount)
        self._store.set(StoreKey.POINTS, self._points)
        return self._points

    def mark_activity_completed(
        self, activity_id: str, points_earned: float = POINTS_DEFAULT_ACTIVITY
    ) -> bool:
        """Mark *activity_id* done and award points once.

        Returns True if this call completed the activity, False if it was
        already complete.
        """
        if activity_id in self._completed_set:
            return False
        self._completed.append(activity_id)
        self._completed_set.add(activity_id)
        self._store.set(StoreKey.COMPLETED_ACTIVITIES, list(self._completed))
        self.add_points(points_earned)
        logger.debug("Completed %s (+%s points)", activity_id, points_earned)
        return True

    def is_completed(self, activity_id: str) -> bool:
        return activity_id in self._completed_set

    def unlocked_badges(self) -> tuple[Badge, ...]:
        """One badge unlocks per ``POINTS_PER_BADGE`` points, in gallery order."""
        count = min(len(BADGES), max(self._points, 0) // POINTS_PER_BADGE)
        return BADGES[:count]
