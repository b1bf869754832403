"""Key Result tracking and unit-aware progress dispatch.

A logged activity contributes to a linked Key Result according to the KR's
free-text unit. Classification is a case-insensitive substring match checked
in a fixed precedence order per activity source; the first match wins and an
unmatched unit counts the activity as one occurrence (+1).

    Study:   "hour" -> hours, "min" -> minutes
    Workout: "volume"/"kg" -> reps * weight * sets, "set" -> sets
    Cardio:  "min" -> minutes, "km"/"distance" -> km, "cal" -> calories
    Meal:    "cal" -> calories, "gram" + "protein" in description -> protein g
"""

from __future__ import annotations

import dataclasses
import logging
import math
import uuid
from typing import Any, Union

from life_engine.exceptions import ValidationError
from life_engine.models.enums import ActivitySource
from life_engine.models.logs import CardioLog, MealAnalysis, StudySessionLog, WorkoutLog
from life_engine.models.okr import KeyResult, Objective, current_quarter
from life_engine.store import PersistentStore, StoreKey

logger = logging.getLogger(__name__)

ActivityPayload = Union[StudySessionLog, WorkoutLog, CardioLog, MealAnalysis, None]

# Unit keywords that make a KR worth offering for each activity source.
_RELEVANT_UNIT_KEYWORDS: dict[ActivitySource, tuple[str, ...]] = {
    ActivitySource.STUDY: ("hour", "min", "session", "topic", "module"),
    ActivitySource.WORKOUT: ("volume", "kg", "set", "session", "exercise"),
    ActivitySource.CARDIO: ("session", "min", "km", "cal"),
    ActivitySource.MEAL: ("cal", "gram", "meal", "protein", "carb", "fat"),
    ActivitySource.QUICK_HIT: ("session", "streak", "hit"),
}


# ---------------------------------------------------------------------------
# Pure dispatch functions
# ---------------------------------------------------------------------------


def study_contribution(unit: str, duration_minutes: float) -> float:
    u = unit.lower()
    if "hour" in u:
        return duration_minutes / 60
    if "min" in u:
        return duration_minutes
    return 1.0


def workout_contribution(unit: str, log: WorkoutLog) -> float:
    u = unit.lower()
    if "volume" in u or "kg" in u:
        return log.reps * log.weight * log.sets
    if "set" in u:
        return float(log.sets)
    return 1.0


def cardio_contribution(unit: str, log: CardioLog) -> float:
    u = unit.lower()
    if "min" in u:
        return log.duration_minutes
    if "km" in u or "distance" in u:
        return log.distance_km or 0.0
    if "cal" in u:
        return log.calories_burned or 0.0
    return 1.0


def meal_contribution(unit: str, description: str, meal: MealAnalysis) -> float:
    u = unit.lower()
    if "cal" in u:
        return meal.calories or 0.0
    if "gram" in u and "protein" in description.lower():
        return meal.protein_grams or 0.0
    return 1.0


def dispatch_activity_to_kr(kr: KeyResult, payload: ActivityPayload) -> float:
    """Return the delta *payload* contributes to *kr*.

    A ``None`` payload (gym session completion, quick-hit circuit) always
    counts as one occurrence.
    """
    if isinstance(payload, StudySessionLog):
        return study_contribution(kr.unit, payload.duration_minutes)
    if isinstance(payload, WorkoutLog):
        return workout_contribution(kr.unit, payload)
    if isinstance(payload, CardioLog):
        return cardio_contribution(kr.unit, payload)
    if isinstance(payload, MealAnalysis):
        return meal_contribution(kr.unit, kr.description, payload)
    return 1.0


# ---------------------------------------------------------------------------
# Boundary validation
# ---------------------------------------------------------------------------


def parse_number(value: Any, field_name: str) -> float:
    """Coerce *value* to a finite float or raise ValidationError."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be finite")
    return number


def _require_text(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be blank")
    return value.strip()


def generate_id() -> str:
    return f"id_{uuid.uuid4().hex[:12]}"


# ---------------------------------------------------------------------------
# Tracker
# ---------------------------------------------------------------------------


class KeyResultTracker:
    """Owns the Objective collection and every Key Result update.

    Objectives and Key Results are frozen; each change swaps in a replaced
    copy and persists the whole collection.
    """

    def __init__(self, store: PersistentStore) -> None:
        self._store = store
        self._objectives: list[Objective] = []
        for raw in store.get_list(StoreKey.OBJECTIVES):
            try:
                self._objectives.append(Objective.from_dict(raw))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed stored objective: %s", exc)

    # -- Queries -----------------------------------------------------------

    @property
    def objectives(self) -> tuple[Objective, ...]:
        return tuple(self._objectives)

    def get_objective(self, objective_id: str) -> Objective | None:
        for obj in self._objectives:
            if obj.id == objective_id:
                return obj
        return None

    def find_key_result(self, kr_id: str) -> KeyResult | None:
        for obj in self._objectives:
            kr = obj.find_key_result(kr_id)
            if kr is not None:
                return kr
        return None

    def objectives_for_quarter(self, quarter: str | None = None) -> tuple[Objective, ...]:
        quarter = quarter or current_quarter()
        return tuple(o for o in self._objectives if o.quarter == quarter)

    def key_results_for_quarter(self, quarter: str | None = None) -> tuple[KeyResult, ...]:
        return tuple(
            kr for o in self.objectives_for_quarter(quarter) for kr in o.key_results
        )

    def relevant_key_results(
        self, source: ActivitySource, quarter: str | None = None
    ) -> tuple[KeyResult, ...]:
        """Key Results whose unit suggests *source* activities can feed them."""
        keywords = _RELEVANT_UNIT_KEYWORDS[source]
        return tuple(
            kr for kr in self.key_results_for_quarter(quarter)
            if any(k in kr.unit.lower() for k in keywords)
        )

    def top_incomplete_key_results(
        self, limit: int = 3, quarter: str | None = None
    ) -> tuple[KeyResult, ...]:
        """Least-complete unfinished Key Results first."""
        incomplete = [kr for kr in self.key_results_for_quarter(quarter) if not kr.is_complete]
        incomplete.sort(key=lambda kr: kr.fraction_complete)
        return tuple(incomplete[:limit])

    # -- Progress ----------------------------------------------------------

    def update_progress(
        self, kr_id: str, delta: float, absolute: float | None = None
    ) -> KeyResult | None:
        """Add *delta* (or set *absolute*) and clamp to ``[0, target]``.

        Unknown ids are ignored and return None; a linked KR may have been
        deleted since the activity started. Non-finite input raises
        ValidationError before anything is stored.
        """
        delta = parse_number(delta, "delta")
        if absolute is not None:
            absolute = parse_number(absolute, "absolute")
        for i, obj in enumerate(self._objectives):
            kr = obj.find_key_result(kr_id)
            if kr is None:
                continue
            value = absolute if absolute is not None else kr.current_value + delta
            updated = kr.with_value(value)
            self._replace_key_result(i, updated)
            logger.debug(
                "KR %s: %.2f -> %.2f %s", kr_id, kr.current_value, updated.current_value, kr.unit
            )
            return updated
        logger.debug("Ignoring progress for unknown KR %s", kr_id)
        return None

    def apply_activity(self, kr_id: str, payload: ActivityPayload) -> KeyResult | None:
        """Dispatch *payload* through the unit table and add the result."""
        kr = self.find_key_result(kr_id)
        if kr is None:
            logger.debug("Linked KR %s not found, skipping dispatch", kr_id)
            return None
        return self.update_progress(kr_id, dispatch_activity_to_kr(kr, payload))

    # -- Objective CRUD ----------------------------------------------------

    def add_objective(self, title: str, quarter: str | None = None) -> Objective:
        objective = Objective(
            id=generate_id(),
            title=_require_text(title, "title"),
            quarter=quarter or current_quarter(),
        )
        self._objectives.append(objective)
        self._persist()
        logger.info("Added objective %r for %s", objective.title, objective.quarter)
        return objective

    def update_objective(
        self, objective_id: str, title: str | None = None, quarter: str | None = None
    ) -> Objective | None:
        for i, obj in enumerate(self._objectives):
            if obj.id != objective_id:
                continue
            changes: dict[str, Any] = {}
            if title is not None:
                changes["title"] = _require_text(title, "title")
            if quarter is not None:
                changes["quarter"] = _require_text(quarter, "quarter")
            self._objectives[i] = dataclasses.replace(obj, **changes)
            self._persist()
            return self._objectives[i]
        return None

    def delete_objective(self, objective_id: str) -> bool:
        """Delete an objective and, with it, its Key Results."""
        before = len(self._objectives)
        self._objectives = [o for o in self._objectives if o.id != objective_id]
        if len(self._objectives) == before:
            return False
        self._persist()
        return True

    def clear(self) -> None:
        """Delete every Objective and Key Result."""
        self._objectives = []
        self._persist()
        logger.info("Cleared all objectives")

    # -- Key Result CRUD ---------------------------------------------------

    def add_key_result(
        self,
        objective_id: str,
        description: str,
        target_value: Any,
        unit: str,
        current_value: Any = 0,
    ) -> KeyResult:
        target = parse_number(target_value, "target_value")
        current = parse_number(current_value, "current_value")
        if target <= 0:
            raise ValidationError("target_value must be greater than 0")
        for i, obj in enumerate(self._objectives):
            if obj.id != objective_id:
                continue
            kr = KeyResult(
                id=generate_id(),
                description=_require_text(description, "description"),
                target_value=target,
                current_value=0.0,
                unit=_require_text(unit, "unit"),
                objective_id=objective_id,
            ).with_value(current)
            self._objectives[i] = dataclasses.replace(
                obj, key_results=obj.key_results + (kr,)
            )
            self._persist()
            return kr
        raise ValidationError(f"Unknown objective {objective_id}")

    def update_key_result(
        self,
        kr_id: str,
        description: str | None = None,
        target_value: Any = None,
        unit: str | None = None,
        current_value: Any = None,
    ) -> KeyResult | None:
        """Edit a Key Result's definition. The current value is re-clamped."""
        kr = self.find_key_result(kr_id)
        if kr is None:
            return None
        target = kr.target_value
        if target_value is not None:
            target = parse_number(target_value, "target_value")
            if target <= 0:
                raise ValidationError("target_value must be greater than 0")
        current = kr.current_value
        if current_value is not None:
            current = parse_number(current_value, "current_value")
        updated = dataclasses.replace(
            kr,
            description=_require_text(description, "description") if description is not None else kr.description,
            unit=_require_text(unit, "unit") if unit is not None else kr.unit,
            target_value=target,
        ).with_value(current)
        for i, obj in enumerate(self._objectives):
            if obj.find_key_result(kr_id) is not None:
                self._replace_key_result(i, updated)
                break
        return updated

    def delete_key_result(self, kr_id: str) -> bool:
        for i, obj in enumerate(self._objectives):
            if obj.find_key_result(kr_id) is None:
                continue
            self._objectives[i] = dataclasses.replace(
                obj, key_results=tuple(k for k in obj.key_results if k.id != kr_id)
            )
            self._persist()
            return True
        return False

    # -- Internal ----------------------------------------------------------

    def _replace_key_result(self, index: int, updated: KeyResult) -> None:
        obj = self._objectives[index]
        self._objectives[index] = dataclasses.replace(
            obj,
            key_results=tuple(updated if k.id == updated.id else k for k in obj.key_results),
        )
        self._persist()

    def _persist(self) -> None:
        self._store.set(StoreKey.OBJECTIVES, [o.to_dict() for o in self._objectives])
