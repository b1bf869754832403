"""LifeArchitect: the single owner of application state.

Every user-facing flow (finish a study session, log a workout, add a meal,
complete the quick-hit circuit) is one method here. Each flow updates its
logs, then awards points, then dispatches progress to the linked Key Result,
in that order.
"""

from __future__ import annotations

import dataclasses
import functools
import logging
import threading
import time as _time
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from gemini_client import GeminiClient
from life_engine import advisor, analytics, config
from life_engine.activity_log import ActivityLogAggregator
from life_engine.advisor import AdviceResult
from life_engine.exceptions import ValidationError
from life_engine.key_results import KeyResultTracker, parse_number
from life_engine.ledger import ProgressLedger
from life_engine.models.enums import (
    GYM_REST_DURATION_S,
    POINTS_DEFAULT_ACTIVITY,
    POINTS_MEAL_LOGGED,
    POINTS_MEDITATION,
    POINTS_PER_STUDY_HOUR,
    POINTS_PER_STUDY_HOUR_COMPLETION,
    QUICK_HIT_ACTIVITY_ID,
    GymDayType,
    SessionKind,
    Theme,
)
from life_engine.models.logs import CardioLog, MealAnalysis, StudySessionLog, WorkoutLog
from life_engine.models.okr import KeyResult, Objective, current_quarter
from life_engine.models.workout import PlanExercise
from life_engine.notifications import NotificationCenter
from life_engine.rotation import HabitRotationEngine
from life_engine.session import SessionCompleted, SessionLifecycle, create_session
from life_engine.store import PersistentStore, StoreKey
from life_engine.timing import APSchedulerTicker, Clock, SystemClock, TickScheduler

logger = logging.getLogger(__name__)

# Feature names used as keys of ``LifeArchitect.last_errors``.
MEAL_ANALYSIS = "meal_analysis"
EXERCISE_ALTERNATIVE = "exercise_alternative"
PRACTICE_QUESTIONS = "practice_questions"


_last_stamp = 0
_stamp_lock = threading.Lock()


def _timestamp_ms() -> int:
    """Epoch milliseconds, strictly increasing so generated activity ids never repeat."""
    global _last_stamp
    with _stamp_lock:
        _last_stamp = max(int(_time.time() * 1000), _last_stamp + 1)
        return _last_stamp


def _synchronized(method):
    """Run *method* under the controller lock."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class LifeArchitect:
    """Facade over the ledger, tracker, logs, rotation and timed sessions.

    Auto-completing sessions call back on the scheduler thread, so every
    method that changes state runs under one re-entrant lock. Lock order is
    session, then controller: locked methods never touch the study,
    meditation or quick-hit sessions.
    """

    def __init__(
        self,
        store: PersistentStore,
        gemini: Optional[GeminiClient] = None,
        notifications: Optional[NotificationCenter] = None,
        clock: Optional[Clock] = None,
        ticker: Optional[TickScheduler] = None,
        today: Callable[[], date] = date.today,
        study_target_hours: float = config.STUDY_TARGET_HOURS,
        study_deadline: date = config.STUDY_DEADLINE,
    ) -> None:
        self.store = store
        self._lock = threading.RLock()
        self._today = today
        self.ledger = ProgressLedger(store)
        self.key_results = KeyResultTracker(store)
        self.logs = ActivityLogAggregator(store, today=today)
        self.rotation = HabitRotationEngine(store, self.ledger)
        self.notifications = notifications or NotificationCenter()
        self.gemini = gemini or GeminiClient(
            api_key=config.GEMINI_API_KEY,
            model=config.GEMINI_MODEL,
            timeout_s=config.GEMINI_TIMEOUT,
        )
        self.study_target_hours = study_target_hours
        self.study_deadline = study_deadline
        self.current_quarter_view = current_quarter(today())
        self.last_errors: dict[str, Optional[str]] = {
            MEAL_ANALYSIS: None,
            EXERCISE_ALTERNATIVE: None,
            PRACTICE_QUESTIONS: None,
        }

        self._total_study_hours = max(store.get_float(StoreKey.STUDY_HOURS, 0.0), 0.0)
        self._theme = self._load_theme()
        self._playlist_url: str = store.get(StoreKey.PLAYLIST_URL) or config.DEFAULT_PLAYLIST_URL
        self._equipment: str = store.get(StoreKey.AVAILABLE_EQUIPMENT) or config.DEFAULT_EQUIPMENT

        clock = clock or SystemClock()
        ticker = ticker or APSchedulerTicker()
        self.sessions: dict[SessionKind, SessionLifecycle] = {
            kind: create_session(kind, clock, ticker) for kind in SessionKind
        }
        self.rest_timer = create_session(
            SessionKind.WORKOUT, clock, ticker, duration_s=GYM_REST_DURATION_S, context="rest"
        )
        self.sessions[SessionKind.STUDY].subscribe(self._on_study_completed)
        self.sessions[SessionKind.MEDITATION].subscribe(self._on_meditation_completed)
        self.sessions[SessionKind.QUICK_HIT].subscribe(self._on_quick_hit_completed)
        logger.info(
            "LifeArchitect loaded: %d points, %.1f study hours, %d objectives",
            self.ledger.points,
            self._total_study_hours,
            len(self.key_results.objectives),
        )

    # -- Settings ----------------------------------------------------------

    @property
    def theme(self) -> Theme:
        return self._theme

    @_synchronized
    def set_theme(self, theme: Theme | str) -> None:
        self._theme = Theme(theme)
        self.store.set(StoreKey.THEME, self._theme.value)

    @property
    def playlist_url(self) -> str:
        return self._playlist_url

    @_synchronized
    def set_playlist_url(self, url: str) -> None:
        self._playlist_url = url.strip() or config.DEFAULT_PLAYLIST_URL
        self.store.set(StoreKey.PLAYLIST_URL, self._playlist_url)

    @property
    def available_equipment(self) -> str:
        return self._equipment

    @_synchronized
    def set_available_equipment(self, equipment: str) -> None:
        self._equipment = equipment.strip() or config.DEFAULT_EQUIPMENT
        self.store.set(StoreKey.AVAILABLE_EQUIPMENT, self._equipment)

    @property
    def total_study_hours(self) -> float:
        return self._total_study_hours

    def current_key_results(self) -> tuple[KeyResult, ...]:
        return self.key_results.key_results_for_quarter(self.current_quarter_view)

    # -- Goals -------------------------------------------------------------

    @_synchronized
    def add_objective(self, title: str, quarter: str | None = None) -> Objective:
        return self.key_results.add_objective(title, quarter or self.current_quarter_view)

    @_synchronized
    def delete_objective(self, objective_id: str) -> bool:
        return self.key_results.delete_objective(objective_id)

    @_synchronized
    def add_key_result(
        self, objective_id: str, description: str, target_value: float, unit: str
    ) -> KeyResult:
        return self.key_results.add_key_result(objective_id, description, target_value, unit)

    @_synchronized
    def set_key_result_value(self, kr_id: str, value: float) -> KeyResult | None:
        """Overwrite a KR's current value (clamped); non-finite input is rejected."""
        return self.key_results.update_progress(kr_id, 0, absolute=value)

    # -- Points ------------------------------------------------------------

    @property
    def points(self) -> int:
        return self.ledger.points

    @_synchronized
    def mark_activity_completed(
        self, activity_id: str, points_earned: float = POINTS_DEFAULT_ACTIVITY
    ) -> bool:
        return self.ledger.mark_activity_completed(activity_id, points_earned)

    # -- Study -------------------------------------------------------------

    @_synchronized
    def complete_study_session(
        self, minutes: float, topic: str, linked_kr_id: str | None = None
    ) -> StudySessionLog:
        """Record a finished study session.

        Adds the hours to the running total, appends the log (pruning entries
        older than 90 days), awards points and feeds the linked Key Result.
        """
        minutes = parse_number(minutes, "minutes")
        if minutes <= 0:
            raise ValidationError("minutes must be greater than 0")
        hours = minutes / 60

        self._total_study_hours += hours
        self.store.set(StoreKey.STUDY_HOURS, self._total_study_hours)
        log = self.logs.append_study_log(
            StudySessionLog(duration_minutes=minutes, topic=topic, linked_kr_id=linked_kr_id)
        )

        self.ledger.add_points(hours * POINTS_PER_STUDY_HOUR)
        self.ledger.mark_activity_completed(
            f"study_session_{_timestamp_ms()}", hours * POINTS_PER_STUDY_HOUR_COMPLETION
        )
        if linked_kr_id:
            self.key_results.apply_activity(linked_kr_id, log)
        logger.info("Study session: %.0f min on %r", minutes, topic)
        return log

    def start_study_session(self, topic: str, linked_kr_id: str | None = None) -> SessionLifecycle:
        session = self.sessions[SessionKind.STUDY]
        session.start()
        session.context = topic
        session.linked_kr_id = linked_kr_id
        return session

    @_synchronized
    def _on_study_completed(self, event: SessionCompleted) -> None:
        minutes = event.whole_minutes
        if minutes <= 0:
            logger.info("Study session under a minute, nothing recorded")
            return
        self.complete_study_session(minutes, event.context, event.linked_kr_id)
        self.notifications.show(
            "Study Session Complete!",
            f"You studied '{event.context}' for {minutes} minutes. Great job!",
            tag=f"study-session-complete-{_timestamp_ms()}",
        )

    # -- Gym ---------------------------------------------------------------

    @_synchronized
    def add_workout_log(self, log: WorkoutLog) -> WorkoutLog:
        stored = self.logs.append_workout_log(log)
        if stored.linked_kr_id:
            self.key_results.apply_activity(stored.linked_kr_id, stored)
        return stored

    @_synchronized
    def add_cardio_log(self, log: CardioLog) -> CardioLog:
        stored = self.logs.append_cardio_log(log)
        if stored.linked_kr_id:
            self.key_results.apply_activity(stored.linked_kr_id, stored)
        return stored

    @_synchronized
    def complete_gym_session(
        self, is_weight_training: bool, day_type: GymDayType, linked_kr_id: str | None = None
    ) -> int:
        """Advance the rotation when applicable and award session points."""
        points = self.rotation.complete_gym_session(is_weight_training, day_type)
        if linked_kr_id:
            self.key_results.apply_activity(linked_kr_id, None)
        return points

    @_synchronized
    def complete_workout(
        self,
        logs: Iterable[WorkoutLog],
        day_type: GymDayType,
        linked_kr_id: str | None = None,
    ) -> tuple[WorkoutLog, ...]:
        """Finish a structured weight session.

        Each log is tagged with the session's Key Result and dispatched on its
        own; the session itself then counts once more toward that Key Result.
        """
        stored = tuple(
            self.add_workout_log(
                dataclasses.replace(log, linked_kr_id=linked_kr_id, day_type=log.day_type or day_type)
            )
            for log in logs
        )
        workout_session = self.sessions[SessionKind.WORKOUT]
        workout_session.cancel()
        self.rest_timer.cancel()
        self.complete_gym_session(True, day_type, linked_kr_id)
        return stored

    @_synchronized
    def log_cardio(
        self,
        duration_minutes: float,
        cardio_type: str | None = None,
        calories_burned: float | None = None,
        distance_km: float | None = None,
        linked_kr_id: str | None = None,
    ) -> CardioLog:
        """Log a cardio session and finish it as a non-weight gym session."""
        duration = parse_number(duration_minutes, "duration_minutes")
        if duration <= 0:
            raise ValidationError("Please enter a valid duration.")
        log = self.add_cardio_log(
            CardioLog(
                duration_minutes=duration,
                type=cardio_type,
                calories_burned=parse_number(calories_burned, "calories_burned") if calories_burned is not None else None,
                distance_km=parse_number(distance_km, "distance_km") if distance_km is not None else None,
                linked_kr_id=linked_kr_id,
            )
        )
        self.complete_gym_session(False, GymDayType.CARDIO, linked_kr_id)
        return log

    def suggest_alternative_exercise(
        self, exercise: PlanExercise, plan_name: str, existing_names: Iterable[str] = ()
    ) -> AdviceResult[PlanExercise]:
        result = advisor.suggest_alternative_exercise(
            self.gemini, exercise, plan_name, self._equipment, existing_names
        )
        self.last_errors[EXERCISE_ALTERNATIVE] = result.error
        return result

    # -- Quick-hit ---------------------------------------------------------

    @_synchronized
    def complete_quick_hit(self, linked_kr_id: str | None = None) -> int:
        """Record the morning circuit; returns the streak."""
        streak = self.rotation.complete_quick_hit(self._today())
        self.ledger.mark_activity_completed(QUICK_HIT_ACTIVITY_ID, 0)
        if linked_kr_id:
            self.key_results.apply_activity(linked_kr_id, None)
        return streak

    def start_quick_hit(self, linked_kr_id: str | None = None) -> SessionLifecycle:
        session = self.sessions[SessionKind.QUICK_HIT]
        session.start()
        session.linked_kr_id = linked_kr_id
        return session

    @_synchronized
    def _on_quick_hit_completed(self, event: SessionCompleted) -> None:
        self.complete_quick_hit(event.linked_kr_id)

    def quick_hit_reminder_due(self, now: datetime | None = None) -> bool:
        """True during the 4 AM hour while the circuit is not yet done."""
        now = now or datetime.now()
        return 4 <= now.hour < 5 and not self.ledger.is_completed(QUICK_HIT_ACTIVITY_ID)

    @_synchronized
    def send_quick_hit_reminder(self, now: datetime | None = None) -> bool:
        now = now or datetime.now()
        if not self.quick_hit_reminder_due(now):
            return False
        return self.notifications.show(
            "Time for your Quick Hit!",
            "It's around 4 AM! Let's get that morning boost.",
            tag=f"quick-hit-reminder-{now.date().isoformat()}",
        )

    # -- Meditation --------------------------------------------------------

    @_synchronized
    def complete_meditation(self) -> None:
        self.ledger.mark_activity_completed(f"meditation_{_timestamp_ms()}", POINTS_MEDITATION)
        self.notifications.show(
            "Meditation Complete",
            "Your mind is clearer. Well done!",
            tag=f"meditation-complete-{_timestamp_ms()}",
        )

    @_synchronized
    def _on_meditation_completed(self, event: SessionCompleted) -> None:
        self.complete_meditation()

    # -- Nutrition ---------------------------------------------------------

    @_synchronized
    def add_meal(self, meal: MealAnalysis) -> MealAnalysis:
        """Append *meal* with today's date, award points, feed the linked KR."""
        stored = self.logs.append_meal_log(meal)
        self.ledger.add_points(POINTS_MEAL_LOGGED)
        if stored.linked_kr_id:
            self.key_results.apply_activity(stored.linked_kr_id, stored)
        return stored

    def analyze_and_log_meal(
        self, description: str, linked_kr_id: str | None = None
    ) -> AdviceResult[MealAnalysis]:
        """Estimate a meal with the AI service and log it on success.

        On failure nothing is logged and the error is kept in ``last_errors``.
        """
        result = advisor.analyze_meal(self.gemini, description, linked_kr_id)
        self.last_errors[MEAL_ANALYSIS] = result.error
        if result.value is None:
            return result
        stored = self.add_meal(result.value)
        return AdviceResult(value=stored, raw_text=result.raw_text)

    def generate_practice_questions(
        self, topic: str, sub_topic: str = "", sub_sub_topic: str = ""
    ) -> AdviceResult[str]:
        result = advisor.generate_practice_questions(self.gemini, topic, sub_topic, sub_sub_topic)
        self.last_errors[PRACTICE_QUESTIONS] = result.error
        return result

    # -- Dashboards --------------------------------------------------------

    def study_progress(self) -> analytics.StudyProgress:
        return analytics.study_progress(
            self._total_study_hours, self.study_target_hours, self.study_deadline, self._today()
        )

    # -- Internal ----------------------------------------------------------

    def _load_theme(self) -> Theme:
        raw = self.store.get(StoreKey.THEME)
        try:
            return Theme(raw) if raw else Theme.DARK
        except ValueError:
            logger.warning("Unknown stored theme %r, using dark", raw)
            return Theme.DARK
