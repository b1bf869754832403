"""Static daily plan and exercise reference data. Never persisted."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from life_engine.models.enums import ActivityType


@dataclass(frozen=True)
class ScheduleActivity:
    """A single entry on the fixed daily schedule."""

    id: str
    time: str  # display label, e.g. "4:30 AM - 7:00 AM"
    name: str
    type: ActivityType
    start: time | None = None
    end: time | None = None
    duration_minutes: int | None = None
    details: str | None = None
    is_potentially_challenging: bool = False


@dataclass(frozen=True)
class QuickHitExercise:
    id: str
    name: str
    cues: str = ""


DAILY_SCHEDULE: tuple[ScheduleActivity, ...] = (
    ScheduleActivity("home_workout_am", "4:00 AM", "Wake, shower, Quick-Hit",
                     ActivityType.HOME_WORKOUT, time(4, 0), time(4, 30), 30,
                     details="30 push-ups, 30 crunches, 30 squats"),
    ScheduleActivity("study1", "4:30 AM - 7:00 AM", "Study Session 1",
                     ActivityType.STUDY, time(4, 30), time(7, 0), 150),
    ScheduleActivity("gym1_prep", "7:00 AM - 7:30 AM", "Travel to Gym/Prep",
                     ActivityType.BREAK, time(7, 0), time(7, 30), 30),
    ScheduleActivity("gym1", "7:30 AM - 8:30 AM", "Gym Time",
                     ActivityType.GYM_WEIGHTS, time(7, 30), time(8, 30), 60,
                     details="Weight Training or Cardio choice"),
    ScheduleActivity("breakfast_prep", "8:30 AM - 9:30 AM", "Breakfast, shower, get ready",
                     ActivityType.MEAL, time(8, 30), time(9, 30), 60),
    ScheduleActivity("study2", "9:30 AM - 12:30 PM", "Study Session 2",
                     ActivityType.STUDY, time(9, 30), time(12, 30), 180),
    ScheduleActivity("lunch", "12:30 PM - 1:00 PM", "Lunch",
                     ActivityType.MEAL, time(12, 30), time(13, 0), 30),
    ScheduleActivity("driving", "1:00 PM - 2:00 PM", "Driving class",
                     ActivityType.DRIVING, time(13, 0), time(14, 0), 60),
    ScheduleActivity("study3", "2:00 PM - 5:00 PM", "Study Session 3 (PM Focus)",
                     ActivityType.STUDY, time(14, 0), time(17, 0), 180,
                     is_potentially_challenging=True),
    ScheduleActivity("gym2", "5:00 PM - 6:00 PM", "Gym - Cardio",
                     ActivityType.GYM_CARDIO, time(17, 0), time(18, 0), 60),
    ScheduleActivity("dinner", "6:00 PM - 6:30 PM", "Dinner",
                     ActivityType.MEAL, time(18, 0), time(18, 30), 30),
    ScheduleActivity("study4_prep", "6:30 PM - 7:00 PM", "Break/Prep",
                     ActivityType.BREAK, time(18, 30), time(19, 0), 30),
    ScheduleActivity("study4", "7:00 PM - 8:30 PM", "Study Session 4 (Evening Review)",
                     ActivityType.STUDY, time(19, 0), time(20, 30), 90),
    ScheduleActivity("meditation_pm", "Before Bed (~10 PM)", "Evening Meditation",
                     ActivityType.MEDITATION, time(22, 0), time(22, 15), 15),
)

QUICK_HIT_EXERCISES: tuple[QuickHitExercise, ...] = (
    QuickHitExercise("qh_pushups", "Push-ups", "Keep core tight, full range of motion."),
    QuickHitExercise("qh_crunches", "Crunches", "Focus on abdominal contraction, avoid pulling neck."),
    QuickHitExercise("qh_squats", "Squats", "Chest up, back straight, descend to parallel or below."),
)

STUDY_TOPICS: tuple[str, ...] = (
    "Ethics",
    "Quantitative Methods",
    "Economics",
    "Financial Statement Analysis",
    "Corporate Issuers",
    "Equity Investments",
    "Fixed Income",
    "Derivatives",
    "Alternative Investments",
    "Portfolio Management",
)


def activity_at(moment: time) -> ScheduleActivity | None:
    """Return the schedule entry whose window contains *moment*, if any."""
    for activity in DAILY_SCHEDULE:
        if activity.start is None or activity.end is None:
            continue
        if activity.start <= moment < activity.end:
            return activity
    return None
