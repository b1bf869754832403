"""Life Architect: Streamlit dashboard.

Run with:
    streamlit run streamlit_app/app.py

All state lives in one cached ``LifeArchitect``; this module only renders
it and forwards button presses to controller methods.
"""

from __future__ import annotations

import threading
from collections import deque
from datetime import date, datetime

import pandas as pd
import streamlit as st

from life_engine import JsonFileStore, LifeArchitect, config
from life_engine.analytics import (
    daily_calories,
    daily_study_hours,
    macro_split,
    weekly_cardio,
    weekly_volume,
)
from life_engine.exceptions import LifeEngineError
from life_engine.ledger import BADGES
from life_engine.models.enums import (
    QUICK_HIT_TARGET_REPS,
    ActivitySource,
    GymDayType,
    NotificationPermission,
    SessionKind,
    SessionState,
    Theme,
)
from life_engine.models.logs import MealAnalysis, WorkoutLog
from life_engine.models.okr import quarter_options
from life_engine.models.schedule import DAILY_SCHEDULE, QUICK_HIT_EXERCISES, STUDY_TOPICS
from life_engine.notifications import NotificationCenter

from helpers import (
    GYM_DAY_ICONS,
    PROGRESS_COLORS,
    THEME_LABELS,
    configure_logging,
    format_duration,
    format_hours,
    format_timer,
    kr_label,
    progress_color,
    quote_of_the_day,
)

configure_logging(config.LOG_LEVEL)

st.set_page_config(page_title="Life Architect", page_icon="🏛️", layout="wide")


# ---------------------------------------------------------------------------
# Cached controller
# ---------------------------------------------------------------------------


class _Inbox:
    """Notifications raised off the script thread, drained on the next rerun."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: deque[tuple[str, str]] = deque(maxlen=20)

    def send(self, title: str, body: str, tag: str) -> None:
        with self._lock:
            self._items.append((title, body))

    def drain(self) -> list[tuple[str, str]]:
        with self._lock:
            items = list(self._items)
            self._items.clear()
        return items


@st.cache_resource
def get_inbox() -> _Inbox:
    return _Inbox()


@st.cache_resource
def get_architect() -> LifeArchitect:
    inbox = get_inbox()
    notifications = NotificationCenter(
        sender=inbox.send, prompt=lambda: NotificationPermission.GRANTED
    )
    notifications.request_permission()
    return LifeArchitect(JsonFileStore(config.STORE_PATH), notifications=notifications)


la = get_architect()

for title, body in get_inbox().drain():
    st.toast(f"**{title}** {body}")


def _kr_select(label: str, source: ActivitySource, key: str) -> str | None:
    """Optional Key Result picker limited to KRs that *source* can feed."""
    krs = la.key_results.relevant_key_results(source, la.current_quarter_view)
    if not krs:
        return None
    options = [None] + [kr.id for kr in krs]
    labels = {kr.id: kr_label(kr) for kr in krs}
    return st.selectbox(
        label,
        options,
        format_func=lambda kr_id: "None" if kr_id is None else labels[kr_id],
        key=key,
    )


def _run(action, *args, **kwargs):
    """Call a controller action, surfacing rejected input as an error box."""
    try:
        return action(*args, **kwargs)
    except LifeEngineError as exc:
        st.error(str(exc))
        return None


def _session_controls(kind: SessionKind, key: str, on_start=None) -> None:
    session = la.sessions[kind]
    cols = st.columns(3)
    if session.state == SessionState.IDLE:
        if cols[0].button("Start", key=f"{key}_start"):
            if on_start:
                on_start()
            else:
                session.start()
            st.rerun()
        return
    if session.state == SessionState.RUNNING:
        if cols[0].button("Pause", key=f"{key}_pause"):
            session.pause()
            st.rerun()
    elif cols[0].button("Resume", key=f"{key}_resume"):
        session.resume()
        st.rerun()
    if cols[1].button("End", key=f"{key}_end"):
        session.end()
        st.rerun()
    if cols[2].button("Cancel", key=f"{key}_cancel"):
        session.cancel()
        st.rerun()


@st.fragment(run_every=1)
def _timer_display(kind: SessionKind) -> None:
    session = la.sessions[kind]
    if session.is_countdown and kind != SessionKind.STUDY:
        st.header(format_timer(session.remaining_seconds))
    else:
        st.header(format_timer(session.elapsed_seconds))
    st.caption(session.state.name.title())


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

st.sidebar.title("Life Architect")
st.sidebar.metric("Points", la.points)
st.sidebar.metric("Quick-Hit streak", f"{la.rotation.quick_hit_streak} days")
st.sidebar.metric("Next gym day", la.rotation.next_gym_day().value)
quarters = quarter_options()
la.current_quarter_view = st.sidebar.selectbox(
    "Quarter",
    quarters,
    index=quarters.index(la.current_quarter_view) if la.current_quarter_view in quarters else 0,
)
st.sidebar.caption(quote_of_the_day())

(
    tab_dash,
    tab_study,
    tab_gym,
    tab_habits,
    tab_food,
    tab_goals,
    tab_stats,
    tab_settings,
) = st.tabs(
    ["Dashboard", "Study", "Gym", "Quick-Hit & Meditation", "Nutrition", "Goals", "Analytics", "Settings"]
)

# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

with tab_dash:
    if la.quick_hit_reminder_due():
        st.warning("It's around 4 AM! Time for your Quick Hit.")
        la.send_quick_hit_reminder()

    progress = la.study_progress()
    c1, c2, c3 = st.columns(3)
    c1.metric("Study hours", format_hours(progress.total_hours), f"{progress.percent:.1f}% of {progress.target_hours:g}")
    c2.metric("Days to exam", progress.days_remaining)
    c3.metric("Needed per day", format_hours(progress.hours_needed_per_day))
    st.progress(min(progress.percent / 100, 1.0))

    st.subheader("Today's schedule")
    for activity in DAILY_SCHEDULE:
        done = la.ledger.is_completed(activity.id)
        cols = st.columns([3, 5, 2])
        cols[0].write(activity.time)
        cols[1].write(("~~%s~~" % activity.name) if done else activity.name)
        if not done and cols[2].button("Done", key=f"done_{activity.id}"):
            la.mark_activity_completed(activity.id)
            st.rerun()

    st.subheader("Key Results needing attention")
    for kr in la.key_results.top_incomplete_key_results(quarter=la.current_quarter_view):
        pct = kr.fraction_complete * 100
        st.markdown(
            f'<span style="color:{PROGRESS_COLORS[progress_color(pct)]}">●</span> '
            f"{kr.description}: {kr.current_value:g}/{kr.target_value:g} {kr.unit}",
            unsafe_allow_html=True,
        )

    st.subheader("Badges")
    unlocked = set(b.id for b in la.ledger.unlocked_badges())
    cols = st.columns(len(BADGES))
    for col, badge in zip(cols, BADGES):
        col.markdown(f"{badge.icon if badge.id in unlocked else '🔒'}  \n**{badge.name}**")
        col.caption(badge.criteria)

# ---------------------------------------------------------------------------
# Study
# ---------------------------------------------------------------------------

with tab_study:
    study = la.sessions[SessionKind.STUDY]
    topic = st.selectbox("Topic", STUDY_TOPICS, key="study_topic")
    study_kr = _kr_select("Link to Key Result (optional)", ActivitySource.STUDY, "study_kr")
    _timer_display(SessionKind.STUDY)
    _session_controls(
        SessionKind.STUDY,
        "study",
        on_start=lambda: la.start_study_session(topic, study_kr),
    )

    with st.expander("Log a past session"):
        with st.form("manual_study"):
            minutes = st.number_input("Minutes", min_value=1, value=60)
            if st.form_submit_button("Log session"):
                _run(la.complete_study_session, minutes, topic, study_kr)
                st.rerun()

    st.subheader("AI Question Factory")
    if not la.gemini.is_configured:
        st.info("Gemini API Key not configured. AI question generation disabled.")
    else:
        q_topic = st.text_input("Main topic", key="q_topic")
        q_sub = st.text_input("Sub-topic (optional)", key="q_sub")
        q_subsub = st.text_input("Sub-sub-topic (optional)", key="q_subsub")
        if st.button("Generate questions"):
            with st.spinner("Generating..."):
                result = la.generate_practice_questions(q_topic, q_sub, q_subsub)
            if result.error:
                st.error(result.error)
            else:
                st.markdown(result.value)

# ---------------------------------------------------------------------------
# Gym
# ---------------------------------------------------------------------------

with tab_gym:
    next_day = la.rotation.next_gym_day()
    st.subheader(f"{GYM_DAY_ICONS[next_day]} Next up: {next_day.value}")
    mode = st.radio("Session", ["Weights", "Cardio"], horizontal=True)

    if mode == "Weights":
        day_type = st.selectbox(
            "Day type", [d for d in GymDayType if d != GymDayType.CARDIO],
            index=[d for d in GymDayType if d != GymDayType.CARDIO].index(next_day),
            format_func=lambda d: d.value,
        )
        gym_kr = _kr_select("Link session to Key Result (optional)", ActivitySource.WORKOUT, "gym_kr")
        pending: list[WorkoutLog] = st.session_state.setdefault("pending_sets", [])
        with st.form("log_set", clear_on_submit=True):
            c1, c2, c3, c4 = st.columns(4)
            name = c1.text_input("Exercise")
            reps = c2.number_input("Reps", min_value=0, value=8)
            weight = c3.number_input("Weight (kg)", min_value=0.0, value=20.0, step=2.5)
            sets = c4.number_input("Sets", min_value=1, value=1)
            muscle = st.text_input("Muscle group (optional)")
            if st.form_submit_button("Add set") and name.strip():
                pending.append(
                    WorkoutLog(
                        exercise_id=name.strip().lower().replace(" ", "_"),
                        exercise_name=name.strip(),
                        reps=int(reps),
                        weight=float(weight),
                        sets=int(sets),
                        muscle_group=muscle.strip() or None,
                        day_type=day_type,
                    )
                )
        for log in pending:
            st.write(f"{log.exercise_name}: {log.sets} x {log.reps} @ {log.weight:g} kg")

        st.caption("Rest timer")
        rest = la.rest_timer
        if rest.state == SessionState.IDLE:
            if st.button("Start 90s"):
                rest.start()
                st.rerun()
        else:
            st.write(format_timer(rest.remaining_seconds))
            if st.button("Skip rest"):
                rest.cancel()
                st.rerun()

        if st.button("Finish workout", type="primary"):
            la.complete_workout(pending, day_type, gym_kr)
            st.session_state["pending_sets"] = []
            st.success("Workout logged!")
            st.rerun()
    else:
        cardio_kr = _kr_select("Link to Key Result (optional)", ActivitySource.CARDIO, "cardio_kr")
        with st.form("cardio"):
            cardio_type = st.text_input("Type", value="Treadmill")
            duration = st.number_input("Duration (min)", min_value=0, value=30)
            calories = st.number_input("Calories (optional)", min_value=0, value=0)
            distance = st.number_input("Distance km (optional)", min_value=0.0, value=0.0)
            if st.form_submit_button("Log Cardio & Finish"):
                _run(
                    la.log_cardio,
                    duration,
                    cardio_type,
                    calories or None,
                    distance or None,
                    cardio_kr,
                )
                st.rerun()

# ---------------------------------------------------------------------------
# Quick-hit and meditation
# ---------------------------------------------------------------------------

with tab_habits:
    left, right = st.columns(2)
    with left:
        st.subheader("5-minute Quick-Hit")
        st.caption(f"Streak: {la.rotation.quick_hit_streak} days")
        for ex in QUICK_HIT_EXERCISES:
            st.write(f"- {QUICK_HIT_TARGET_REPS} {ex.name}")
        qh_kr = _kr_select("Link to Key Result (optional)", ActivitySource.QUICK_HIT, "qh_kr")
        _timer_display(SessionKind.QUICK_HIT)
        _session_controls(
            SessionKind.QUICK_HIT, "qh", on_start=lambda: la.start_quick_hit(qh_kr)
        )
    with right:
        st.subheader("15-minute Meditation")
        st.link_button("Open playlist", la.playlist_url)
        _timer_display(SessionKind.MEDITATION)
        _session_controls(SessionKind.MEDITATION, "med")

# ---------------------------------------------------------------------------
# Nutrition
# ---------------------------------------------------------------------------

with tab_food:
    totals = la.logs.daily_nutrition_totals()
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Calories", f"{totals['calories']:.0f}")
    c2.metric("Protein", f"{totals['protein_grams']:.0f} g")
    c3.metric("Carbs", f"{totals['carb_grams']:.0f} g")
    c4.metric("Fat", f"{totals['fat_grams']:.0f} g")

    meal_kr = _kr_select("Link to Key Result (optional)", ActivitySource.MEAL, "meal_kr")
    if la.gemini.is_configured:
        description = st.text_area("Describe your meal")
        if st.button("Analyze & log"):
            with st.spinner("Analyzing..."):
                result = la.analyze_and_log_meal(description, meal_kr)
            if result.error:
                st.error(result.error)
            else:
                st.success(f"Logged {result.value.meal_name}: {result.value.calories:g} kcal")
    else:
        st.info("AI meal analysis disabled. Log meals manually below.")

    with st.expander("Log manually"):
        with st.form("manual_meal", clear_on_submit=True):
            meal_name = st.text_input("Meal")
            kcal = st.number_input("Calories", min_value=0, value=0)
            protein = st.number_input("Protein (g)", min_value=0, value=0)
            carbs = st.number_input("Carbs (g)", min_value=0, value=0)
            fat = st.number_input("Fat (g)", min_value=0, value=0)
            if st.form_submit_button("Add meal"):
                la.add_meal(
                    MealAnalysis(
                        meal_name=meal_name or None,
                        calories=float(kcal),
                        protein_grams=float(protein),
                        carb_grams=float(carbs),
                        fat_grams=float(fat),
                        linked_kr_id=meal_kr,
                    )
                )
                st.rerun()

    for meal in la.logs.meals_for_day():
        st.write(f"{meal.meal_name or 'Meal'}: {meal.calories or 0:g} kcal")

# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------

with tab_goals:
    with st.form("new_objective", clear_on_submit=True):
        title = st.text_input("New objective")
        if st.form_submit_button("Add objective"):
            _run(la.add_objective, title, la.current_quarter_view)
            st.rerun()

    for obj in la.key_results.objectives_for_quarter(la.current_quarter_view):
        with st.expander(obj.title, expanded=True):
            for kr in obj.key_results:
                st.progress(kr.fraction_complete, text=f"{kr.description}: {kr.current_value:g}/{kr.target_value:g} {kr.unit}")
                c1, c2 = st.columns([4, 1])
                value = c1.number_input(
                    "Set value", value=float(kr.current_value), key=f"set_{kr.id}", label_visibility="collapsed"
                )
                if c2.button("Update", key=f"upd_{kr.id}"):
                    _run(la.set_key_result_value, kr.id, value)
                    st.rerun()
            with st.form(f"kr_{obj.id}", clear_on_submit=True):
                c1, c2, c3 = st.columns(3)
                desc = c1.text_input("Key Result")
                target = c2.number_input("Target", min_value=0.0, value=10.0)
                unit = c3.text_input("Unit", value="sessions")
                if st.form_submit_button("Add Key Result"):
                    _run(la.add_key_result, obj.id, desc, target, unit)
                    st.rerun()
            if st.button("Delete objective", key=f"del_{obj.id}"):
                la.delete_objective(obj.id)
                st.rerun()

# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------

with tab_stats:
    today = date.today()
    st.metric("Total workouts", len(la.logs.workout_logs) + len(la.logs.cardio_logs))
    st.subheader("Daily study hours (30 days)")
    st.bar_chart(daily_study_hours(la.logs.study_logs, today))
    st.subheader("Daily calories")
    st.line_chart(daily_calories(la.logs.meal_logs, today))
    split = macro_split(la.logs.meal_logs)
    if split:
        st.subheader("Average macro split (%)")
        st.bar_chart(pd.Series(split, name="percent"))
    st.subheader("Weekly volume (kg)")
    volume = weekly_volume(la.logs.workout_logs)
    if volume.empty:
        st.caption("No workouts logged yet.")
    else:
        st.line_chart(volume)
    st.subheader("Weekly cardio")
    cardio = weekly_cardio(la.logs.cardio_logs)
    if cardio.empty:
        st.caption("No cardio logged yet.")
    else:
        st.bar_chart(cardio["duration"])
        st.caption(f"Total: {format_duration(cardio['duration'].sum())}")

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

with tab_settings:
    theme = st.selectbox(
        "Theme", list(Theme), index=list(Theme).index(la.theme), format_func=THEME_LABELS.get
    )
    if theme != la.theme:
        la.set_theme(theme)
    url = st.text_input("Meditation playlist URL", value=la.playlist_url)
    equipment = st.text_area("Available equipment", value=la.available_equipment)
    if st.button("Save settings"):
        la.set_playlist_url(url)
        la.set_available_equipment(equipment)
        st.success("Saved.")
    st.caption(f"Data file: {config.STORE_PATH}")
    st.caption(f"Notifications: {la.notifications.permission.value}")
    st.caption(f"Last refresh: {datetime.now():%H:%M:%S}")
