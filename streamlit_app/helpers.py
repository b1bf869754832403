"""Utility helpers bridging the Streamlit UI and the life engine.

Pure functions for formatting and labelling; no Streamlit calls here.
"""

from __future__ import annotations

import logging
import random
from datetime import date

from life_engine.models.enums import GymDayType, Theme
from life_engine.models.okr import KeyResult

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_timer(seconds: float | None) -> str:
    """Seconds to 'MM:SS', or 'H:MM:SS' from one hour. e.g. 95 -> '01:35'."""
    if seconds is None or seconds <= 0:
        return "00:00"
    total = int(seconds)
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"


def format_duration(minutes: float) -> str:
    """Convert minutes to human string. e.g. 90.0 -> '1h 30m'."""
    if minutes <= 0:
        return "0m"
    h = int(minutes) // 60
    m = int(minutes) % 60
    if h > 0 and m > 0:
        return f"{h}h {m}m"
    if h > 0:
        return f"{h}h"
    return f"{m}m"


def format_hours(hours: float) -> str:
    return f"{hours:.1f} h"


def kr_label(kr: KeyResult) -> str:
    """Select-box label, e.g. 'Study hours (Target: 500 hours)'."""
    return f"{kr.description} (Target: {kr.target_value:g} {kr.unit})"


# ---------------------------------------------------------------------------
# Color maps
# ---------------------------------------------------------------------------

PROGRESS_COLORS: dict[str, str] = {
    "danger": "#EF4444",
    "accent": "#FDD835",
    "secondary": "#43A047",
}

GYM_DAY_ICONS: dict[GymDayType, str] = {
    GymDayType.PUSH: "🏋️",
    GymDayType.PULL: "🚣",
    GymDayType.LEGS: "🦵",
    GymDayType.CARDIO: "🏃",
}

THEME_LABELS: dict[Theme, str] = {
    Theme.LIGHT: "Light",
    Theme.DARK: "Dark",
    Theme.HIGH_CONTRAST: "High contrast",
}


def progress_color(percent: float) -> str:
    """Traffic-light bucket for a completion percentage."""
    if percent < 33:
        return "danger"
    if percent < 66:
        return "accent"
    return "secondary"


# ---------------------------------------------------------------------------
# Motivation
# ---------------------------------------------------------------------------

QUOTES: tuple[str, ...] = (
    "The secret of getting ahead is getting started.",
    "Discipline is choosing between what you want now and what you want most.",
    "Small daily improvements are the key to staggering long-term results.",
    "You don't have to be great to start, but you have to start to be great.",
    "Success is the sum of small efforts, repeated day in and day out.",
)


def quote_of_the_day(today: date | None = None) -> str:
    """Same quote all day, rotating daily."""
    today = today or date.today()
    return random.Random(today.toordinal()).choice(QUOTES)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
