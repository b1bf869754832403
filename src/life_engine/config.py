"""Environment-variable-based configuration."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path

STORE_PATH: Path = Path(
    os.environ.get("LIFE_ARCHITECT_STORE", "~/.life_architect/store.json")
).expanduser()
GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY", "")
GEMINI_MODEL: str = os.environ.get("GEMINI_MODEL", "gemini-1.5-flash")
GEMINI_TIMEOUT: int = int(os.environ.get("GEMINI_TIMEOUT", "30"))
STUDY_TARGET_HOURS: float = float(os.environ.get("STUDY_TARGET_HOURS", "500"))
STUDY_DEADLINE: date = date.fromisoformat(os.environ.get("STUDY_DEADLINE", "2025-08-01"))
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

DEFAULT_PLAYLIST_URL: str = "https://open.spotify.com/playlist/5gR4gv2XglaEFg2D2zbd8A"
DEFAULT_EQUIPMENT: str = (
    "Standard gym equipment (barbells, dumbbells, machines, cables, pull-up bar)"
)
