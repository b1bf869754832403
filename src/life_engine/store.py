"""Persistent key-value store for application state.

Every tracked field lives under its own key and is written immediately when
its owner changes; there is no batching. Two backends are provided: a JSON
file on disk and an in-memory dict (tests, ephemeral sessions).
"""

from __future__ import annotations

import copy
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from life_engine.exceptions import StorageError

logger = logging.getLogger(__name__)


class StoreKey:
    """Names of the persisted keys."""

    THEME = "theme"
    POINTS = "points"
    STUDY_HOURS = "study_hours"
    STUDY_SESSION_LOGS = "study_session_logs"
    COMPLETED_ACTIVITIES = "completed_activities"
    GYM_DAY_INDEX = "gym_day_index"
    WORKOUT_LOGS = "workout_logs"
    CARDIO_LOGS = "cardio_logs"
    QUICK_HIT_STREAK = "quick_hit_streak"
    LAST_QUICK_HIT_DATE = "last_quick_hit_date"
    PLAYLIST_URL = "playlist_url"
    AVAILABLE_EQUIPMENT = "available_equipment"
    DAILY_NUTRITION = "daily_nutrition"
    OBJECTIVES = "objectives"


class PersistentStore(ABC):
    """Key-value store of JSON-compatible values."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for *key*, or *default* if absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key* and persist it immediately."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    def get_int(self, key: str, default: int = 0) -> int:
        """Read an integer, falling back to *default* on unparseable data."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-integer value for %s: %r", key, value)
            return default

    def get_float(self, key: str, default: float = 0.0) -> float:
        value = self.get(key)
        if value is None:
            return default
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric value for %s: %r", key, value)
            return default

    def get_list(self, key: str) -> list:
        value = self.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning("Ignoring non-list value for %s", key)
            return []
        return value


class MemoryStore(PersistentStore):
    """Dict-backed store. Values are deep-copied on the way in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._lock = threading.RLock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._data)


class JsonFileStore(PersistentStore):
    """Store backed by a single JSON document on disk.

    The file is read once at construction. Each ``set`` rewrites the file
    through a temporary sibling and an atomic rename, so a crash mid-write
    leaves the previous document intact. Write failures raise
    ``StorageError``; the in-memory copy keeps the new value, so the current
    session stays consistent even though the change is not durable.
    Session ticks write from a scheduler thread, so every access holds one
    lock; a write and its flush never interleave with another.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._data: dict[str, Any] = self._read()
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)
            self._flush(key)

    def delete(self, key: str) -> None:
        with self._lock:
            if self._data.pop(key, None) is not None:
                self._flush(key)

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            logger.info("No store at %s, starting empty", self._path)
            return {}
        try:
            with open(self._path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read store {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Store {self._path} is not a JSON object")
        logger.info("Loaded %d keys from %s", len(data), self._path)
        return data

    def _flush(self, key: str) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w") as f:
                json.dump(self._data, f, indent=2)
            os.replace(tmp, self._path)
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Failed to persist {key}: {exc}", key=key) from exc
        logger.debug("Persisted %s to %s", key, self._path)
