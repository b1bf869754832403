"""Custom exception hierarchy for the life engine."""

from __future__ import annotations


class LifeEngineError(Exception):
    """Base exception for all life_engine errors."""


class ValidationError(LifeEngineError):
    """Input rejected at the boundary before it reached stored state."""


class StorageError(LifeEngineError):
    """The persistent store could not be read or written."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class SessionStateError(LifeEngineError):
    """A session lifecycle transition is not valid from the current state."""
