"""Life Architect core: OKR progress, points, habit rotation and timed sessions."""

from life_engine.controller import LifeArchitect
from life_engine.store import JsonFileStore, MemoryStore, PersistentStore

__all__ = ["JsonFileStore", "LifeArchitect", "MemoryStore", "PersistentStore"]
