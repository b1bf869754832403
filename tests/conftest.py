"""Shared test fixtures: in-memory store, manual clock and ticker, sample OKRs."""

from __future__ import annotations

from datetime import date
from typing import Callable

import pytest

from life_engine.ledger import ProgressLedger
from life_engine.models.okr import KeyResult, Objective
from life_engine.store import MemoryStore, StoreKey
from life_engine.timing import Clock, TickHandle, TickScheduler

TODAY = date(2025, 7, 15)  # Q3 2025


class ManualClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.t = start

    def now(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


class _ManualHandle(TickHandle):
    def __init__(self, ticker: "ManualTicker", callback: Callable[[], None]) -> None:
        self._ticker = ticker
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True
        if self in self._ticker.handles:
            self._ticker.handles.remove(self)


class ManualTicker(TickScheduler):
    """Tick scheduler driven by explicit ``fire()`` calls."""

    def __init__(self) -> None:
        self.handles: list[_ManualHandle] = []
        self.started = 0

    def start(self, callback: Callable[[], None], interval_s: float) -> TickHandle:
        handle = _ManualHandle(self, callback)
        self.handles.append(handle)
        self.started += 1
        return handle

    @property
    def active(self) -> int:
        return len(self.handles)

    def fire(self) -> None:
        for handle in list(self.handles):
            handle.callback()


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture
def ledger(store) -> ProgressLedger:
    return ProgressLedger(store)


def make_objective(
    obj_id: str = "o1",
    quarter: str = "Q3 2025",
    key_results: tuple[tuple[str, str, float, float, str], ...] = (),
) -> Objective:
    """Build an Objective from (id, description, target, current, unit) tuples."""
    return Objective(
        id=obj_id,
        title=f"Objective {obj_id}",
        quarter=quarter,
        key_results=tuple(
            KeyResult(
                id=kr_id,
                description=desc,
                target_value=target,
                current_value=current,
                unit=unit,
                objective_id=obj_id,
            )
            for kr_id, desc, target, current, unit in key_results
        ),
    )


@pytest.fixture
def sample_objectives() -> list[Objective]:
    """One objective per quarter-relevant area with assorted units."""
    return [
        make_objective(
            "o_study",
            key_results=(
                ("kr_hours", "Study Hours", 500, 10, "hours"),
                ("kr_minutes", "Focused minutes", 1000, 0, "minutes"),
                ("kr_modules", "Modules finished", 10, 0, "modules"),
            ),
        ),
        make_objective(
            "o_gym",
            key_results=(
                ("kr_volume", "Lift volume", 100000, 0, "kg volume"),
                ("kr_sets", "Total sets", 500, 0, "sets"),
                ("kr_sessions", "Gym sessions", 60, 0, "sessions"),
                ("kr_km", "Run distance", 200, 0, "km"),
                ("kr_cardio_min", "Cardio time", 1000, 0, "min"),
            ),
        ),
        make_objective(
            "o_food",
            key_results=(
                ("kr_protein", "Protein intake", 10000, 0, "grams"),
                ("kr_calories", "Calories tracked", 200000, 0, "calories"),
                ("kr_fiber", "Fiber intake", 1000, 0, "grams"),
            ),
        ),
        make_objective(
            "o_old",
            quarter="Q2 2025",
            key_results=(("kr_old", "Old goal", 10, 10, "sessions"),),
        ),
    ]


@pytest.fixture
def seeded_store(sample_objectives) -> MemoryStore:
    return MemoryStore({StoreKey.OBJECTIVES: [o.to_dict() for o in sample_objectives]})


@pytest.fixture
def objective_factory() -> Callable[..., Objective]:
    return make_objective
