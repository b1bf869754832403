"""Objectives and Key Results (OKR): quarterly goals and their measurable targets."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass(frozen=True)
class KeyResult:
    """A quantitative sub-goal of an Objective.

    ``unit`` is free text ("hours", "kg volume", "grams protein"); activity
    dispatch classifies it by case-insensitive substring match.
    Invariant: ``0 <= current_value <= target_value``.
    """

    id: str
    description: str
    target_value: float
    current_value: float
    unit: str
    objective_id: str

    @property
    def fraction_complete(self) -> float:
        if self.target_value <= 0:
            return 0.0
        return self.current_value / self.target_value

    @property
    def is_complete(self) -> bool:
        return self.current_value >= self.target_value

    def with_value(self, value: float) -> KeyResult:
        """Return a copy with *value* clamped into ``[0, target_value]``."""
        if not math.isfinite(value):
            raise ValueError(f"KR value must be finite, got {value!r}")
        clamped = min(max(value, 0.0), self.target_value)
        return dataclasses.replace(self, current_value=clamped)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "targetValue": self.target_value,
            "currentValue": self.current_value,
            "unit": self.unit,
            "objectiveId": self.objective_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KeyResult:
        return cls(
            id=data["id"],
            description=data.get("description", ""),
            target_value=float(data["targetValue"]),
            current_value=float(data.get("currentValue", 0)),
            unit=data.get("unit", ""),
            objective_id=data.get("objectiveId", ""),
        )


@dataclass(frozen=True)
class Objective:
    """A quarterly goal owning an ordered tuple of Key Results."""

    id: str
    title: str
    quarter: str  # e.g. "Q3 2025"
    key_results: tuple[KeyResult, ...] = field(default_factory=tuple)

    def find_key_result(self, kr_id: str) -> KeyResult | None:
        for kr in self.key_results:
            if kr.id == kr_id:
                return kr
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "quarter": self.quarter,
            "keyResults": [kr.to_dict() for kr in self.key_results],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Objective:
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            quarter=data.get("quarter", ""),
            key_results=tuple(
                KeyResult.from_dict(kr) for kr in data.get("keyResults", [])
            ),
        )


def current_quarter(today: date | None = None) -> str:
    """Quarter label for *today*, e.g. ``"Q3 2025"``."""
    today = today or date.today()
    return f"Q{(today.month - 1) // 3 + 1} {today.year}"


def quarter_options(today: date | None = None, count: int = 8) -> list[str]:
    """Selectable quarter labels starting one quarter before *today*."""
    today = today or date.today()
    # Quarter index counted from year 0 makes stepping across years trivial.
    start = today.year * 4 + (today.month - 1) // 3 - 1
    return [f"Q{q % 4 + 1} {q // 4}" for q in range(start, start + count)]
