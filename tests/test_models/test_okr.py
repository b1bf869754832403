"""Tests for Objective / KeyResult models and quarter helpers."""

from __future__ import annotations

from datetime import date

import pytest

from life_engine.models.okr import KeyResult, Objective, current_quarter, quarter_options


class TestKeyResult:
    def setup_method(self) -> None:
        self.kr = KeyResult("k1", "Study hours", 500, 100, "hours", "o1")

    def test_fraction_complete(self) -> None:
        assert self.kr.fraction_complete == pytest.approx(0.2)

    def test_zero_target_fraction(self) -> None:
        kr = KeyResult("k", "Broken", 0, 0, "x", "o")
        assert kr.fraction_complete == 0.0

    def test_with_value_clamps_high(self) -> None:
        assert self.kr.with_value(900).current_value == 500

    def test_with_value_clamps_low(self) -> None:
        assert self.kr.with_value(-3).current_value == 0

    def test_with_value_keeps_original(self) -> None:
        self.kr.with_value(200)
        assert self.kr.current_value == 100

    def test_with_value_rejects_nan(self) -> None:
        with pytest.raises(ValueError):
            self.kr.with_value(float("nan"))

    def test_is_complete(self) -> None:
        assert self.kr.with_value(500).is_complete
        assert not self.kr.is_complete

    def test_camel_case_keys(self) -> None:
        data = self.kr.to_dict()
        assert data["targetValue"] == 500
        assert data["objectiveId"] == "o1"

    def test_from_dict_defaults(self) -> None:
        kr = KeyResult.from_dict({"id": "k", "targetValue": "12"})
        assert kr.target_value == 12.0
        assert kr.current_value == 0.0
        assert kr.unit == ""

    def test_from_dict_missing_target_raises(self) -> None:
        with pytest.raises(KeyError):
            KeyResult.from_dict({"id": "k"})


class TestObjective:
    def test_round_trip_keeps_key_result_order(self, objective_factory) -> None:
        obj = objective_factory(
            "o9",
            key_results=(
                ("a", "First", 10, 1, "sessions"),
                ("b", "Second", 20, 2, "km"),
            ),
        )
        restored = Objective.from_dict(obj.to_dict())
        assert restored == obj
        assert [kr.id for kr in restored.key_results] == ["a", "b"]

    def test_find_key_result(self, objective_factory) -> None:
        obj = objective_factory(key_results=(("a", "First", 10, 1, "sessions"),))
        assert obj.find_key_result("a").description == "First"
        assert obj.find_key_result("zzz") is None


class TestQuarters:
    @pytest.mark.parametrize(
        "day, expected",
        [
            (date(2025, 1, 1), "Q1 2025"),
            (date(2025, 3, 31), "Q1 2025"),
            (date(2025, 4, 1), "Q2 2025"),
            (date(2025, 12, 31), "Q4 2025"),
        ],
    )
    def test_current_quarter(self, day, expected) -> None:
        assert current_quarter(day) == expected

    def test_options_start_one_quarter_back(self) -> None:
        opts = quarter_options(date(2025, 2, 10), count=4)
        assert opts == ["Q4 2024", "Q1 2025", "Q2 2025", "Q3 2025"]

    def test_options_cross_year(self) -> None:
        opts = quarter_options(date(2025, 11, 1), count=3)
        assert opts == ["Q3 2025", "Q4 2025", "Q1 2026"]
