"""Tests for lenient JSON extraction from model replies."""

from __future__ import annotations

from gemini_client.parsing import parse_json_response


class TestParseJsonResponse:
    def test_plain_json(self) -> None:
        assert parse_json_response('{"calories": 350}') == {"calories": 350}

    def test_fenced_json(self) -> None:
        text = '```json\n{"calories": 350, "mealName": "Oats"}\n```'
        assert parse_json_response(text) == {"calories": 350, "mealName": "Oats"}

    def test_bare_fence(self) -> None:
        assert parse_json_response("```\n[1, 2]\n```") == [1, 2]

    def test_surrounding_whitespace(self) -> None:
        assert parse_json_response('  \n {"a": 1} \n') == {"a": 1}

    def test_fenced_invalid_json_returns_none(self) -> None:
        assert parse_json_response("```json\n{calories: lots}\n```") is None

    def test_prose_returns_none(self) -> None:
        assert parse_json_response("I think it has about 300 calories.") is None

    def test_empty_returns_none(self) -> None:
        assert parse_json_response("") is None
        assert parse_json_response(None) is None
