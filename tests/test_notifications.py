"""Tests for the permission-gated NotificationCenter."""

from __future__ import annotations

from unittest.mock import MagicMock

from life_engine.models.enums import NotificationPermission
from life_engine.notifications import NotificationCenter


class TestShow:
    def test_granted_sends(self) -> None:
        sender = MagicMock()
        center = NotificationCenter(NotificationPermission.GRANTED, sender=sender)
        assert center.show("Done", "Well done", "tag-1") is True
        sender.assert_called_once_with("Done", "Well done", "tag-1")

    def test_default_is_silent_noop(self, caplog) -> None:
        sender = MagicMock()
        center = NotificationCenter(sender=sender)
        assert center.show("Done") is False
        sender.assert_not_called()
        assert "permission is default" in caplog.text

    def test_denied_is_noop(self) -> None:
        sender = MagicMock()
        center = NotificationCenter(NotificationPermission.DENIED, sender=sender)
        assert center.show("Done") is False
        sender.assert_not_called()


class TestRequestPermission:
    def test_prompt_answer_is_kept(self) -> None:
        center = NotificationCenter(prompt=lambda: NotificationPermission.GRANTED)
        assert center.request_permission() == NotificationPermission.GRANTED
        assert center.permission == NotificationPermission.GRANTED

    def test_without_prompt_becomes_denied(self) -> None:
        assert NotificationCenter().request_permission() == NotificationPermission.DENIED

    def test_final_answer_is_not_asked_again(self) -> None:
        prompt = MagicMock(return_value=NotificationPermission.GRANTED)
        center = NotificationCenter(NotificationPermission.DENIED, prompt=prompt)
        assert center.request_permission() == NotificationPermission.DENIED
        prompt.assert_not_called()
