"""System notification collaborator gated by a permission state."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from life_engine.models.enums import NotificationPermission

logger = logging.getLogger(__name__)

NotificationSender = Callable[[str, str, str], None]


def _log_sender(title: str, body: str, tag: str) -> None:
    logger.info("Notification [%s] %s: %s", tag, title, body)


class NotificationCenter:
    """Shows notifications only while permission is granted.

    *sender* performs the actual display (title, body, tag); the default
    writes the notification to the log.
    """

    def __init__(
        self,
        permission: NotificationPermission = NotificationPermission.DEFAULT,
        sender: Optional[NotificationSender] = None,
        prompt: Optional[Callable[[], NotificationPermission]] = None,
    ) -> None:
        self._permission = permission
        self._sender = sender or _log_sender
        self._prompt = prompt

    @property
    def permission(self) -> NotificationPermission:
        return self._permission

    def request_permission(self) -> NotificationPermission:
        """Ask for permission once; a granted or denied answer is final."""
        if self._permission != NotificationPermission.DEFAULT:
            return self._permission
        if self._prompt is None:
            self._permission = NotificationPermission.DENIED
        else:
            self._permission = self._prompt()
        return self._permission

    def show(self, title: str, body: str = "", tag: str = "") -> bool:
        """Display a notification. Returns False without error if not permitted."""
        if self._permission != NotificationPermission.GRANTED:
            logger.warning(
                "Notification permission is %s, not showing %r",
                self._permission.value,
                title,
            )
            return False
        self._sender(title, body, tag)
        return True
