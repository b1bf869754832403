"""Custom exception hierarchy for the Gemini client."""

from __future__ import annotations


class GeminiClientError(Exception):
    """Base exception for all gemini_client errors."""


class GeminiNotConfigured(GeminiClientError):
    """No usable API key; AI features are disabled."""


class GeminiAPIError(GeminiClientError):
    """The Gemini API call failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GeminiBlockedError(GeminiAPIError):
    """The response was withheld by safety filtering or came back empty."""
