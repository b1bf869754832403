"""Gemini text-generation client. Every call to the AI service goes through here."""

from gemini_client.client import GeminiClient, TextResult
from gemini_client.exceptions import (
    GeminiAPIError,
    GeminiBlockedError,
    GeminiClientError,
    GeminiNotConfigured,
)
from gemini_client.parsing import parse_json_response

__all__ = [
    "GeminiAPIError",
    "GeminiBlockedError",
    "GeminiClient",
    "GeminiClientError",
    "GeminiNotConfigured",
    "TextResult",
    "parse_json_response",
]
