"""High-level Gemini client facade.

``generate`` raises from the ``GeminiClientError`` hierarchy; callers that
must never fail use ``generate_text``, which folds every failure into a
``TextResult`` carrying an error message. No retries are attempted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import google.generativeai as genai

from gemini_client.exceptions import (
    GeminiAPIError,
    GeminiBlockedError,
    GeminiClientError,
    GeminiNotConfigured,
)

logger = logging.getLogger(__name__)

_DEFAULT_MODEL = "gemini-1.5-flash"
_DEFAULT_TIMEOUT_S = 30
_PLACEHOLDER_KEYS = frozenset({"", "YOUR_API_KEY"})


@dataclass(frozen=True)
class TextResult:
    """Either generated text or an error message."""

    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.text is not None


class GeminiClient:
    """Facade for text generation with the Gemini API."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = _DEFAULT_MODEL,
        timeout_s: int = _DEFAULT_TIMEOUT_S,
    ) -> None:
        self._model_name = model
        self._timeout_s = timeout_s
        self._configured = (api_key or "") not in _PLACEHOLDER_KEYS
        if self._configured:
            genai.configure(api_key=api_key)
            logger.info("Gemini client configured for model %s", model)
        else:
            logger.warning("Gemini API key not configured; AI features disabled")
        self._model_factory = genai.GenerativeModel

    @classmethod
    def from_model_factory(cls, factory: Any, model: str = _DEFAULT_MODEL) -> "GeminiClient":
        """Construct around an existing ``GenerativeModel``-compatible factory.

        Used by tests and by callers that manage ``genai`` configuration
        themselves.
        """
        obj = cls.__new__(cls)
        obj._model_name = model
        obj._timeout_s = _DEFAULT_TIMEOUT_S
        obj._configured = True
        obj._model_factory = factory
        return obj

    @property
    def is_configured(self) -> bool:
        return self._configured

    @property
    def model_name(self) -> str:
        return self._model_name

    def generate(
        self,
        prompt: str,
        wants_json: bool = False,
        system_instruction: str | None = None,
    ) -> str:
        """Generate text for *prompt*.

        When *wants_json* is set the model is asked for an
        ``application/json`` response.
        """
        if not self._configured:
            raise GeminiNotConfigured("AI service not configured. Check GEMINI_API_KEY.")

        generation_config: dict[str, Any] = {}
        if wants_json:
            generation_config["response_mime_type"] = "application/json"

        try:
            model = self._model_factory(
                model_name=self._model_name,
                system_instruction=system_instruction,
            )
            response = model.generate_content(
                prompt,
                generation_config=generation_config or None,
                request_options={"timeout": self._timeout_s},
            )
        except Exception as exc:
            status = getattr(exc, "code", None) or getattr(exc, "status_code", None)
            raise GeminiAPIError(f"API Error: {exc}", status_code=_as_int(status)) from exc

        return _extract_text(response)

    def generate_text(
        self,
        prompt: str,
        wants_json: bool = False,
        system_instruction: str | None = None,
    ) -> TextResult:
        """Like ``generate`` but never raises for service failures."""
        try:
            text = self.generate(prompt, wants_json, system_instruction)
        except GeminiClientError as exc:
            logger.warning("Gemini request failed: %s", exc)
            return TextResult(error=str(exc))
        return TextResult(text=text)


def _as_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _extract_text(response: Any) -> str:
    """Pull the text out of a response, mapping blocked/empty replies to errors."""
    try:
        text = response.text
    except ValueError as exc:
        # The SDK raises ValueError from .text when no valid part came back.
        if _finish_reason(response) == "SAFETY":
            raise GeminiBlockedError("Response blocked due to safety concerns.") from exc
        raise GeminiBlockedError("No text content in response.") from exc
    if not text:
        raise GeminiBlockedError("No text content in response.")
    return text


def _finish_reason(response: Any) -> str | None:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    reason = getattr(candidates[0], "finish_reason", None)
    return getattr(reason, "name", None) or (str(reason) if reason is not None else None)
