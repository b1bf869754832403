"""Lenient JSON extraction from model responses."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

# Whole response wrapped in a ``` or ```json fence.
_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)


def parse_json_response(text: str | None) -> Any | None:
    """Parse a JSON value out of *text*.

    Tries the content of a surrounding code fence first, then the raw text.
    Returns None when neither parses; never raises.
    """
    if not text:
        return None
    candidate = text.strip()
    match = _FENCE_RE.match(candidate)
    if match and match.group(1):
        candidate = match.group(1).strip()
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse JSON response: %s", exc)
    try:
        return json.loads(text.strip())
    except json.JSONDecodeError as exc:
        logger.warning("Raw JSON parse also failed: %s", exc)
        return None
