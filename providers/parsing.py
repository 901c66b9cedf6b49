"""Helpers for pulling structured data out of free-form provider replies."""

import json
import re
from typing import Any, Dict, Optional

from .base import ResponseParseError

_JSON_FENCE = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_ANY_FENCE = re.compile(r"```[a-zA-Z]*\s*(\{.*?\})\s*```", re.DOTALL)


def find_json_text(text: str) -> Optional[str]:
    """Locate the most likely JSON object in a reply.

    Order: a ```json fence, any fence holding an object, then the outermost
    brace span.
    """
    match = _JSON_FENCE.search(text) or _ANY_FENCE.search(text)
    if match:
        return match.group(1).strip()
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return None


def extract_json(text: str) -> Dict[str, Any]:
    """Parse the JSON object embedded in a reply.

    Raises:
        ResponseParseError: If no JSON object can be found or decoded.
    """
    candidate = find_json_text(text or "")
    if candidate is None:
        raise ResponseParseError("No JSON object found in response")
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Invalid JSON in response: {e}") from e
    if not isinstance(data, dict):
        raise ResponseParseError("Expected a JSON object in response")
    return data
