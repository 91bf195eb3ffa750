# ai/profile_parser.py
"""
Turn a raw model response into profile fields.

The payload is untrusted: every field is checked against its expected type
and replaced with None when it does not match.

  '```json\\n{"name": "Маша", "age": 21}\\n```'  → {"name": "Маша", "age": 21, ...}
  '[{"name": "Маша"}]'                          → {"name": "Маша", ...}
  '{"age": "21"}'                                → {"age": None, ...}
"""
from __future__ import annotations

import json
import math
import re
from typing import Any

TEXT_FIELDS = ("name", "measurements", "about", "notes")
NUMBER_FIELDS = ("age", "height", "weight")

_FENCE_RE = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)


class ProfileParseError(ValueError):
    """Raised when a model response cannot be read as a JSON object."""


def strip_code_fence(raw: str) -> str:
    text = raw.strip()
    match = _FENCE_RE.match(text)
    if match and match.group(2):
        text = match.group(2).strip()
    return text


def _as_text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _as_number(value: Any) -> int | None:
    # bool is an int subclass; "true" is not an age
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return round(value)
    return value


def coerce_profile_fields(data: dict[str, Any]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for key in TEXT_FIELDS:
        fields[key] = _as_text(data.get(key))
    for key in NUMBER_FIELDS:
        fields[key] = _as_number(data.get(key))
    return fields


def parse_profile_response(raw: str | None) -> dict[str, Any]:
    """Parse a model response into a dict of profile fields."""
    if raw is None or not raw.strip():
        raise ProfileParseError("model returned an empty response")

    payload = strip_code_fence(raw)
    try:
        decoded = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ProfileParseError(f"response is not valid JSON: {exc}") from exc

    if isinstance(decoded, list):
        decoded = decoded[0] if decoded else None

    if not isinstance(decoded, dict):
        raise ProfileParseError("parsed JSON is not an object")

    return coerce_profile_fields(decoded)
