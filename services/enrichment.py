# services/enrichment.py
"""
Profile enrichment: extract structured fields from free-form text.

Every path returns an EnrichmentResult. Failures (timeout, network errors,
bad model output) produce a placeholder that keeps the original text in
`about` and explains the problem in `notes`.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass

from ai.profile_parser import parse_profile_response
from ai.prompts import PROFILE_EXTRACTION
from api.app.config import get_settings
from services.openai_llm import extract_json

logger = logging.getLogger(__name__)

EMPTY_INPUT_NOTE = "input was empty"
FAILURE_NOTE_PREFIX = "AI enrichment failed: "


@dataclass
class EnrichmentResult:
    name: str | None = None
    age: int | None = None
    height: int | None = None
    weight: int | None = None
    measurements: str | None = None
    about: str | None = None
    notes: str | None = None
    failed: bool = False

    def as_update(self) -> dict:
        """Column values to write onto a profile row."""
        values = asdict(self)
        values.pop("failed")
        return values


def _describe(exc: BaseException) -> str:
    if isinstance(exc, asyncio.TimeoutError):
        return "request timed out"
    message = str(exc).strip()
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


def failed_result(text: str, exc: BaseException) -> EnrichmentResult:
    return EnrichmentResult(about=text, notes=f"{FAILURE_NOTE_PREFIX}{_describe(exc)}", failed=True)


async def enrich_profile_text(text: str, timeout: float | None = None) -> EnrichmentResult:
    """Extract name, age, height, weight, measurements and about from `text`."""
    if not text or not text.strip():
        return EnrichmentResult(about=text, notes=EMPTY_INPUT_NOTE)

    if timeout is None:
        timeout = get_settings().enrichment_timeout_seconds

    try:
        raw = await asyncio.wait_for(extract_json(PROFILE_EXTRACTION, text), timeout=timeout)
        fields = parse_profile_response(raw)
    except Exception as exc:
        logger.warning("Enrichment failed for %d chars of text: %s", len(text), _describe(exc))
        return failed_result(text, exc)

    return EnrichmentResult(**fields)
