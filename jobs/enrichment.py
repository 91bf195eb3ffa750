# jobs/enrichment.py
"""
Background enrichment of a freshly submitted profile.

Runs after the HTTP response has been sent. One attempt per submission:
no retries, no backoff. The profile row is updated with a plain UPDATE,
so an admin edit that lands in between is overwritten (last write wins).
"""
from __future__ import annotations

import logging
import uuid

from db.session import session_scope
from services.enrichment import enrich_profile_text
from services.profile_store import apply_enrichment, write_notes

logger = logging.getLogger(__name__)

CRITICAL_NOTE_PREFIX = "Critical background enrichment failure: "


async def run_profile_enrichment(profile_id: uuid.UUID, text: str) -> None:
    if not text or not text.strip():
        logger.info("Skipping enrichment for profile %s: empty text", profile_id)
        return

    trace_id = uuid.uuid4().hex
    logger.info("trace=%s start ENRICH_PROFILE profile=%s", trace_id, profile_id)

    try:
        result = await enrich_profile_text(text)
        values = result.as_update()
        if values["about"] is None:
            values["about"] = text

        async with session_scope() as db:
            found = await apply_enrichment(db, profile_id, values)

        if not found:
            logger.warning("trace=%s profile %s no longer exists, enrichment discarded", trace_id, profile_id)
        elif result.failed:
            logger.info("trace=%s enrichment failed for profile %s, notes updated", trace_id, profile_id)
        else:
            logger.info("trace=%s profile %s enriched", trace_id, profile_id)

    except Exception as exc:
        logger.exception("trace=%s CRITICAL error enriching profile %s", trace_id, profile_id)
        try:
            async with session_scope() as db:
                await write_notes(db, profile_id, f"{CRITICAL_NOTE_PREFIX}{exc}")
        except Exception as db_exc:
            logger.error(
                "trace=%s FAILED to record critical error for profile %s: %s",
                trace_id, profile_id, db_exc,
            )
