# services/submission.py
"""
Synchronous half of a profile submission: validate, store blobs, insert rows.

The profile and its media rows are committed together. If anything fails,
the transaction is rolled back and blobs already written for the request
are removed (best effort, since blob storage is outside the database).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from api.app.config import get_settings
from models.media_item import media_kind_for
from models.profile import Profile
from services.media_storage import MediaStorage, delete_media_best_effort
from services.profile_store import create_profile

logger = logging.getLogger(__name__)


class SubmissionValidationError(ValueError):
    """The submission is missing something the submitter can fix."""


@dataclass
class MediaUpload:
    content: bytes
    filename: str | None = None
    content_type: str | None = None


def parse_chat_id(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        return int(value.strip())
    except ValueError:
        raise SubmissionValidationError("chatId must be a number") from None


def validate_submission(
    raw_text: str,
    user_name: str | None,
    uploads: list[MediaUpload],
    max_files: int | None = None,
    max_bytes: int | None = None,
) -> None:
    settings = get_settings()
    max_files = settings.max_media_files if max_files is None else max_files
    max_bytes = settings.max_media_bytes if max_bytes is None else max_bytes

    if not raw_text.strip() and not uploads:
        raise SubmissionValidationError("Provide the profile text or attach at least one media file.")
    if not user_name or not user_name.strip():
        raise SubmissionValidationError("Missing required field: userName")
    if len(uploads) > max_files:
        raise SubmissionValidationError(f"Too many media files: at most {max_files} are allowed.")
    for upload in uploads:
        if len(upload.content) > max_bytes:
            raise SubmissionValidationError(
                f"Media file {upload.filename or 'upload'} exceeds the {max_bytes // (1024 * 1024)} MB limit."
            )


async def submit_profile(
    db: AsyncSession,
    storage: MediaStorage,
    user_name: str | None,
    raw_text: str | None = "",
    chat_id: str | None = None,
    uploads: list[MediaUpload] | None = None,
) -> Profile:
    """Validate and persist a submission. Commits on success."""
    raw_text = raw_text or ""
    uploads = uploads or []

    validate_submission(raw_text, user_name, uploads)
    parsed_chat_id = parse_chat_id(chat_id)

    stored: list[str] = []
    try:
        media: list[tuple[str, str]] = []
        for upload in uploads:
            locator = await storage.save(upload.content, upload.filename, upload.content_type)
            stored.append(locator)
            media.append((media_kind_for(upload.content_type), locator))

        profile = await create_profile(
            db,
            user_name=user_name.strip(),
            raw_text=raw_text,
            chat_id=parsed_chat_id,
            media=media,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        if stored:
            removed = await delete_media_best_effort(storage, stored)
            logger.warning("Submission rolled back; removed %d/%d stored media files", removed, len(stored))
        raise

    return profile
