# services/profile_store.py
"""
Data access for profiles and their media.

All functions take an AsyncSession and leave committing to the caller,
except where noted.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models.media_item import MediaItem
from models.profile import EDITABLE_FIELDS, Profile, utcnow

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "date": Profile.created_at,
    "name": Profile.name,
    "age": Profile.age,
    "height": Profile.height,
    "weight": Profile.weight,
}


async def create_profile(
    db: AsyncSession,
    user_name: str,
    raw_text: str,
    chat_id: int | None = None,
    media: list[tuple[str, str]] | None = None,
) -> Profile:
    """Insert a profile with its media rows. `media` is a list of (kind, locator)."""
    profile = Profile(
        user_name=user_name,
        chat_id=chat_id,
        raw_text=raw_text,
        about=raw_text,
        media=[MediaItem(kind=kind, locator=locator) for kind, locator in (media or [])],
    )
    db.add(profile)
    await db.flush()
    logger.info("Created profile %s with %d media items", profile.id, len(profile.media))
    return profile


async def get_profile(db: AsyncSession, profile_id: uuid.UUID) -> Profile | None:
    return await db.get(Profile, profile_id)


async def list_profiles(
    db: AsyncSession,
    search: str | None = None,
    sort: str = "date",
    order: str = "desc",
) -> list[Profile]:
    """All profiles with media; newest first unless another sort is requested."""
    column = SORT_COLUMNS[sort]
    stmt = select(Profile)

    if search and search.strip():
        term = search.strip()
        # literal substring: % and _ in the term are escaped
        stmt = stmt.where(
            or_(
                Profile.name.icontains(term, autoescape=True),
                Profile.user_name.icontains(term, autoescape=True),
                Profile.about.icontains(term, autoescape=True),
            )
        )

    direction = column.asc() if order == "asc" else column.desc()
    stmt = stmt.order_by(column.is_(None), direction, Profile.created_at.desc())

    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_profile(db: AsyncSession, profile: Profile, values: dict) -> Profile:
    """Replace the editable fields of a profile. Unknown keys are ignored."""
    for field in EDITABLE_FIELDS:
        setattr(profile, field, values.get(field))
    await db.flush()
    logger.info("Updated profile %s", profile.id)
    return profile


async def delete_profile(db: AsyncSession, profile_id: uuid.UUID) -> list[str] | None:
    """
    Delete a profile and its media rows.

    Returns the locators of the deleted media so the caller can remove the
    blobs once the transaction has committed, or None if the id is unknown.
    """
    profile = await db.get(Profile, profile_id)
    if profile is None:
        return None

    locators = [m.locator for m in profile.media]
    await db.delete(profile)
    await db.flush()
    logger.info("Deleted profile %s (%d media items)", profile_id, len(locators))
    return locators


async def apply_enrichment(db: AsyncSession, profile_id: uuid.UUID, values: dict) -> bool:
    """
    Overwrite the enrichment columns with a single UPDATE statement.

    No row lock is taken: whichever write reaches the database last wins.
    Returns False if the profile no longer exists.
    """
    stmt = (
        update(Profile)
        .where(Profile.id == profile_id)
        .values(**{k: values.get(k) for k in EDITABLE_FIELDS})
    )
    result = await db.execute(stmt)
    return result.rowcount > 0


async def write_notes(db: AsyncSession, profile_id: uuid.UUID, notes: str) -> bool:
    stmt = update(Profile).where(Profile.id == profile_id).values(notes=notes)
    result = await db.execute(stmt)
    return result.rowcount > 0


async def profile_stats(db: AsyncSession, now: datetime | None = None) -> dict:
    """Counts for the admin dashboard: total, since midnight UTC, last 7 days."""
    now = now or utcnow()
    midnight = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    week_ago = now - timedelta(days=7)

    stmt = select(
        func.count(Profile.id),
        func.count(Profile.id).filter(Profile.created_at >= midnight),
        func.count(Profile.id).filter(Profile.created_at >= week_ago),
    )
    total, today, last_week = (await db.execute(stmt)).one()
    return {"total": total, "today": today, "last_week": last_week}
