# api/app/dependencies.py
from __future__ import annotations

from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncSession

from db.session import get_db
from services.media_storage import MediaStorage, build_media_storage


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_db():
        yield session


@lru_cache
def get_media_storage() -> MediaStorage:
    """Media backend shared by all requests."""
    return build_media_storage()
