# tests/conftest.py
from __future__ import annotations

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("DATABASE_AUTO_CREATE", "false")
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("MEDIA_STORAGE_PATH", tempfile.mkdtemp(prefix="profile-media-"))

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import db.engine as db_engine
from db.session import reset_session_factory
from models import Base
from services.media_storage import LocalMediaStorage


@pytest_asyncio.fixture
async def engine(monkeypatch):
    """In-memory SQLite engine installed as the process-wide engine."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(eng.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    monkeypatch.setattr(db_engine, "_engine", eng)
    reset_session_factory()
    yield eng
    reset_session_factory()
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine) -> AsyncSession:
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path) -> LocalMediaStorage:
    return LocalMediaStorage(tmp_path / "media", url_prefix="/uploads")


@pytest.fixture
def fake_llm():
    """Replaces the OpenAI call used by the enrichment service. Returns '{}' unless told otherwise."""
    with patch("services.enrichment.extract_json", new_callable=AsyncMock, return_value="{}") as mock:
        yield mock


@pytest_asyncio.fixture
async def client(engine, storage, fake_llm):
    """Async httpx client using ASGI transport — no live server needed."""
    from api.app.dependencies import get_media_storage
    from api.app.main import app

    app.dependency_overrides[get_media_storage] = lambda: storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
