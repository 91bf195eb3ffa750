# services/media_storage.py
"""
Blob storage for uploaded profile media.

`save` returns an opaque locator that is stored on the media row and handed
to the client; `delete` takes that same locator back.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from threading import Lock

import boto3
from botocore.client import Config

from api.app.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _object_name(filename: str | None) -> str:
    suffix = PurePosixPath(filename or "").suffix.lower()
    return f"media-{uuid.uuid4().hex}{suffix}"


class MediaStorage(ABC):
    @abstractmethod
    async def save(self, content: bytes, filename: str | None, content_type: str | None) -> str:
        ...

    @abstractmethod
    async def delete(self, locator: str) -> None:
        ...


class LocalMediaStorage(MediaStorage):
    """Stores files on local disk; locators look like `/uploads/media-<hex>.jpg`."""

    def __init__(self, root: str | Path, url_prefix: str = "/uploads") -> None:
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def path_for(self, locator: str) -> Path:
        name = PurePosixPath(locator).name
        if not name or name in (".", ".."):
            raise ValueError(f"Not a media locator: {locator!r}")
        return self.root / name

    async def save(self, content: bytes, filename: str | None, content_type: str | None) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        name = _object_name(filename)
        path = self.root / name
        await asyncio.to_thread(path.write_bytes, content)
        logger.info("Stored %d bytes at %s", len(content), path)
        return f"{self.url_prefix}/{name}"

    async def delete(self, locator: str) -> None:
        path = self.path_for(locator)
        await asyncio.to_thread(path.unlink)
        logger.info("Deleted media file %s", path)


class S3MediaStorage(MediaStorage):
    """Stores files in an S3 bucket; locators are public object URLs."""

    _client = None
    _lock = Lock()

    def __init__(self, settings: Settings) -> None:
        if not settings.s3_bucket_name:
            raise ValueError("S3_BUCKET_NAME is required for the s3 media backend")
        self.settings = settings
        self.bucket = settings.s3_bucket_name
        self.base_url = (
            settings.s3_public_base_url
            or f"https://{self.bucket}.s3.{settings.aws_region}.amazonaws.com"
        ).rstrip("/")

    def client(self):
        cls = type(self)
        if cls._client is None:
            with cls._lock:
                if cls._client is None:
                    cls._client = boto3.client(
                        "s3",
                        aws_access_key_id=self.settings.aws_access_key_id,
                        aws_secret_access_key=self.settings.aws_secret_access_key,
                        region_name=self.settings.aws_region,
                        config=Config(signature_version="s3v4"),
                    )
        return cls._client

    def key_for(self, locator: str) -> str:
        prefix = f"{self.base_url}/"
        if not locator.startswith(prefix):
            raise ValueError(f"Locator does not belong to bucket {self.bucket}: {locator!r}")
        return locator[len(prefix):]

    async def save(self, content: bytes, filename: str | None, content_type: str | None) -> str:
        key = f"profiles/{_object_name(filename)}"
        await asyncio.to_thread(
            self.client().put_object,
            Bucket=self.bucket,
            Key=key,
            Body=content,
            ContentType=content_type or "application/octet-stream",
        )
        logger.info("Uploaded %d bytes to s3://%s/%s", len(content), self.bucket, key)
        return f"{self.base_url}/{key}"

    async def delete(self, locator: str) -> None:
        key = self.key_for(locator)
        await asyncio.to_thread(self.client().delete_object, Bucket=self.bucket, Key=key)
        logger.info("Deleted s3://%s/%s", self.bucket, key)


def build_media_storage(settings: Settings | None = None) -> MediaStorage:
    settings = settings or get_settings()
    if settings.media_backend == "s3":
        return S3MediaStorage(settings)
    if settings.media_backend != "local":
        raise ValueError(f"Unknown media backend: {settings.media_backend}")
    return LocalMediaStorage(settings.media_dir, settings.media_url_prefix)


async def delete_media_best_effort(storage: MediaStorage, locators: list[str]) -> int:
    """Delete blobs, logging failures instead of raising. Returns the number deleted."""
    deleted = 0
    for locator in locators:
        try:
            await storage.delete(locator)
            deleted += 1
        except Exception as exc:
            logger.warning("Failed to delete media %s: %s", locator, exc)
    return deleted
