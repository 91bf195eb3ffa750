# models/media_item.py
from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, UUIDPrimaryKey


def media_kind_for(content_type: str | None) -> str:
    """Derive the media kind from a declared upload content type."""
    if content_type and content_type.lower().startswith("image"):
        return "image"
    return "video"


class MediaItem(Base, UUIDPrimaryKey):
    __tablename__ = "media_items"

    profile_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind: Mapped[str] = mapped_column("type", String(10), nullable=False)  # image | video
    locator: Mapped[str] = mapped_column("url", Text, nullable=False)

    profile = relationship("Profile", back_populates="media")
