# models/profile.py
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, UUIDPrimaryKey

# Columns written by enrichment and by admin edits.
STRUCTURED_FIELDS = ("name", "age", "height", "weight", "measurements")
EDITABLE_FIELDS = STRUCTURED_FIELDS + ("about", "notes")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Profile(Base, UUIDPrimaryKey):
    __tablename__ = "profiles"

    created_at: Mapped[datetime] = mapped_column(
        "date", DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

    # Submitter identity (immutable)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False)
    chat_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    # Original submission (immutable)
    raw_text: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Structured fields, filled by enrichment or admin edits
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight: Mapped[int | None] = mapped_column(Integer, nullable=True)
    measurements: Mapped[str | None] = mapped_column(String(255), nullable=True)

    about: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)  # admin notes + enrichment diagnostics

    media = relationship(
        "MediaItem",
        back_populates="profile",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
