# api/app/schemas/profile.py
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MediaItemResponse(BaseModel):
    type: str = Field(validation_alias="kind")
    url: str = Field(validation_alias="locator")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ProfileResponse(BaseModel):
    id: uuid.UUID
    date: datetime = Field(validation_alias="created_at")
    user_name: str
    chat_id: int | None = None
    name: str | None = None
    age: int | None = None
    height: int | None = None
    weight: int | None = None
    measurements: str | None = None
    about: str | None = None
    notes: str | None = None
    raw_text: str
    media: list[MediaItemResponse] = []

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ProfileUpdate(BaseModel):
    """Full replacement of the editable fields; omitted fields become null."""

    name: str | None = None
    age: int | None = None
    height: int | None = None
    weight: int | None = None
    measurements: str | None = None
    about: str | None = None
    notes: str | None = None


class ProfileStats(BaseModel):
    total: int
    today: int
    last_week: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
