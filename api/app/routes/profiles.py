# api/app/routes/profiles.py
from __future__ import annotations

import logging
import uuid
from typing import Literal

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from api.app.dependencies import get_media_storage, get_session
from api.app.schemas.profile import ProfileResponse, ProfileStats, ProfileUpdate
from jobs.enrichment import run_profile_enrichment
from services.media_storage import MediaStorage, delete_media_best_effort
from services.profile_store import (
    delete_profile,
    get_profile,
    list_profiles,
    profile_stats,
    update_profile,
)
from services.submission import MediaUpload, SubmissionValidationError, submit_profile

logger = logging.getLogger(__name__)

router = APIRouter(tags=["profiles"])


@router.get("/profiles", response_model=list[ProfileResponse])
async def get_profiles(
    q: str | None = None,
    sort: Literal["date", "name", "age", "height", "weight"] = "date",
    order: Literal["asc", "desc"] = "desc",
    db: AsyncSession = Depends(get_session),
):
    """List profiles with their media, newest first by default."""
    profiles = await list_profiles(db, search=q, sort=sort, order=order)
    return [ProfileResponse.model_validate(p) for p in profiles]


@router.get("/profiles/stats", response_model=ProfileStats)
async def get_profile_stats(db: AsyncSession = Depends(get_session)):
    return ProfileStats(**await profile_stats(db))


@router.post("/profiles", response_model=ProfileResponse, status_code=201)
async def create_profile(
    background_tasks: BackgroundTasks,
    raw_text: str = Form("", alias="rawText"),
    user_name: str | None = Form(None, alias="userName"),
    chat_id: str | None = Form(None, alias="chatId"),
    media: list[UploadFile] | None = File(None),
    db: AsyncSession = Depends(get_session),
    storage: MediaStorage = Depends(get_media_storage),
):
    """
    Store a submission and answer immediately.

    Structured fields are filled in later by the enrichment task, which
    starts only after this response has been sent.
    """
    uploads: list[MediaUpload] = []
    for f in media or []:
        content = await f.read()
        if not f.filename and not content:
            continue
        uploads.append(MediaUpload(content=content, filename=f.filename, content_type=f.content_type))

    try:
        profile = await submit_profile(
            db,
            storage,
            user_name=user_name,
            raw_text=raw_text,
            chat_id=chat_id,
            uploads=uploads,
        )
    except SubmissionValidationError as exc:
        logger.info("Rejected submission: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception:
        logger.exception("Error creating profile")
        raise HTTPException(status_code=500, detail="Server error while creating the profile")

    response = ProfileResponse.model_validate(profile)

    if profile.raw_text.strip():
        background_tasks.add_task(run_profile_enrichment, profile.id, profile.raw_text)

    return response


@router.put("/profiles/{profile_id}", response_model=ProfileResponse)
async def put_profile(
    profile_id: uuid.UUID,
    body: ProfileUpdate,
    db: AsyncSession = Depends(get_session),
):
    profile = await get_profile(db, profile_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    await update_profile(db, profile, body.model_dump())
    await db.commit()
    return ProfileResponse.model_validate(profile)


@router.delete("/profiles/{profile_id}", status_code=204)
async def remove_profile(
    profile_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    storage: MediaStorage = Depends(get_media_storage),
):
    """Delete a profile; media files are removed after the rows are gone."""
    locators = await delete_profile(db, profile_id)
    if locators is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    await db.commit()

    if locators:
        deleted = await delete_media_best_effort(storage, locators)
        logger.info("Profile %s: deleted %d/%d media files", profile_id, deleted, len(locators))

    return Response(status_code=204)
