"""
Mood journal router.

All endpoints require a bearer token.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as SchemaValidationError
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from vibelytics.config import settings
from vibelytics.core.exceptions import ValidationError
from vibelytics.database import get_db
from vibelytics.dependencies.auth import get_current_user
from vibelytics.models.user import User
from vibelytics.schemas.base import DataResponse, ListResponse
from vibelytics.schemas.mood import MoodCreate, MoodEntry as MoodEntrySchema
from vibelytics.services import mood_journal
from vibelytics.utils.dates import as_utc

router = APIRouter(
    prefix="/mood",
    tags=["mood"],
    responses={401: {"description": "Unauthorized"}},
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


async def mood_body(
    request: Request,
    current_user: User = Depends(get_current_user),
) -> MoodCreate:
    """
    Parse the ``POST /mood/today`` body once the caller is authenticated.

    An anonymous caller gets 401 whatever the body contains.
    """
    try:
        payload = await request.json()
    except ValueError as exc:
        raise ValidationError("Request body must be valid JSON") from exc
    try:
        return MoodCreate.model_validate(payload)
    except SchemaValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in exc.errors()]
        ) from exc


@router.get("/today", response_model=DataResponse[MoodEntrySchema])
@limiter.limit("100/minute")
async def get_today_mood(
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Get the most recent mood entry.

    Returns ``data: null`` when nothing has been logged yet.
    """
    entry = await mood_journal.get_latest_mood(db, user_id=current_user.id)
    if entry is None:
        return DataResponse[MoodEntrySchema](data=None, message="No mood logged yet")
    return DataResponse[MoodEntrySchema](data=MoodEntrySchema.model_validate(entry))


@router.post("/today", response_model=DataResponse[MoodEntrySchema])
@limiter.limit("100/minute")
async def add_today_mood(
    request: Request,
    mood_in: MoodCreate = Depends(mood_body),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Log a new mood entry.

    Every call appends a new entry, so a user can log as often as they like.

    Raises:
        InvalidMood: Mood missing or not one of happy, calm, sad, angry, neutral (400)
    """
    entry = await mood_journal.log_mood(
        db, user_id=current_user.id, mood=mood_in.mood, notes=mood_in.notes
    )
    return DataResponse[MoodEntrySchema](
        message="Mood logged successfully",
        data=MoodEntrySchema.model_validate(entry),
    )


@router.get("/range", response_model=ListResponse[MoodEntrySchema])
@limiter.limit("100/minute")
async def get_moods_range(
    request: Request,
    start_date: Optional[datetime] = Query(None, alias="startDate", description="Start date (ISO format)"),
    end_date: Optional[datetime] = Query(None, alias="endDate", description="End date (ISO format)"),
    limit: int = Query(mood_journal.DEFAULT_RANGE_LIMIT, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Get mood entries for a date range, newest first.

    Defaults to the last 7 days when no dates are given.
    """
    if start_date and end_date and as_utc(start_date) > as_utc(end_date):
        raise ValidationError("startDate must not be after endDate")

    entries = await mood_journal.get_mood_range(
        db, user_id=current_user.id, start=start_date, end=end_date, limit=limit
    )
    return ListResponse[MoodEntrySchema](
        data=[MoodEntrySchema.model_validate(e) for e in entries],
        count=len(entries),
    )
