"""
Mood journal operations.

Moods are validated against the closed MoodLabel set before an entry is
built, and every accepted log becomes a new row.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from vibelytics.core.exceptions import InvalidMood
from vibelytics.crud.mood import mood as mood_crud
from vibelytics.models.mood import MoodEntry, MoodLabel
from vibelytics.utils.dates import as_utc, utcnow
from vibelytics.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_RANGE = timedelta(days=7)
DEFAULT_RANGE_LIMIT = 168  # one entry per hour for a week
VALID_MOODS = tuple(label.value for label in MoodLabel)


@dataclass(frozen=True)
class MoodValidation:
    """Success carries ``label``; failure carries ``error``."""

    label: Optional[MoodLabel] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.label is not None


def validate_mood_label(value: Optional[str]) -> MoodValidation:
    """
    Check a raw mood label against the closed set.

    Labels are matched exactly; no case folding or trimming is applied.
    """
    if value is None or value == "":
        return MoodValidation(error="Mood is required")
    try:
        return MoodValidation(label=MoodLabel(value))
    except ValueError:
        return MoodValidation(error=f"Mood must be one of: {', '.join(VALID_MOODS)}")


async def log_mood(
    db: AsyncSession,
    *,
    user_id: int,
    mood: Optional[str],
    notes: Optional[str] = None,
) -> MoodEntry:
    """
    Append a mood entry timestamped now.

    Raises:
        InvalidMood: If ``mood`` is missing or not in the closed set
    """
    validation = validate_mood_label(mood)
    if not validation.ok:
        raise InvalidMood(validation.error)

    entry = await mood_crud.create(
        db,
        obj_in={
            "user_id": user_id,
            "mood": validation.label.value,
            "notes": (notes or "").strip(),
            "date": utcnow(),
        },
    )
    logger.info(f"User {user_id} logged mood '{entry.mood}' (entry {entry.id})")
    return entry


async def get_latest_mood(db: AsyncSession, *, user_id: int) -> Optional[MoodEntry]:
    """Most recent entry for the user, or None when nothing has been logged."""
    return await mood_crud.get_latest_for_user(db, user_id=user_id)


async def get_mood_range(
    db: AsyncSession,
    *,
    user_id: int,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    limit: int = DEFAULT_RANGE_LIMIT,
) -> List[MoodEntry]:
    """
    Entries within ``[start, end]``, newest first, at most ``limit``.

    A missing ``end`` means now; a missing ``start`` means seven days
    before ``end``.
    """
    end = as_utc(end) or utcnow()
    start = as_utc(start) or end - DEFAULT_RANGE
    return await mood_crud.get_in_date_range(
        db, user_id=user_id, start_date=start, end_date=end, limit=limit
    )
