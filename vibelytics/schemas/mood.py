"""
Mood journal schemas.
"""

from typing import Optional

from pydantic import Field

from vibelytics.schemas.base import BaseSchema, IDSchema, TimestampSchema, UTCDateTime


class MoodCreate(BaseSchema):
    """
    Body of ``POST /mood/today``.

    ``mood`` is checked against the closed set by the journal itself so that
    an unknown label surfaces as InvalidMood.
    """
    mood: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)


class MoodEntry(IDSchema, TimestampSchema):
    """Mood entry as returned to clients."""
    user_id: int
    mood: str
    date: UTCDateTime
    notes: str = ""
