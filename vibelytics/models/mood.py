"""
Mood entry database model.
"""

import enum

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from vibelytics.models.base import BaseModel


class MoodLabel(str, enum.Enum):
    """Closed set of moods a user can log."""

    happy = "happy"
    calm = "calm"
    sad = "sad"
    angry = "angry"
    neutral = "neutral"


class MoodEntry(BaseModel):
    """
    One mood observation.

    Entries are append-only: a user may log any number of moods per hour,
    each one becomes its own row.
    """

    __tablename__ = "moods"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    mood = Column(String(16), nullable=False, comment="One of MoodLabel")
    date = Column(DateTime(timezone=True), nullable=False, comment="Event time (UTC)")
    notes = Column(Text, nullable=False, default="")

    user = relationship("User", back_populates="moods")

    __table_args__ = (
        Index("idx_moods_user_date", "user_id", "date"),
    )

    def __repr__(self):
        return f"<MoodEntry(id={self.id}, user_id={self.user_id}, mood={self.mood}, date={self.date})>"
