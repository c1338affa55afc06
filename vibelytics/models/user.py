"""
User database model.

This module contains the User model holding local and federated identities.
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from vibelytics.models.base import BaseModel


class User(BaseModel):
    """
    User account.

    ``hashed_password`` is empty for accounts created through Google sign-in
    only. ``google_id`` is unique when present so concurrent first sign-ins
    for the same Google account cannot create two rows.
    """

    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=True)
    google_id = Column(String(255), unique=True, index=True, nullable=True)

    moods = relationship("MoodEntry", back_populates="user", cascade="all, delete-orphan")
    weather_snapshots = relationship(
        "WeatherSnapshot", back_populates="user", cascade="all, delete-orphan"
    )
