# Database models package

from vibelytics.models.base import BaseModel
from vibelytics.models.user import User
from vibelytics.models.mood import MoodEntry, MoodLabel
from vibelytics.models.weather_snapshot import WeatherSnapshot

__all__ = [
    "BaseModel",
    "User",
    "MoodEntry",
    "MoodLabel",
    "WeatherSnapshot",
]

# Configure all mappers after all models are imported
# This resolves bidirectional relationships defined with string references
from sqlalchemy.orm import configure_mappers
configure_mappers()
