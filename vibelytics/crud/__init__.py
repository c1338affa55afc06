# CRUD operations package

from vibelytics.crud.base import CRUDBase
from vibelytics.crud.user import CRUDUser, user
from vibelytics.crud.mood import CRUDMood, mood
from vibelytics.crud.weather import CRUDWeatherSnapshot, weather_snapshot

__all__ = [
    "CRUDBase",
    "CRUDUser", "user",
    "CRUDMood", "mood",
    "CRUDWeatherSnapshot", "weather_snapshot",
]
