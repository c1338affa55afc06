# Pydantic schemas package

from vibelytics.schemas.base import (
    BaseSchema, TimestampSchema, IDSchema, DataResponse, ListResponse, UTCDateTime
)
from vibelytics.schemas.auth import (
    User, UserBase, UserCreate, SigninRequest, AuthResponse
)
from vibelytics.schemas.mood import MoodCreate, MoodEntry
from vibelytics.schemas.weather import WeatherSnapshot, CurrentWeatherResponse

__all__ = [
    # Base schemas
    "BaseSchema", "TimestampSchema", "IDSchema",
    "DataResponse", "ListResponse", "UTCDateTime",

    # Auth schemas
    "User", "UserBase", "UserCreate", "SigninRequest", "AuthResponse",

    # Mood schemas
    "MoodCreate", "MoodEntry",

    # Weather schemas
    "WeatherSnapshot", "CurrentWeatherResponse",
]
