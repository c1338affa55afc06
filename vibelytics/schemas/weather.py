"""
Weather snapshot schemas.
"""

from typing import Optional

from vibelytics.schemas.base import BaseSchema, IDSchema, TimestampSchema, UTCDateTime


class WeatherSnapshot(IDSchema, TimestampSchema):
    """Weather snapshot as returned to clients."""
    user_id: int
    city: str
    country: str
    temperature: float
    feels_like: Optional[float] = None
    description: str
    main: str
    icon: Optional[str] = None
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    date: UTCDateTime


class CurrentWeatherResponse(BaseSchema):
    """Envelope for ``GET /weather/current``."""
    success: bool = True
    data: WeatherSnapshot
    cached: bool
