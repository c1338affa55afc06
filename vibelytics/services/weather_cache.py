"""
Per-user weather snapshot cache.

A snapshot younger than the freshness window is served as-is; otherwise
the provider is called once and the result appended to the user's history.
"""

from datetime import timedelta
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from vibelytics.config import settings
from vibelytics.crud.weather import weather_snapshot as weather_crud
from vibelytics.models.weather_snapshot import WeatherSnapshot
from vibelytics.services.nws import NWSClient
from vibelytics.utils.dates import utcnow
from vibelytics.utils.logging_config import get_logger

logger = get_logger(__name__)


async def get_current_weather(
    db: AsyncSession,
    provider: NWSClient,
    *,
    user_id: int,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> Tuple[WeatherSnapshot, bool]:
    """
    Return the user's current weather and whether it came from the cache.

    Raises:
        UpstreamUnavailable: If the provider fails on a cache miss
    """
    now = utcnow()
    window_start = now - timedelta(minutes=settings.WEATHER_CACHE_MINUTES)

    recent = await weather_crud.get_latest_since(db, user_id=user_id, since=window_start)
    if recent:
        logger.debug(f"Weather cache hit for user {user_id} (snapshot {recent.id})")
        return recent, True

    if latitude is None:
        latitude = settings.DEFAULT_LATITUDE
    if longitude is None:
        longitude = settings.DEFAULT_LONGITUDE

    logger.info(f"Weather cache miss for user {user_id}, fetching {latitude},{longitude}")
    reading = await provider.get_current_reading(latitude, longitude)

    snapshot = await weather_crud.create(
        db,
        obj_in={**reading.to_dict(), "user_id": user_id, "date": utcnow()},
    )
    return snapshot, False


async def get_weather_history(
    db: AsyncSession, *, user_id: int, limit: int = 10
) -> List[WeatherSnapshot]:
    """User's snapshots, newest first, at most ``limit``."""
    return await weather_crud.get_history(db, user_id=user_id, limit=limit)
