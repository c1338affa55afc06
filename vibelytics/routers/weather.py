"""
Weather router.

This module contains the current-weather endpoint backed by the per-user
snapshot cache, and the snapshot history endpoint.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from vibelytics.config import settings
from vibelytics.database import get_db
from vibelytics.dependencies.auth import get_current_user
from vibelytics.models.user import User
from vibelytics.schemas.base import ListResponse
from vibelytics.schemas.weather import CurrentWeatherResponse, WeatherSnapshot as WeatherSnapshotSchema
from vibelytics.services import weather_cache
from vibelytics.services.nws import NWSClient, get_weather_provider

router = APIRouter(
    prefix="/weather",
    tags=["weather"],
    responses={401: {"description": "Unauthorized"}},
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@router.get("/current", response_model=CurrentWeatherResponse)
@limiter.limit("100/minute")
async def get_current_weather(
    request: Request,
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Latitude"),
    lon: Optional[float] = Query(None, ge=-180, le=180, description="Longitude"),
    db: AsyncSession = Depends(get_db),
    provider: NWSClient = Depends(get_weather_provider),
    current_user: User = Depends(get_current_user),
):
    """
    Get current weather for the authenticated user.

    Served from the user's last snapshot when it is less than an hour old
    (``cached: true``); otherwise fetched from the National Weather Service.

    Raises:
        UpstreamUnavailable: The weather provider failed
    """
    snapshot, cached = await weather_cache.get_current_weather(
        db, provider, user_id=current_user.id, latitude=lat, longitude=lon
    )
    return CurrentWeatherResponse(
        data=WeatherSnapshotSchema.model_validate(snapshot),
        cached=cached,
    )


@router.get("/history", response_model=ListResponse[WeatherSnapshotSchema])
@limiter.limit("100/minute")
async def get_weather_history(
    request: Request,
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Get the user's weather snapshots, newest first.
    """
    history = await weather_cache.get_weather_history(db, user_id=current_user.id, limit=limit)
    return ListResponse[WeatherSnapshotSchema](
        data=[WeatherSnapshotSchema.model_validate(s) for s in history],
        count=len(history),
    )
