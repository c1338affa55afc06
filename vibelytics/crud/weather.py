"""
Weather snapshot CRUD operations.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from vibelytics.crud.base import CRUDBase
from vibelytics.models.weather_snapshot import WeatherSnapshot
from vibelytics.schemas.weather import WeatherSnapshot as WeatherSnapshotSchema


class CRUDWeatherSnapshot(CRUDBase[WeatherSnapshot, WeatherSnapshotSchema]):
    """
    CRUD operations for WeatherSnapshot model.
    """

    async def get_latest_since(
        self, db: AsyncSession, *, user_id: int, since: datetime
    ) -> Optional[WeatherSnapshot]:
        """
        Get the newest snapshot for a user taken at or after ``since``.

        Args:
            db: Database session
            user_id: Owner of the snapshots
            since: Start of the freshness window

        Returns:
            WeatherSnapshot instance or None
        """
        result = await db.execute(
            select(WeatherSnapshot)
            .where(
                and_(
                    WeatherSnapshot.user_id == user_id,
                    WeatherSnapshot.date >= since
                )
            )
            .order_by(desc(WeatherSnapshot.date), desc(WeatherSnapshot.id))
            .limit(1)
        )
        return result.scalars().first()

    async def get_history(
        self, db: AsyncSession, *, user_id: int, limit: int = 10
    ) -> List[WeatherSnapshot]:
        """
        Get a user's snapshots, newest first.

        Args:
            db: Database session
            user_id: Owner of the snapshots
            limit: Maximum number of records to return

        Returns:
            List of WeatherSnapshot instances
        """
        result = await db.execute(
            select(WeatherSnapshot)
            .where(WeatherSnapshot.user_id == user_id)
            .order_by(desc(WeatherSnapshot.date), desc(WeatherSnapshot.id))
            .limit(limit)
        )
        return list(result.scalars().all())


weather_snapshot = CRUDWeatherSnapshot(WeatherSnapshot)
