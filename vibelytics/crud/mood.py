"""
Mood journal CRUD operations.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from vibelytics.crud.base import CRUDBase
from vibelytics.models.mood import MoodEntry
from vibelytics.schemas.mood import MoodCreate


class CRUDMood(CRUDBase[MoodEntry, MoodCreate]):
    """
    CRUD operations for MoodEntry model.
    """

    async def get_latest_for_user(
        self, db: AsyncSession, *, user_id: int
    ) -> Optional[MoodEntry]:
        """
        Get the most recently timestamped entry for a user.

        Args:
            db: Database session
            user_id: Owner of the entries

        Returns:
            Latest MoodEntry or None
        """
        result = await db.execute(
            select(MoodEntry)
            .where(MoodEntry.user_id == user_id)
            .order_by(desc(MoodEntry.date), desc(MoodEntry.id))
            .limit(1)
        )
        return result.scalars().first()

    async def get_in_date_range(
        self,
        db: AsyncSession,
        *,
        user_id: int,
        start_date: datetime,
        end_date: datetime,
        limit: int = 168
    ) -> List[MoodEntry]:
        """
        Get entries within ``[start_date, end_date]``, newest first.

        Args:
            db: Database session
            user_id: Owner of the entries
            start_date: Inclusive lower bound
            end_date: Inclusive upper bound
            limit: Maximum number of records to return

        Returns:
            List of MoodEntry instances
        """
        result = await db.execute(
            select(MoodEntry)
            .where(
                and_(
                    MoodEntry.user_id == user_id,
                    MoodEntry.date >= start_date,
                    MoodEntry.date <= end_date
                )
            )
            .order_by(desc(MoodEntry.date), desc(MoodEntry.id))
            .limit(limit)
        )
        return list(result.scalars().all())


mood = CRUDMood(MoodEntry)
