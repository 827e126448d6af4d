"""
Analytics repository for the daily rollup rows.
"""
from datetime import date
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Analytics
from repositories.base_repository import BaseRepository


class AnalyticsRepository(BaseRepository[Analytics]):
    """Repository for Analytics rows, keyed by date."""

    model = Analytics
    key_column = "date"

    @classmethod
    async def find_since(cls, db: AsyncSession, start: date) -> List[Analytics]:
        """Rollup rows from ``start`` onwards, oldest first."""
        stmt = select(Analytics).where(Analytics.date >= start).order_by(Analytics.date.asc())
        result = await db.execute(stmt)
        return list(result.scalars().all())
