"""
Health check endpoints for monitoring.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_session
from schemas.health import DetailedHealthReport, HealthReport
from services.health_service import HealthService

router = APIRouter()


@router.get("", response_model=HealthReport)
async def health_check(db: AsyncSession = Depends(get_session)):
    """
    Basic health report.

    Healthy when the database answers a ping, degraded otherwise.
    """
    return await HealthService.get_health(db)


@router.get("/detailed", response_model=DetailedHealthReport)
async def detailed_health_check(db: AsyncSession = Depends(get_session)):
    """Per-dependency checks for api, database, disk and external services."""
    return await HealthService.get_detailed_health(db)
