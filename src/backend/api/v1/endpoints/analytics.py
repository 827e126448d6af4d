"""
Analytics API endpoints: dashboard aggregates, trends and predictions.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_session
from models.model_enum import PredictionHorizon, PredictionType, TimeRange, TrendMetric
from schemas.analytics import DashboardResponse, PredictionsResponse, TrendsResponse
from services.analytics_service import AnalyticsService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    time_range: TimeRange = Query(TimeRange.LAST_24_HOURS, alias="timeRange"),
    db: AsyncSession = Depends(get_session),
):
    """
    Dashboard analytics.

    - **timeRange**: 24h, 7d, 30d or 90d (default 24h); scopes ticket
      activity and the daily ticket trend
    """
    try:
        data = await AnalyticsService.get_dashboard(db, time_range)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching analytics data: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch analytics data",
        )
    return DashboardResponse(data=data, time_range=time_range.value)


@router.get("/trends", response_model=TrendsResponse)
async def get_trends(
    metric: TrendMetric = Query(..., description="devices, tickets, health or performance"),
    time_range: TimeRange = Query(TimeRange.LAST_7_DAYS, alias="timeRange"),
):
    """Trend series for one metric family."""
    return TrendsResponse(
        data=AnalyticsService.get_trends(metric, time_range),
        metric=metric.value,
        time_range=time_range.value,
    )


@router.get("/predictions", response_model=PredictionsResponse)
async def get_predictions(
    prediction_type: PredictionType = Query(PredictionType.DEVICE_FAILURE, alias="type"),
    horizon: PredictionHorizon = Query(PredictionHorizon.SEVEN_DAYS),
):
    """Predictions for each day in the horizon."""
    return PredictionsResponse(
        data=AnalyticsService.get_predictions(prediction_type, horizon),
        type=prediction_type.value,
        horizon=horizon.value,
    )
