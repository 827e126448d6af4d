"""
Device API endpoints.

Provides the fleet listing with filter-scoped stats, fleet summary,
device registration, device detail, telemetry windows and operator
notifications.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_session
from core.exceptions import NotFoundError, ReferentialIntegrityError
from models.model_enum import RiskLevel
from schemas.common import APIResponse, PaginatedResponse, TicketSummary, build_pagination
from schemas.device import (
    DeviceCreate,
    DeviceDetail,
    DeviceListItem,
    DeviceListStats,
    DeviceRead,
    DeviceStatsSummary,
    NotificationRead,
    NotifyRequest,
    TelemetryPoint,
    TelemetryWindow,
)
from services.device_service import DeviceService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=PaginatedResponse[DeviceListItem, DeviceListStats])
async def list_devices(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(
        settings.pagination.default_page_size,
        ge=1,
        le=settings.pagination.max_page_size,
        description="Page size",
    ),
    brand: Optional[str] = Query(None, description="Substring match on device brand"),
    channel: Optional[str] = Query(None, description="Substring match on UDC channel"),
    risk_level: Optional[RiskLevel] = Query(None, alias="riskLevel"),
    health_score: Optional[int] = Query(
        None, alias="healthScore", ge=0, le=100, description="Maximum health score"
    ),
    search: Optional[str] = Query(None, description="Search name, brand or device ID"),
    db: AsyncSession = Depends(get_session),
):
    """
    List devices, riskiest and least healthy first.

    The stats block covers every device matching the filters, not only the
    returned page.
    """
    try:
        devices, total, stats = await DeviceService.list_devices(
            db,
            page=page,
            limit=limit,
            brand=brand,
            channel=channel,
            risk_level=risk_level,
            health_score=health_score,
            search=search,
        )
    except SQLAlchemyError as e:
        logger.error(f"Error fetching devices: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch devices",
        )

    return PaginatedResponse[DeviceListItem, DeviceListStats](
        data=[DeviceListItem.model_validate(d) for d in devices],
        pagination=build_pagination(page, limit, total),
        stats=stats,
    )


@router.get("/stats/summary", response_model=APIResponse[DeviceStatsSummary])
async def get_device_stats(db: AsyncSession = Depends(get_session)):
    """Fleet-wide device statistics."""
    try:
        summary = await DeviceService.get_stats_summary(db)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching device stats: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch device statistics",
        )
    return APIResponse[DeviceStatsSummary](data=summary)


@router.post("", response_model=APIResponse[DeviceRead], status_code=201)
async def create_device(
    device_data: DeviceCreate,
    db: AsyncSession = Depends(get_session),
):
    """
    Register a device for an existing customer.

    - **device_id**: Unique device identifier
    - **customer_id**: Owning customer (must exist)
    - **device_name** / **device_brand**: Required descriptive fields
    """
    try:
        device = await DeviceService.create_device(db, device_data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ReferentialIntegrityError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        logger.error(f"Error creating device: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create device",
        )

    return APIResponse[DeviceRead](
        data=DeviceRead.model_validate(device),
        message="Device created successfully",
    )


@router.get("/{device_id}", response_model=APIResponse[DeviceDetail])
async def get_device(
    device_id: str = Path(..., description="Device business key"),
    db: AsyncSession = Depends(get_session),
):
    """Get a device with its customer, latest tickets and latest telemetry."""
    try:
        device, tickets, telemetry = await DeviceService.get_device_detail(db, device_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching device {device_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch device",
        )

    detail = DeviceDetail.model_validate(device).model_copy(
        update={
            "tickets": [TicketSummary.model_validate(t) for t in tickets],
            "telemetry_data": [TelemetryPoint.model_validate(t) for t in telemetry],
        }
    )
    return APIResponse[DeviceDetail](data=detail)


@router.get("/{device_id}/telemetry", response_model=APIResponse[TelemetryWindow])
async def get_device_telemetry(
    device_id: str,
    hours: int = Query(
        settings.fleet.default_telemetry_hours,
        ge=1,
        le=settings.fleet.max_telemetry_hours,
        description="Window size in hours",
    ),
    db: AsyncSession = Depends(get_session),
):
    """Telemetry samples for the last ``hours`` hours, oldest first."""
    try:
        rows, summary = await DeviceService.get_telemetry(db, device_id, hours)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching telemetry for {device_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch telemetry data",
        )

    return APIResponse[TelemetryWindow](
        data=TelemetryWindow(
            device_id=device_id,
            time_range=f"{hours}h",
            data=[TelemetryPoint.model_validate(r) for r in rows],
            summary=summary,
        )
    )


@router.post("/{device_id}/actions/notify", response_model=APIResponse[NotificationRead])
async def notify_device(
    device_id: str,
    request: NotifyRequest,
    db: AsyncSession = Depends(get_session),
):
    """
    Send a notification about a device.

    - **message**: Notification text (required)
    - **priority**: LOW, MEDIUM or HIGH (default MEDIUM)
    - **recipients**: Recipient addresses
    """
    try:
        notification = await DeviceService.notify_device(db, device_id, request)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        logger.error(f"Error sending notification for {device_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send notification",
        )

    return APIResponse[NotificationRead](
        data=notification,
        message="Notification sent successfully",
    )
