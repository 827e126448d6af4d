"""
Device service.

Handles device listing with fleet stats, device detail and telemetry
windows, device registration and operator notifications.
"""
import logging
import uuid
from datetime import timedelta
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.decorators import (
    critical_database_operation,
    log_database_operation,
    transactional_database_operation,
)
from core.exceptions import NotFoundError, ReferentialIntegrityError
from core.metrics import track_device_registered, track_notification_sent
from db.models import Device, TelemetryData, Ticket, utc_now
from models.model_enum import RiskLevel, SystemEventType
from repositories import (
    CustomerRepository,
    DeviceRepository,
    TelemetryRepository,
    TicketRepository,
)
from schemas.device import (
    DeviceCreate,
    DeviceListStats,
    DeviceStatsSummary,
    HealthScoreStats,
    NotificationRead,
    NotifyRequest,
    TelemetrySummary,
    WarrantyStats,
)
from services.aggregation import format_average, mean, round_average, to_distribution
from services.system_event_service import SystemEventService

logger = logging.getLogger(__name__)

TELEMETRY_METRICS = ("temperature", "cpu_usage", "memory_usage", "disk_usage", "power_consumption")


def _online_since():
    return utc_now() - timedelta(minutes=settings.fleet.online_window_minutes)


class DeviceService:
    """Service for device queries and device actions."""

    @staticmethod
    @critical_database_operation("list_devices")
    @log_database_operation("device listing", level="debug")
    async def list_devices(
        db: AsyncSession,
        *,
        page: int = 1,
        limit: int = 20,
        brand: Optional[str] = None,
        channel: Optional[str] = None,
        risk_level: Optional[RiskLevel] = None,
        health_score: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Device], int, DeviceListStats]:
        """
        List devices matching the filters, one page at a time.

        Stats are computed over the whole filtered set, not the page.

        Returns:
            Tuple of (devices, total matching, stats)
        """
        conditions = DeviceRepository.build_conditions(
            brand=brand,
            channel=channel,
            risk_level=risk_level,
            health_score=health_score,
            search=search,
        )
        devices, total = await DeviceRepository.find_page(
            db, conditions=conditions, page=page, limit=limit
        )

        now = utc_now()
        warranty_until = now + timedelta(days=settings.fleet.warranty_window_days)

        online = await DeviceRepository.count(
            db, conditions=conditions + [DeviceRepository.online_condition(_online_since())]
        )
        avg_health = await DeviceRepository.aggregate(
            db, func.avg, Device.health_score, conditions=conditions
        )
        warranty_expiring = await DeviceRepository.count(
            db,
            conditions=conditions
            + [DeviceRepository.warranty_expiring_condition(now, warranty_until)],
        )
        risk_rows = await DeviceRepository.group_counts(
            db, Device.risk_level, conditions=conditions
        )

        stats = DeviceListStats(
            total=total,
            online=online,
            avg_health_score=round_average(avg_health),
            warranty_expiring=warranty_expiring,
            risk_distribution=to_distribution(risk_rows),
        )
        return devices, total, stats

    @staticmethod
    @critical_database_operation("get_device")
    @log_database_operation("device retrieval", level="debug")
    async def get_device(db: AsyncSession, device_id: str) -> Device:
        """Get a device by its device_id or raise NotFoundError."""
        device = await DeviceRepository.find_by_key(db, device_id)
        if device is None:
            raise NotFoundError("Device not found")
        return device

    @staticmethod
    @critical_database_operation("get_device_detail")
    @log_database_operation("device detail retrieval", level="debug")
    async def get_device_detail(
        db: AsyncSession, device_id: str
    ) -> Tuple[Device, List[Ticket], List[TelemetryData]]:
        """
        Get a device with its latest tickets and telemetry samples.

        Returns:
            Tuple of (device, latest tickets, latest telemetry)
        """
        device = await DeviceRepository.find_by_key(db, device_id)
        if device is None:
            raise NotFoundError("Device not found")

        tickets = await TicketRepository.find_latest(
            db,
            conditions=[Ticket.device_id == device_id],
            order_by=Ticket.created_at.desc(),
            limit=settings.fleet.detail_related_limit,
        )
        telemetry = await TelemetryRepository.find_latest(
            db,
            conditions=[TelemetryData.device_id == device_id],
            order_by=TelemetryData.timestamp.desc(),
            limit=settings.fleet.detail_telemetry_limit,
        )
        return device, tickets, telemetry

    @staticmethod
    @critical_database_operation("get_device_telemetry")
    @log_database_operation("device telemetry retrieval", level="debug")
    async def get_telemetry(
        db: AsyncSession, device_id: str, hours: int
    ) -> Tuple[List[TelemetryData], TelemetrySummary]:
        """
        Telemetry samples from the last ``hours`` hours, oldest first,
        with per-metric averages.
        """
        device = await DeviceRepository.find_by_key(db, device_id)
        if device is None:
            raise NotFoundError("Device not found")

        since = utc_now() - timedelta(hours=hours)
        rows = await TelemetryRepository.find_all(
            db, conditions=TelemetryRepository.window_conditions(device_id, since)
        )

        averages = {
            f"avg_{metric}": format_average(mean([getattr(row, metric) for row in rows]))
            for metric in TELEMETRY_METRICS
        }
        return rows, TelemetrySummary(**averages)

    @staticmethod
    @transactional_database_operation("create_device")
    @log_database_operation("device registration", level="debug")
    async def create_device(db: AsyncSession, device_data: DeviceCreate) -> Device:
        """
        Register a device for an existing customer and log a DEVICE event.

        Raises:
            NotFoundError: customer does not exist
            ReferentialIntegrityError: device_id already taken
        """
        customer = await CustomerRepository.find_by_key(db, device_data.customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")

        if await DeviceRepository.find_by_key(db, device_data.device_id) is not None:
            raise ReferentialIntegrityError("Device with this device_id already exists")

        values = device_data.model_dump()
        values["risk_level"] = RiskLevel(device_data.risk_level).value
        device = Device(**values)
        db.add(device)
        await db.commit()

        await SystemEventService.record_event(
            db,
            event_type=SystemEventType.DEVICE,
            title="Device Registered",
            message=f"Device {device.device_name} registered for customer {customer.name}",
            details=f"{device.device_brand} ({device.device_id})",
            severity=device.risk_level,
            source="DEVICE_REGISTRY",
            metadata={"device_id": device.device_id, "customer_id": customer.customer_id},
        )

        track_device_registered(device.risk_level)
        logger.info(f"Device registered: {device.device_id} for {customer.customer_id}")
        return await DeviceRepository.find_by_key(db, device.device_id)

    @staticmethod
    @transactional_database_operation("notify_device")
    @log_database_operation("device notification", level="info")
    async def notify_device(
        db: AsyncSession, device_id: str, request: NotifyRequest
    ) -> NotificationRead:
        """
        Send an operator notification about a device.

        Delivery is recorded as an ALERT system event; there is no outbound
        transport.
        """
        device = await DeviceRepository.find_by_key(db, device_id)
        if device is None:
            raise NotFoundError("Device not found")

        sent_at = utc_now()
        priority = request.priority.value
        await SystemEventService.record_event(
            db,
            event_type=SystemEventType.ALERT,
            title="Device Notification Sent",
            message=f"Notification sent for device {device.device_name}",
            details=request.message,
            severity=priority,
            source="NOTIFICATION_SYSTEM",
            metadata={
                "device_id": device.device_id,
                "recipients": request.recipients,
                "timestamp": sent_at.isoformat() + "Z",
            },
        )

        track_notification_sent(priority)
        return NotificationRead(
            id=f"NOTIF-{uuid.uuid4().hex[:10].upper()}",
            device_id=device.device_id,
            device_name=device.device_name,
            customer=device.customer.name if device.customer else None,
            message=request.message,
            priority=priority,
            recipients=request.recipients,
            status="sent",
            sent_at=sent_at,
        )

    @staticmethod
    @critical_database_operation("device_stats_summary")
    @log_database_operation("device stats summary", level="debug")
    async def get_stats_summary(db: AsyncSession) -> DeviceStatsSummary:
        """Fleet-wide device statistics."""
        now = utc_now()
        warranty_until = now + timedelta(days=settings.fleet.warranty_window_days)

        total = await DeviceRepository.count(db)
        online = await DeviceRepository.count(
            db, conditions=[DeviceRepository.online_condition(_online_since())]
        )

        risk_rows = await DeviceRepository.group_counts(db, Device.risk_level)
        brand_rows = await DeviceRepository.group_counts(db, Device.device_brand)
        channel_rows = await DeviceRepository.group_counts(db, Device.udc_channel)

        avg_health = await DeviceRepository.aggregate(db, func.avg, Device.health_score)
        min_health = await DeviceRepository.aggregate(db, func.min, Device.health_score)
        max_health = await DeviceRepository.aggregate(db, func.max, Device.health_score)

        # Grouped on the flag, so active + expired == total
        warranty_rows = dict(await DeviceRepository.group_counts(db, Device.warranty_status))
        expiring_soon = await DeviceRepository.count(
            db, conditions=[DeviceRepository.warranty_expiring_condition(now, warranty_until)]
        )

        return DeviceStatsSummary(
            total=total,
            online=online,
            offline=total - online,
            risk_distribution=to_distribution(risk_rows),
            brand_distribution=to_distribution(brand_rows, lowercase=False),
            channel_distribution=to_distribution(channel_rows, lowercase=False),
            health_score_stats=HealthScoreStats(
                average=format_average(avg_health),
                minimum=min_health or 0,
                maximum=max_health or 0,
            ),
            warranty_stats=WarrantyStats(
                active=warranty_rows.get(True, 0),
                expired=warranty_rows.get(False, 0),
                expiring_soon=expiring_soon,
            ),
        )
