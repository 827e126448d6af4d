"""
Analytics service.

The dashboard is computed from stored rows. Trends and predictions are
synthetic series generated per request; nothing is persisted for them.
"""
import logging
import random
from datetime import timedelta
from typing import Any, Callable, Dict, List

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.decorators import critical_database_operation, log_database_operation
from db.models import Customer, Device, Ticket, utc_now
from models.model_enum import (
    PredictionHorizon,
    PredictionType,
    RiskLevel,
    TicketStatus,
    TimeRange,
    TrendMetric,
)
from repositories import (
    AnalyticsRepository,
    CustomerRepository,
    DeviceRepository,
    TicketRepository,
)
from schemas.analytics import (
    DailyTicketTrend,
    DashboardAlerts,
    DashboardCustomers,
    DashboardData,
    DashboardDevices,
    DashboardOverview,
    DashboardTickets,
    TicketActivity,
)
from services.aggregation import (
    format_average,
    health_bucket,
    health_distribution,
    mean,
    safe_ratio,
    to_distribution,
)

logger = logging.getLogger(__name__)


def _iso(moment) -> str:
    return moment.isoformat(timespec="milliseconds") + "Z"


def _fixed(low: float, spread: float, digits: int) -> str:
    return f"{random.random() * spread + low:.{digits}f}"


def _device_trend() -> Dict[str, Any]:
    return {
        "online": random.randint(950, 999),
        "offline": random.randint(5, 24),
        "avgHealthScore": _fixed(80, 20, 1),
    }


def _ticket_trend() -> Dict[str, Any]:
    return {
        "created": random.randint(1, 10),
        "resolved": random.randint(1, 8),
        "avgResolutionTime": _fixed(3, 2, 1),
    }


def _health_trend() -> Dict[str, Any]:
    return {
        "avgScore": _fixed(80, 20, 1),
        "criticalDevices": random.randint(1, 5),
        "warningDevices": random.randint(5, 19),
    }


def _performance_trend() -> Dict[str, Any]:
    return {
        "uptime": _fixed(99.5, 0.5, 2),
        "responseTime": random.randint(200, 299),
        "aiAccuracy": _fixed(92, 5, 1),
    }


TREND_GENERATORS: Dict[TrendMetric, Callable[[], Dict[str, Any]]] = {
    TrendMetric.DEVICES: _device_trend,
    TrendMetric.TICKETS: _ticket_trend,
    TrendMetric.HEALTH: _health_trend,
    TrendMetric.PERFORMANCE: _performance_trend,
}


def _failure_prediction() -> Dict[str, Any]:
    return {
        "probability": _fixed(0.05, 0.1, 3),
        "affectedDevices": random.randint(1, 5),
        "confidence": _fixed(0.8, 0.2, 2),
    }


def _volume_prediction() -> Dict[str, Any]:
    return {
        "expectedTickets": random.randint(10, 29),
        "priority": {
            "high": random.randint(1, 5),
            "medium": random.randint(5, 14),
            "low": random.randint(2, 9),
        },
        "confidence": _fixed(0.85, 0.15, 2),
    }


def _maintenance_prediction() -> Dict[str, Any]:
    return {
        "recommendedActions": random.randint(2, 9),
        "urgentMaintenance": random.randint(1, 3),
        "costSavings": random.randint(1000, 5999),
        "confidence": _fixed(0.9, 0.1, 2),
    }


PREDICTION_GENERATORS: Dict[PredictionType, Callable[[], Dict[str, Any]]] = {
    PredictionType.DEVICE_FAILURE: _failure_prediction,
    PredictionType.TICKET_VOLUME: _volume_prediction,
    PredictionType.MAINTENANCE: _maintenance_prediction,
}


class AnalyticsService:
    """Service for dashboard aggregates, trends and predictions."""

    @staticmethod
    @critical_database_operation("analytics_dashboard")
    @log_database_operation("dashboard aggregation", level="debug")
    async def get_dashboard(db: AsyncSession, time_range: TimeRange) -> DashboardData:
        """
        Aggregate devices, tickets, customers and alerts.

        Only ticket activity and the daily trend rows depend on the time
        range; everything else covers all stored rows.
        """
        now = utc_now()
        start = now - timedelta(hours=time_range.hours)
        online_since = now - timedelta(minutes=settings.fleet.online_window_minutes)
        warranty_until = now + timedelta(days=settings.fleet.warranty_window_days)

        # Devices
        total_devices = await DeviceRepository.count(db)
        devices_online = await DeviceRepository.count(
            db, conditions=[DeviceRepository.online_condition(online_since)]
        )
        avg_health = await DeviceRepository.aggregate(db, func.avg, Device.health_score)
        risk_rows = await DeviceRepository.group_counts(db, Device.risk_level)
        brand_rows = await DeviceRepository.group_counts(db, Device.device_brand)
        channel_rows = await DeviceRepository.group_counts(db, Device.udc_channel)

        health = health_distribution([])
        for score, count in await DeviceRepository.group_counts(db, Device.health_score):
            health[health_bucket(score)] += count

        warranty_expiring = await DeviceRepository.count(
            db, conditions=[DeviceRepository.warranty_expiring_condition(now, warranty_until)]
        )

        # Tickets
        closed = [status.value for status in TicketStatus.closed_states()]
        total_tickets = await TicketRepository.count(db)
        active_tickets = await TicketRepository.count(
            db, conditions=[Ticket.status.not_in(closed)]
        )
        status_rows = await TicketRepository.group_counts(db, Ticket.status)
        priority_rows = await TicketRepository.group_counts(db, Ticket.priority)
        created = await TicketRepository.count(db, conditions=[Ticket.created_at >= start])
        spans = await TicketRepository.resolution_spans(db, start)
        avg_hours = mean([(resolved - opened).total_seconds() / 3600 for opened, resolved in spans])

        trend_rows = await AnalyticsRepository.find_since(db, start.date())

        # Customers
        total_customers = await CustomerRepository.count(db)
        support_rows = await CustomerRepository.group_counts(db, Customer.support_level)
        device_count_sum = await CustomerRepository.aggregate(db, func.sum, Customer.device_count)

        risk = dict(risk_rows)
        return DashboardData(
            overview=DashboardOverview(
                total_devices=total_devices,
                devices_online=devices_online,
                total_tickets=total_tickets,
                active_tickets=active_tickets,
                total_customers=total_customers,
                avg_health_score=format_average(avg_health),
            ),
            devices=DashboardDevices(
                risk_distribution=to_distribution(risk_rows),
                brand_distribution=to_distribution(brand_rows, lowercase=False),
                channel_distribution=to_distribution(channel_rows, lowercase=False),
                health_score_distribution=health,
            ),
            tickets=DashboardTickets(
                status_distribution=to_distribution(status_rows),
                priority_distribution=to_distribution(priority_rows),
                recent_activity=TicketActivity(
                    created=created,
                    resolved=len(spans),
                    avg_resolution_time=f"{format_average(avg_hours)}h",
                ),
                trends=[
                    DailyTicketTrend(
                        date=row.date.isoformat(),
                        total=row.total_tickets,
                        open=row.open_tickets,
                        resolved=row.resolved_tickets,
                    )
                    for row in trend_rows
                ],
            ),
            customers=DashboardCustomers(
                support_level_distribution=to_distribution(support_rows),
                total_device_count=device_count_sum or 0,
                avg_devices_per_customer=safe_ratio(device_count_sum, total_customers),
            ),
            alerts=DashboardAlerts(
                critical=risk.get(RiskLevel.HIGH.value, 0),
                warnings=risk.get(RiskLevel.MEDIUM.value, 0),
                warranty_expiring=warranty_expiring,
            ),
        )

    @staticmethod
    def get_trends(metric: TrendMetric, time_range: TimeRange) -> List[Dict[str, Any]]:
        """
        Synthetic trend points, oldest first.

        24 hourly points for 24h, 7 daily points for 7d and 30 daily points
        for anything longer.
        """
        if time_range == TimeRange.LAST_24_HOURS:
            points, step = 24, timedelta(hours=1)
        elif time_range == TimeRange.LAST_7_DAYS:
            points, step = 7, timedelta(days=1)
        else:
            points, step = 30, timedelta(days=1)

        generate = TREND_GENERATORS[TrendMetric(metric)]
        now = utc_now()
        return [
            {"timestamp": _iso(now - step * offset), **generate()}
            for offset in range(points - 1, -1, -1)
        ]

    @staticmethod
    def get_predictions(
        prediction_type: PredictionType, horizon: PredictionHorizon
    ) -> List[Dict[str, Any]]:
        """Synthetic predictions, one per day ahead starting tomorrow."""
        generate = PREDICTION_GENERATORS[PredictionType(prediction_type)]
        today = utc_now().date()
        return [
            {"date": (today + timedelta(days=ahead)).isoformat(), **generate()}
            for ahead in range(1, PredictionHorizon(horizon).days + 1)
        ]
