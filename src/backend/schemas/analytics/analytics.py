"""Analytics schemas for the dashboard, trends and predictions."""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import Field

from core.schema_base import HTTPSchemaModel
from db.models import utc_now


class DashboardOverview(HTTPSchemaModel):
    total_devices: int
    devices_online: int
    total_tickets: int
    active_tickets: int
    total_customers: int
    avg_health_score: str


class DashboardDevices(HTTPSchemaModel):
    risk_distribution: Dict[str, int]
    brand_distribution: Dict[str, int]
    channel_distribution: Dict[str, int]
    health_score_distribution: Dict[str, int]


class TicketActivity(HTTPSchemaModel):
    created: int
    resolved: int
    avg_resolution_time: str


class DailyTicketTrend(HTTPSchemaModel):
    """One day of ticket counters taken from the daily rollups."""

    date: str
    total: int
    open: int
    resolved: int


class DashboardTickets(HTTPSchemaModel):
    status_distribution: Dict[str, int]
    priority_distribution: Dict[str, int]
    recent_activity: TicketActivity
    trends: List[DailyTicketTrend]


class DashboardCustomers(HTTPSchemaModel):
    support_level_distribution: Dict[str, int]
    total_device_count: int
    avg_devices_per_customer: str


class DashboardAlerts(HTTPSchemaModel):
    critical: int
    warnings: int
    warranty_expiring: int


class DashboardData(HTTPSchemaModel):
    """Dashboard aggregates computed from stored rows."""

    overview: DashboardOverview
    devices: DashboardDevices
    tickets: DashboardTickets
    customers: DashboardCustomers
    alerts: DashboardAlerts


class DashboardResponse(HTTPSchemaModel):
    success: bool = True
    data: DashboardData
    time_range: str
    generated_at: datetime = Field(default_factory=utc_now)


class TrendsResponse(HTTPSchemaModel):
    """Synthetic trend series; point fields depend on the metric."""

    success: bool = True
    data: List[Dict[str, Any]]
    metric: str
    time_range: str
    generated_at: datetime = Field(default_factory=utc_now)


class PredictionsResponse(HTTPSchemaModel):
    """Synthetic predictions, one entry per day ahead."""

    success: bool = True
    data: List[Dict[str, Any]]
    type: str
    horizon: str
    generated_at: datetime = Field(default_factory=utc_now)
