"""Device schemas for listing, detail, telemetry and notifications."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from core.schema_base import HTTPSchemaModel
from models.model_enum import RiskLevel, TicketPriority
from schemas.common.summary import CustomerSummary, TicketSummary


class DeviceBase(HTTPSchemaModel):
    """Descriptive device fields shared by create and read schemas."""

    device_name: str = Field(..., min_length=1, max_length=255)
    device_brand: str = Field(..., min_length=1, max_length=100)
    device_manufacturer: Optional[str] = None
    device_family: Optional[str] = None
    device_modeltype: Optional[str] = None
    device_subbrand: Optional[str] = None
    device_bios_version: Optional[str] = None
    device_purchase_date: Optional[datetime] = None
    os_name: Optional[str] = None
    os_version: Optional[str] = None
    os_language: Optional[str] = None
    os_country: Optional[str] = None
    udc_channel: Optional[str] = None
    warranty_status: bool = False
    warranty_expiry_date: Optional[datetime] = None
    temperature: Optional[float] = None
    cpu_usage: Optional[float] = None
    memory_usage: Optional[float] = None
    disk_usage: Optional[float] = None
    power_consumption: Optional[float] = None


class DeviceCreate(DeviceBase):
    """Schema for registering a device."""

    device_id: str = Field(..., min_length=1, max_length=50)
    customer_id: str = Field(..., min_length=1, max_length=50)
    health_score: int = Field(default=100, ge=0, le=100)
    risk_level: RiskLevel = RiskLevel.LOW
    last_seen: Optional[datetime] = None


class DeviceRead(DeviceBase):
    """Schema for reading device data."""

    id: int
    device_id: str
    customer_id: str
    health_score: int
    risk_level: str
    last_seen: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class DeviceListItem(DeviceRead):
    """Device row in list responses, with its owning customer."""

    customer: Optional[CustomerSummary] = None


class TelemetryPoint(HTTPSchemaModel):
    """One telemetry sample."""

    timestamp: datetime
    temperature: Optional[float] = None
    cpu_usage: Optional[float] = None
    memory_usage: Optional[float] = None
    disk_usage: Optional[float] = None
    power_consumption: Optional[float] = None


class DeviceDetail(DeviceListItem):
    """Single device with its latest tickets and telemetry."""

    tickets: List[TicketSummary] = Field(default_factory=list)
    telemetry_data: List[TelemetryPoint] = Field(default_factory=list)


class DeviceListStats(HTTPSchemaModel):
    """Stats block over the filtered device set."""

    total: int
    online: int
    avg_health_score: int
    warranty_expiring: int
    risk_distribution: Dict[str, int]


class TelemetrySummary(HTTPSchemaModel):
    """Averages over a telemetry window, as fixed-point strings."""

    avg_temperature: str = "0"
    avg_cpu_usage: str = "0"
    avg_memory_usage: str = "0"
    avg_disk_usage: str = "0"
    avg_power_consumption: str = "0"


class TelemetryWindow(HTTPSchemaModel):
    """Telemetry for one device over the requested window."""

    device_id: str
    time_range: str
    data: List[TelemetryPoint]
    summary: TelemetrySummary


class NotifyRequest(HTTPSchemaModel):
    """Body for POST /devices/{device_id}/actions/notify."""

    message: str = Field(..., min_length=1, max_length=500)
    priority: TicketPriority = TicketPriority.MEDIUM
    recipients: List[str] = Field(default_factory=list)


class NotificationRead(HTTPSchemaModel):
    """Result of a device notification."""

    id: str
    device_id: str
    device_name: str
    customer: Optional[str] = None
    message: str
    priority: str
    recipients: List[str]
    status: str
    sent_at: datetime


class HealthScoreStats(HTTPSchemaModel):
    average: str
    minimum: int
    maximum: int


class WarrantyStats(HTTPSchemaModel):
    active: int
    expired: int
    expiring_soon: int


class DeviceStatsSummary(HTTPSchemaModel):
    """Fleet-wide device summary."""

    total: int
    online: int
    offline: int
    risk_distribution: Dict[str, int]
    brand_distribution: Dict[str, int]
    channel_distribution: Dict[str, int]
    health_score_stats: HealthScoreStats
    warranty_stats: WarrantyStats
