"""Device schemas package."""
from .device import (
    DeviceCreate,
    DeviceDetail,
    DeviceListItem,
    DeviceListStats,
    DeviceRead,
    DeviceStatsSummary,
    HealthScoreStats,
    NotificationRead,
    NotifyRequest,
    TelemetryPoint,
    TelemetrySummary,
    TelemetryWindow,
    WarrantyStats,
)

__all__ = [
    "DeviceCreate",
    "DeviceDetail",
    "DeviceListItem",
    "DeviceListStats",
    "DeviceRead",
    "DeviceStatsSummary",
    "HealthScoreStats",
    "NotificationRead",
    "NotifyRequest",
    "TelemetryPoint",
    "TelemetrySummary",
    "TelemetryWindow",
    "WarrantyStats",
]
