"""
Business logic services.
"""
from .analytics_service import AnalyticsService
from .customer_service import CustomerService
from .device_service import DeviceService
from .health_service import HealthService
from .system_event_service import SystemEventService
from .ticket_service import TicketService

__all__ = [
    "AnalyticsService",
    "CustomerService",
    "DeviceService",
    "HealthService",
    "SystemEventService",
    "TicketService",
]
