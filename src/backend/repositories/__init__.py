"""
Repository layer for database operations.

This package contains all data access logic isolated from business logic.
Each repository handles queries for a specific entity.
"""

from repositories.analytics_repository import AnalyticsRepository
from repositories.base_repository import BaseRepository
from repositories.customer_repository import CustomerRepository
from repositories.device_repository import DeviceRepository, TelemetryRepository
from repositories.ticket_repository import TicketRepository, TicketTelemetryRepository

__all__ = [
    "AnalyticsRepository",
    "BaseRepository",
    "CustomerRepository",
    "DeviceRepository",
    "TelemetryRepository",
    "TicketRepository",
    "TicketTelemetryRepository",
]
