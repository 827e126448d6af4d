"""
Database models package.

Re-exports the table models so callers can import them from ``db``.
"""
from .models import (
    Analytics,
    Customer,
    Device,
    SystemEvent,
    TableModel,
    TelemetryData,
    Ticket,
    TicketTelemetry,
    utc_now,
)

__all__ = [
    "Analytics",
    "Customer",
    "Device",
    "SystemEvent",
    "TableModel",
    "TelemetryData",
    "Ticket",
    "TicketTelemetry",
    "utc_now",
]
