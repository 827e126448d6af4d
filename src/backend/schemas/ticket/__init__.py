"""Ticket schemas package."""
from .ticket import (
    TicketCreate,
    TicketRead,
    TicketRecentActivity,
    TicketStatsSummary,
    TicketTelemetryRead,
    TicketUpdate,
    TicketWarrantyStats,
)

__all__ = [
    "TicketCreate",
    "TicketRead",
    "TicketRecentActivity",
    "TicketStatsSummary",
    "TicketTelemetryRead",
    "TicketUpdate",
    "TicketWarrantyStats",
]
