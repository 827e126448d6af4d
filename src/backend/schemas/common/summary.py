"""Compact nested shapes embedded in other resources' payloads."""

from datetime import datetime
from typing import Optional

from core.schema_base import HTTPSchemaModel


class CustomerSummary(HTTPSchemaModel):
    """Owning customer as embedded in device and ticket payloads."""

    customer_id: str
    name: str
    support_level: str
    contact: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    account_manager: Optional[str] = None


class DeviceSummary(HTTPSchemaModel):
    """Device as embedded in ticket and customer payloads."""

    device_id: str
    device_name: str
    device_brand: str
    health_score: int
    risk_level: str
    last_seen: Optional[datetime] = None


class TicketSummary(HTTPSchemaModel):
    """Ticket as embedded in device and customer payloads."""

    ticket_id: str
    device_id: str
    issue: str
    status: str
    priority: str
    confidence: int
    assigned_to: Optional[str] = None
    created_at: datetime
