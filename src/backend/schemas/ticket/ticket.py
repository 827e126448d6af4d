"""Ticket schemas."""

from datetime import datetime
from typing import Dict, Optional

from pydantic import Field, field_validator

from core.schema_base import HTTPSchemaModel
from models.model_enum import TicketPriority, TicketStatus
from schemas.common.summary import CustomerSummary, DeviceSummary


class TicketTelemetryRead(HTTPSchemaModel):
    """Drive health snapshot attached to a ticket."""

    read_error_rate: Optional[float] = None
    temperature: Optional[float] = None
    reallocated_sectors: Optional[int] = None
    spin_retry_count: Optional[int] = None
    power_on_hours: Optional[int] = None
    smart_status: Optional[str] = None


class TicketCreate(HTTPSchemaModel):
    """Schema for creating a ticket."""

    device_id: str = Field(..., min_length=1, max_length=50)
    customer_id: str = Field(..., min_length=1, max_length=50)
    issue: str = Field(..., min_length=1, max_length=500)
    priority: TicketPriority
    assigned_to: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    confidence: Optional[int] = Field(None, ge=0, le=100)


class TicketUpdate(HTTPSchemaModel):
    """Schema for updating a ticket. Only provided fields are written."""

    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    assigned_to: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None

    @field_validator("status", "priority", "description")
    @classmethod
    def reject_null(cls, v, info):
        """Omit a field to leave it unchanged; these columns cannot be cleared."""
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class TicketRead(HTTPSchemaModel):
    """Schema for reading ticket data with its device, customer and snapshot."""

    id: int
    ticket_id: str
    device_id: str
    customer_id: str
    issue: str
    description: str
    status: str
    priority: str
    confidence: int
    warranty: bool
    assigned_to: Optional[str] = None
    estimated_resolution: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    device: Optional[DeviceSummary] = None
    customer: Optional[CustomerSummary] = None
    telemetry_snapshot: Optional[TicketTelemetryRead] = None


class TicketWarrantyStats(HTTPSchemaModel):
    in_warranty: int
    out_of_warranty: int


class TicketRecentActivity(HTTPSchemaModel):
    created_today: int
    updated_today: int
    resolved_today: int


class TicketStatsSummary(HTTPSchemaModel):
    """Ticket summary statistics."""

    total: int
    by_status: Dict[str, int]
    by_priority: Dict[str, int]
    avg_confidence: str
    warranty_stats: TicketWarrantyStats
    recent_activity: TicketRecentActivity
