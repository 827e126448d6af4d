"""
Database models using SQLModel.

Business keys (device_id, ticket_id, customer_id) are unique strings used by
the API; every table also carries an integer surrogate primary key.
Enumerated columns are stored as strings and validated against the enums in
models.model_enum at the API boundary.
"""

from datetime import date as calendar_date
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    false,
    text,
)
from sqlmodel import Field, Relationship, SQLModel


def utc_now() -> datetime:
    """
    Get current time in UTC (timezone-naive) for database storage.

    All datetimes are stored as naive UTC and serialized with a 'Z' suffix
    by the API layer.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TableModel(SQLModel):
    """Base table model with common functionality."""

    pass


class Customer(TableModel, table=True):
    """Customer account owning devices and tickets."""

    __tablename__ = "customers"

    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: str = Field(
        ...,
        max_length=50,
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Business key, e.g. CUST-001",
    )
    name: str = Field(..., sa_column=Column(String(200), nullable=False))
    contact: str = Field(..., sa_column=Column(String(200), nullable=False))
    email: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    phone: Optional[str] = Field(default=None, sa_column=Column(String(50), nullable=True))
    location: str = Field(..., sa_column=Column(String(255), nullable=False))
    support_level: str = Field(
        ...,
        sa_column=Column(String(20), nullable=False),
        description="BASIC, PREMIUM or ENTERPRISE",
    )
    device_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default=text("0")),
        description="Declared device count; not kept in sync with device rows",
    )
    contract_start: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))
    contract_end: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))
    account_manager: str = Field(
        default="Unassigned",
        sa_column=Column(String(200), nullable=False, server_default=text("'Unassigned'")),
    )
    status: str = Field(
        default="ACTIVE",
        sa_column=Column(String(20), nullable=False, server_default=text("'ACTIVE'")),
        description="ACTIVE, INACTIVE or SUSPENDED",
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP"), "onupdate": utc_now},
    )

    __table_args__ = (
        Index("ix_customers_support_level", "support_level"),
        Index("ix_customers_status", "status"),
        Index("ix_customers_name", "name"),
    )


class Device(TableModel, table=True):
    """
    Monitored device.

    health_score and risk_level are stored independently; nothing keeps
    them consistent with each other.
    """

    __tablename__ = "devices"

    id: Optional[int] = Field(default=None, primary_key=True)
    device_id: str = Field(
        ...,
        max_length=50,
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Business key, e.g. DEV001",
    )
    customer_id: str = Field(
        ...,
        sa_column=Column(
            String(50),
            ForeignKey("customers.customer_id"),
            nullable=False,
        ),
    )
    device_name: str = Field(..., sa_column=Column(String(255), nullable=False))
    device_brand: str = Field(..., sa_column=Column(String(100), nullable=False))
    device_manufacturer: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    device_family: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    device_modeltype: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    device_subbrand: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    device_bios_version: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    device_purchase_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))
    os_name: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    os_version: Optional[str] = Field(default=None, sa_column=Column(String(50), nullable=True))
    os_language: Optional[str] = Field(default=None, sa_column=Column(String(20), nullable=True))
    os_country: Optional[str] = Field(default=None, sa_column=Column(String(50), nullable=True))
    udc_channel: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="Sales/update channel",
    )
    health_score: int = Field(
        default=100,
        sa_column=Column(Integer, nullable=False, server_default=text("100")),
        description="0-100 proxy for device condition",
    )
    risk_level: str = Field(
        default="LOW",
        sa_column=Column(String(10), nullable=False, server_default=text("'LOW'")),
        description="LOW, MEDIUM or HIGH",
    )
    last_seen: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))
    warranty_status: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, server_default=false()),
    )
    warranty_expiry_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))
    temperature: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    cpu_usage: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    memory_usage: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    disk_usage: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    power_consumption: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP"), "onupdate": utc_now},
    )

    # Relationships
    customer: Optional["Customer"] = Relationship(
        sa_relationship_kwargs={
            "lazy": "selectin",
            "foreign_keys": "[Device.customer_id]",
            "viewonly": True,
        },
    )

    __table_args__ = (
        Index("ix_devices_customer_id", "customer_id"),
        Index("ix_devices_risk_level", "risk_level"),
        Index("ix_devices_health_score", "health_score"),
        Index("ix_devices_brand", "device_brand"),
        Index("ix_devices_last_seen", "last_seen"),
    )


class Ticket(TableModel, table=True):
    """Support ticket raised against a device."""

    __tablename__ = "tickets"

    id: Optional[int] = Field(default=None, primary_key=True)
    ticket_id: str = Field(
        ...,
        max_length=50,
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Business key, e.g. T-2367",
    )
    device_id: str = Field(
        ...,
        sa_column=Column(String(50), ForeignKey("devices.device_id"), nullable=False),
    )
    customer_id: str = Field(
        ...,
        sa_column=Column(String(50), ForeignKey("customers.customer_id"), nullable=False),
    )
    issue: str = Field(..., sa_column=Column(String(500), nullable=False))
    description: str = Field(default="", sa_column=Column(Text, nullable=False, server_default=text("''")))
    status: str = Field(
        default="ANALYSIS",
        sa_column=Column(String(20), nullable=False, server_default=text("'ANALYSIS'")),
    )
    priority: str = Field(..., sa_column=Column(String(10), nullable=False))
    confidence: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default=text("0")),
        description="0-100 confidence of the automated diagnosis",
    )
    warranty: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, server_default=false()),
    )
    assigned_to: Optional[str] = Field(default=None, sa_column=Column(String(200), nullable=True))
    estimated_resolution: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))
    resolved_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime, nullable=True),
        description="Set once, when status first becomes RESOLVED or CLOSED",
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP"), "onupdate": utc_now},
    )

    # Relationships
    device: Optional["Device"] = Relationship(
        sa_relationship_kwargs={
            "lazy": "selectin",
            "foreign_keys": "[Ticket.device_id]",
            "viewonly": True,
        },
    )
    customer: Optional["Customer"] = Relationship(
        sa_relationship_kwargs={
            "lazy": "selectin",
            "foreign_keys": "[Ticket.customer_id]",
            "viewonly": True,
        },
    )
    telemetry_snapshot: Optional["TicketTelemetry"] = Relationship(
        sa_relationship_kwargs={
            "lazy": "selectin",
            "uselist": False,
            "primaryjoin": "Ticket.ticket_id == foreign(TicketTelemetry.ticket_id)",
            "viewonly": True,
        },
    )

    __table_args__ = (
        Index("ix_tickets_device_id", "device_id"),
        Index("ix_tickets_customer_id", "customer_id"),
        Index("ix_tickets_status", "status"),
        Index("ix_tickets_priority", "priority"),
        Index("ix_tickets_created_at", "created_at"),
    )


class TicketTelemetry(TableModel, table=True):
    """Drive health snapshot captured when a ticket was raised."""

    __tablename__ = "ticket_telemetry"

    id: Optional[int] = Field(default=None, primary_key=True)
    ticket_id: str = Field(
        ...,
        sa_column=Column(String(50), ForeignKey("tickets.ticket_id"), nullable=False, unique=True),
    )
    read_error_rate: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    temperature: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    reallocated_sectors: Optional[int] = Field(default=None, sa_column=Column(Integer, nullable=True))
    spin_retry_count: Optional[int] = Field(default=None, sa_column=Column(Integer, nullable=True))
    power_on_hours: Optional[int] = Field(default=None, sa_column=Column(Integer, nullable=True))
    smart_status: Optional[str] = Field(default=None, sa_column=Column(String(50), nullable=True))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )


class TelemetryData(TableModel, table=True):
    """Time-stamped metric sample for a device."""

    __tablename__ = "telemetry_data"

    id: Optional[int] = Field(default=None, primary_key=True)
    device_id: str = Field(
        ...,
        sa_column=Column(String(50), ForeignKey("devices.device_id"), nullable=False),
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime, nullable=False),
    )
    temperature: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    cpu_usage: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    memory_usage: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    disk_usage: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    power_consumption: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))

    __table_args__ = (
        Index("ix_telemetry_data_device_timestamp", "device_id", "timestamp"),
    )


class SystemEvent(TableModel, table=True):
    """
    Append-only log row written as a side effect of mutations.

    Nothing consumes these rows; they are purely observational.
    """

    __tablename__ = "system_events"

    id: Optional[int] = Field(default=None, primary_key=True)
    type: str = Field(
        ...,
        sa_column=Column(String(20), nullable=False),
        description="TICKET, ALERT, DEVICE or SYSTEM",
    )
    title: str = Field(..., sa_column=Column(String(200), nullable=False))
    message: str = Field(..., sa_column=Column(String(500), nullable=False))
    details: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    severity: str = Field(default="MEDIUM", sa_column=Column(String(10), nullable=False))
    source: str = Field(..., sa_column=Column(String(50), nullable=False))
    # "metadata" is reserved on declarative classes, so the attribute is renamed
    event_metadata: Optional[dict[str, Any]] = Field(
        default=None,
        sa_column=Column("metadata", JSON, nullable=True),
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )

    __table_args__ = (
        Index("ix_system_events_type", "type"),
        Index("ix_system_events_created_at", "created_at"),
    )


class Analytics(TableModel, table=True):
    """Daily rollup counters, one row per date."""

    __tablename__ = "analytics"

    id: Optional[int] = Field(default=None, primary_key=True)
    date: calendar_date = Field(..., sa_column=Column(Date, nullable=False, unique=True))
    total_devices: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default=text("0")))
    devices_online: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default=text("0")))
    devices_offline: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default=text("0")))
    high_risk_devices: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default=text("0")))
    medium_risk_devices: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default=text("0")))
    low_risk_devices: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default=text("0")))
    total_tickets: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default=text("0")))
    open_tickets: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default=text("0")))
    resolved_tickets: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default=text("0")))
    avg_response_time: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    avg_resolution_time: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )
