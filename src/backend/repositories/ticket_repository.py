"""
Ticket repository: ticket filters, cross-entity search and ordering.
"""
from datetime import datetime
from typing import Any, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from db.models import Customer, Device, Ticket, TicketTelemetry
from models.model_enum import TicketPriority, TicketStatus
from repositories.base_repository import BaseRepository

PRIORITY_PRECEDENCE = (
    TicketPriority.HIGH.value,
    TicketPriority.MEDIUM.value,
    TicketPriority.LOW.value,
)


class TicketRepository(BaseRepository[Ticket]):
    """Repository for Ticket queries."""

    model = Ticket
    key_column = "ticket_id"
    search_columns = ("ticket_id", "issue", "description")

    @classmethod
    def joins(cls) -> List[Tuple[Any, Any]]:
        # Search reaches into the owning device and customer
        return [
            (Device, Device.device_id == Ticket.device_id),
            (Customer, Customer.customer_id == Ticket.customer_id),
        ]

    @classmethod
    def ordering(cls) -> List[Any]:
        return [
            cls.rank(Ticket.priority, PRIORITY_PRECEDENCE),
            Ticket.created_at.desc(),
            Ticket.id.asc(),
        ]

    @classmethod
    def build_conditions(
        cls,
        *,
        status: Optional[TicketStatus] = None,
        priority: Optional[TicketPriority] = None,
        assigned_to: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[ColumnElement]:
        """Translate optional list filters into AND-ed conditions."""
        conditions: List[ColumnElement] = []
        if status is not None:
            conditions.append(Ticket.status == TicketStatus(status).value)
        if priority is not None:
            conditions.append(Ticket.priority == TicketPriority(priority).value)
        if assigned_to:
            conditions.append(cls.contains(Ticket.assigned_to, assigned_to))
        if search:
            conditions.append(
                cls.search_clause(search, extra_columns=(Device.device_name, Customer.name))
            )
        return conditions

    @classmethod
    async def resolution_spans(
        cls, db: AsyncSession, since: datetime
    ) -> List[Tuple[datetime, datetime]]:
        """(created_at, resolved_at) pairs for tickets resolved since ``since``."""
        stmt = select(Ticket.created_at, Ticket.resolved_at).where(
            Ticket.resolved_at.is_not(None),
            Ticket.resolved_at >= since,
        )
        result = await db.execute(stmt)
        return [(created, resolved) for created, resolved in result.all()]


class TicketTelemetryRepository(BaseRepository[TicketTelemetry]):
    """Repository for ticket telemetry snapshots."""

    model = TicketTelemetry
    key_column = "ticket_id"
