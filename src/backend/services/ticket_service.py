"""
Ticket service.

Handles ticket listing, creation with ownership checks, partial updates
with resolution stamping, deletion of a ticket with its telemetry snapshot,
and ticket summary statistics.
"""
import logging
import random
import uuid
from datetime import timedelta
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from core.decorators import (
    critical_database_operation,
    log_database_operation,
    transactional_database_operation,
)
from core.exceptions import NotFoundError, ReferentialIntegrityError
from core.metrics import track_ticket_created, track_ticket_deleted, track_ticket_status_change
from db.models import Ticket, utc_now
from models.model_enum import SystemEventType, TicketPriority, TicketStatus
from repositories import DeviceRepository, TicketRepository, TicketTelemetryRepository
from schemas.ticket import (
    TicketCreate,
    TicketRead,
    TicketRecentActivity,
    TicketStatsSummary,
    TicketUpdate,
    TicketWarrantyStats,
)
from services.aggregation import format_average, to_distribution
from services.system_event_service import SystemEventService

logger = logging.getLogger(__name__)


def generate_ticket_id() -> str:
    return f"T-{uuid.uuid4().hex[:10].upper()}"


class TicketService:
    """Service for ticket management."""

    @staticmethod
    @critical_database_operation("list_tickets")
    @log_database_operation("ticket listing", level="debug")
    async def list_tickets(
        db: AsyncSession,
        *,
        page: int = 1,
        limit: int = 20,
        status: Optional[TicketStatus] = None,
        priority: Optional[TicketPriority] = None,
        assigned_to: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Ticket], int]:
        """
        List tickets with filters, highest priority and newest first.

        Returns:
            Tuple of (tickets, total matching)
        """
        conditions = TicketRepository.build_conditions(
            status=status,
            priority=priority,
            assigned_to=assigned_to,
            search=search,
        )
        return await TicketRepository.find_page(
            db, conditions=conditions, page=page, limit=limit
        )

    @staticmethod
    @critical_database_operation("get_ticket")
    @log_database_operation("ticket retrieval", level="debug")
    async def get_ticket(db: AsyncSession, ticket_id: str) -> Ticket:
        """Get a ticket by its ticket_id or raise NotFoundError."""
        ticket = await TicketRepository.find_by_key(db, ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket not found")
        return ticket

    @staticmethod
    @transactional_database_operation("create_ticket")
    @log_database_operation("ticket creation", level="debug")
    async def create_ticket(db: AsyncSession, ticket_data: TicketCreate) -> Ticket:
        """
        Create a ticket against a device owned by the given customer.

        The ticket is committed first; the TICKET system event is written in
        a second commit.

        Raises:
            NotFoundError: device does not exist
            ReferentialIntegrityError: device belongs to another customer
        """
        device = await DeviceRepository.find_by_key(db, ticket_data.device_id)
        if device is None:
            raise NotFoundError("Device not found")
        if device.customer_id != ticket_data.customer_id:
            raise ReferentialIntegrityError("Device does not belong to specified customer")

        now = utc_now()
        confidence = ticket_data.confidence
        if confidence is None:
            confidence = random.randint(70, 99)

        ticket = Ticket(
            ticket_id=generate_ticket_id(),
            device_id=device.device_id,
            customer_id=ticket_data.customer_id,
            issue=ticket_data.issue,
            description=ticket_data.description or "",
            status=TicketStatus.ANALYSIS.value,
            priority=ticket_data.priority.value,
            confidence=confidence,
            warranty=device.warranty_status,
            assigned_to=ticket_data.assigned_to,
            estimated_resolution=now + timedelta(hours=random.randint(0, 71)),
        )
        db.add(ticket)
        await db.commit()

        await SystemEventService.record_event(
            db,
            event_type=SystemEventType.TICKET,
            title="New Ticket Created",
            message=f"Ticket {ticket.ticket_id} created for device {device.device_name}",
            details=ticket.issue,
            severity=ticket.priority,
            source="TICKET_SYSTEM",
            metadata={"ticket_id": ticket.ticket_id, "device_id": device.device_id},
        )

        track_ticket_created(ticket.priority)
        logger.info(f"Ticket created: {ticket.ticket_id} for device {device.device_id}")
        return await TicketRepository.find_by_key(db, ticket.ticket_id)

    @staticmethod
    @transactional_database_operation("update_ticket")
    @log_database_operation("ticket update", level="debug")
    async def update_ticket(
        db: AsyncSession, ticket_id: str, update_data: TicketUpdate
    ) -> Ticket:
        """
        Apply a partial update.

        resolved_at is stamped the first time the status becomes RESOLVED or
        CLOSED and never cleared afterwards.
        """
        ticket = await TicketRepository.find_by_key(db, ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket not found")

        previous_status = ticket.status
        update_dict = update_data.model_dump(exclude_unset=True)

        for field, value in update_dict.items():
            if hasattr(value, "value"):
                value = value.value
            setattr(ticket, field, value)

        if ticket.status in TicketStatus.closed_states() and ticket.resolved_at is None:
            ticket.resolved_at = utc_now()

        await db.commit()

        track_ticket_status_change(previous_status, ticket.status)
        return await TicketRepository.find_by_key(db, ticket_id)

    @staticmethod
    @transactional_database_operation("delete_ticket")
    @log_database_operation("ticket deletion", level="info")
    async def delete_ticket(db: AsyncSession, ticket_id: str) -> TicketRead:
        """
        Delete a ticket and its telemetry snapshot.

        Returns:
            The ticket as it was before deletion
        """
        ticket = await TicketRepository.find_by_key(db, ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket not found")

        deleted = TicketRead.model_validate(ticket)

        snapshot = await TicketTelemetryRepository.find_by_key(db, ticket_id)
        if snapshot is not None:
            await db.delete(snapshot)
            # The snapshot references the ticket, so it has to go first
            await db.flush()

        await db.delete(ticket)
        await db.commit()

        track_ticket_deleted(snapshot is not None)
        logger.info(f"Ticket deleted: {ticket_id}")
        return deleted

    @staticmethod
    @critical_database_operation("ticket_stats_summary")
    @log_database_operation("ticket stats summary", level="debug")
    async def get_stats_summary(db: AsyncSession) -> TicketStatsSummary:
        """Ticket counts by status and priority, warranty split and today's activity."""
        today = utc_now().replace(hour=0, minute=0, second=0, microsecond=0)

        total = await TicketRepository.count(db)
        status_rows = await TicketRepository.group_counts(db, Ticket.status)
        priority_rows = await TicketRepository.group_counts(db, Ticket.priority)
        avg_confidence = await TicketRepository.aggregate(db, func.avg, Ticket.confidence)

        in_warranty = await TicketRepository.count(db, conditions=[Ticket.warranty.is_(True)])

        created_today = await TicketRepository.count(db, conditions=[Ticket.created_at >= today])
        updated_today = await TicketRepository.count(db, conditions=[Ticket.updated_at >= today])
        resolved_today = await TicketRepository.count(
            db, conditions=[Ticket.resolved_at.is_not(None), Ticket.resolved_at >= today]
        )

        return TicketStatsSummary(
            total=total,
            by_status=to_distribution(status_rows),
            by_priority=to_distribution(priority_rows),
            avg_confidence=format_average(avg_confidence),
            warranty_stats=TicketWarrantyStats(
                in_warranty=in_warranty,
                out_of_warranty=total - in_warranty,
            ),
            recent_activity=TicketRecentActivity(
                created_today=created_today,
                updated_today=updated_today,
                resolved_today=resolved_today,
            ),
        )
