"""
Ticket API endpoints.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_session
from core.exceptions import NotFoundError, ReferentialIntegrityError
from models.model_enum import TicketPriority, TicketStatus
from schemas.common import APIResponse, PaginatedResponse, build_pagination
from schemas.ticket import TicketCreate, TicketRead, TicketStatsSummary, TicketUpdate
from services.ticket_service import TicketService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=PaginatedResponse[TicketRead, dict])
async def list_tickets(
    page: int = Query(1, ge=1),
    limit: int = Query(
        settings.pagination.default_page_size,
        ge=1,
        le=settings.pagination.max_page_size,
    ),
    ticket_status: Optional[TicketStatus] = Query(None, alias="status"),
    priority: Optional[TicketPriority] = Query(None),
    assigned_to: Optional[str] = Query(None, alias="assignedTo"),
    search: Optional[str] = Query(
        None, description="Search ticket ID, issue, description, device name or customer name"
    ),
    db: AsyncSession = Depends(get_session),
):
    """List tickets, highest priority and newest first."""
    try:
        tickets, total = await TicketService.list_tickets(
            db,
            page=page,
            limit=limit,
            status=ticket_status,
            priority=priority,
            assigned_to=assigned_to,
            search=search,
        )
    except SQLAlchemyError as e:
        logger.error(f"Error fetching tickets: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch tickets",
        )

    return PaginatedResponse[TicketRead, dict](
        data=[TicketRead.model_validate(t) for t in tickets],
        pagination=build_pagination(page, limit, total),
    )


@router.get("/stats/summary", response_model=APIResponse[TicketStatsSummary])
async def get_ticket_stats(db: AsyncSession = Depends(get_session)):
    """Ticket counts by status and priority, warranty split and today's activity."""
    try:
        summary = await TicketService.get_stats_summary(db)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching ticket stats: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch ticket statistics",
        )
    return APIResponse[TicketStatsSummary](data=summary)


@router.get("/{ticket_id}", response_model=APIResponse[TicketRead])
async def get_ticket(ticket_id: str, db: AsyncSession = Depends(get_session)):
    """Get a ticket with its device, customer and telemetry snapshot."""
    try:
        ticket = await TicketService.get_ticket(db, ticket_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching ticket {ticket_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch ticket",
        )
    return APIResponse[TicketRead](data=TicketRead.model_validate(ticket))


@router.post("", response_model=APIResponse[TicketRead], status_code=201)
async def create_ticket(
    ticket_data: TicketCreate,
    db: AsyncSession = Depends(get_session),
):
    """
    Create a ticket.

    - **device_id**: Device the ticket is raised against
    - **customer_id**: Must own the device
    - **issue**: Short issue summary
    - **priority**: LOW, MEDIUM or HIGH
    - **confidence**: Optional 0-100 diagnosis confidence
    """
    try:
        ticket = await TicketService.create_ticket(db, ticket_data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ReferentialIntegrityError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        logger.error(f"Error creating ticket: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create ticket",
        )

    return APIResponse[TicketRead](
        data=TicketRead.model_validate(ticket),
        message="Ticket created successfully",
    )


@router.put("/{ticket_id}", response_model=APIResponse[TicketRead])
async def update_ticket(
    ticket_id: str,
    update_data: TicketUpdate,
    db: AsyncSession = Depends(get_session),
):
    """Update status, priority, assignee or description of a ticket."""
    try:
        ticket = await TicketService.update_ticket(db, ticket_id, update_data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        logger.error(f"Error updating ticket {ticket_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update ticket",
        )

    return APIResponse[TicketRead](
        data=TicketRead.model_validate(ticket),
        message="Ticket updated successfully",
    )


@router.delete("/{ticket_id}", response_model=APIResponse[TicketRead])
async def delete_ticket(ticket_id: str, db: AsyncSession = Depends(get_session)):
    """Delete a ticket and its telemetry snapshot; returns the deleted ticket."""
    try:
        deleted = await TicketService.delete_ticket(db, ticket_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        logger.error(f"Error deleting ticket {ticket_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete ticket",
        )

    return APIResponse[TicketRead](data=deleted, message="Ticket deleted successfully")
