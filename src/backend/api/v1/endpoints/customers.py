"""
Customer API endpoints.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_session
from core.exceptions import NotFoundError
from models.model_enum import CustomerStatus, SupportLevel
from schemas.common import APIResponse, PaginatedResponse, build_pagination
from schemas.customer import (
    CustomerCreate,
    CustomerDetail,
    CustomerListItem,
    CustomerRead,
    CustomerStatsSummary,
    CustomerUpdate,
)
from services.customer_service import CustomerService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=PaginatedResponse[CustomerListItem, dict])
async def list_customers(
    page: int = Query(1, ge=1),
    limit: int = Query(
        settings.pagination.default_page_size,
        ge=1,
        le=settings.pagination.max_page_size,
    ),
    support_level: Optional[SupportLevel] = Query(None, alias="supportLevel"),
    customer_status: Optional[CustomerStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Search name, contact, email or customer ID"),
    db: AsyncSession = Depends(get_session),
):
    """List customers, highest support tier first, with related row counts."""
    try:
        customers, total = await CustomerService.list_customers(
            db,
            page=page,
            limit=limit,
            support_level=support_level,
            status=customer_status,
            search=search,
        )
    except SQLAlchemyError as e:
        logger.error(f"Error fetching customers: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch customers",
        )

    return PaginatedResponse[CustomerListItem, dict](
        data=customers,
        pagination=build_pagination(page, limit, total),
    )


@router.get("/stats/summary", response_model=APIResponse[CustomerStatsSummary])
async def get_customer_stats(db: AsyncSession = Depends(get_session)):
    """Customer counts by support level and status, device totals and expiring contracts."""
    try:
        summary = await CustomerService.get_stats_summary(db)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching customer stats: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch customer statistics",
        )
    return APIResponse[CustomerStatsSummary](data=summary)


@router.get("/{customer_id}", response_model=APIResponse[CustomerDetail])
async def get_customer(customer_id: str, db: AsyncSession = Depends(get_session)):
    """Get a customer with its latest devices and tickets."""
    try:
        detail = await CustomerService.get_customer_detail(db, customer_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching customer {customer_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch customer",
        )
    return APIResponse[CustomerDetail](data=detail)


@router.post("", response_model=APIResponse[CustomerRead], status_code=201)
async def create_customer(
    customer_data: CustomerCreate,
    db: AsyncSession = Depends(get_session),
):
    """
    Create a customer.

    - **name**, **contact**, **location**: Required
    - **supportLevel**: BASIC, PREMIUM or ENTERPRISE
    - **email**, **phone**, **accountManager**: Optional
    """
    try:
        customer = await CustomerService.create_customer(db, customer_data)
    except SQLAlchemyError as e:
        logger.error(f"Error creating customer: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create customer",
        )

    return APIResponse[CustomerRead](
        data=CustomerRead.model_validate(customer),
        message="Customer created successfully",
    )


@router.put("/{customer_id}", response_model=APIResponse[CustomerRead])
async def update_customer(
    customer_id: str,
    update_data: CustomerUpdate,
    db: AsyncSession = Depends(get_session),
):
    """Update descriptive fields or status of a customer."""
    try:
        customer = await CustomerService.update_customer(db, customer_id, update_data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        logger.error(f"Error updating customer {customer_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update customer",
        )

    return APIResponse[CustomerRead](
        data=CustomerRead.model_validate(customer),
        message="Customer updated successfully",
    )
