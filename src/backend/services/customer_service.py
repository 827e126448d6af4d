"""
Customer service.

Handles customer listing with related row counts, customer detail,
creation with a one-year contract, partial updates and summary stats.
"""
import logging
import uuid
from datetime import timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.decorators import (
    critical_database_operation,
    log_database_operation,
    transactional_database_operation,
)
from core.exceptions import NotFoundError
from core.metrics import track_customer_created
from db.models import Customer, Device, Ticket, utc_now
from models.model_enum import CustomerStatus, SupportLevel
from repositories import CustomerRepository, DeviceRepository, TicketRepository
from schemas.customer import (
    CustomerCounts,
    CustomerCreate,
    CustomerDetail,
    CustomerListItem,
    CustomerRead,
    CustomerStatsSummary,
    CustomerUpdate,
)
from schemas.common import DeviceSummary, TicketSummary
from services.aggregation import safe_ratio, to_distribution

logger = logging.getLogger(__name__)


def generate_customer_id() -> str:
    return f"CUST-{uuid.uuid4().hex[:10].upper()}"


async def _record_counts(
    db: AsyncSession, customer_ids: Sequence[str]
) -> Dict[str, CustomerCounts]:
    """Device and ticket counts per customer, in two grouped queries."""
    if not customer_ids:
        return {}

    device_rows = await DeviceRepository.group_counts(
        db, Device.customer_id, conditions=[Device.customer_id.in_(customer_ids)]
    )
    ticket_rows = await TicketRepository.group_counts(
        db, Ticket.customer_id, conditions=[Ticket.customer_id.in_(customer_ids)]
    )
    devices = dict(device_rows)
    tickets = dict(ticket_rows)

    return {
        customer_id: CustomerCounts(
            devices=devices.get(customer_id, 0),
            tickets=tickets.get(customer_id, 0),
        )
        for customer_id in customer_ids
    }


class CustomerService:
    """Service for customer management."""

    @staticmethod
    @critical_database_operation("list_customers")
    @log_database_operation("customer listing", level="debug")
    async def list_customers(
        db: AsyncSession,
        *,
        page: int = 1,
        limit: int = 20,
        support_level: Optional[SupportLevel] = None,
        status: Optional[CustomerStatus] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[CustomerListItem], int]:
        """
        List customers with filters, highest support tier first.

        Returns:
            Tuple of (customers with _count, total matching)
        """
        conditions = CustomerRepository.build_conditions(
            support_level=support_level,
            status=status,
            search=search,
        )
        customers, total = await CustomerRepository.find_page(
            db, conditions=conditions, page=page, limit=limit
        )

        counts = await _record_counts(db, [c.customer_id for c in customers])
        items = [
            CustomerListItem(
                **CustomerRead.model_validate(customer).model_dump(),
                record_counts=counts[customer.customer_id],
            )
            for customer in customers
        ]
        return items, total

    @staticmethod
    @critical_database_operation("get_customer_detail")
    @log_database_operation("customer detail retrieval", level="debug")
    async def get_customer_detail(db: AsyncSession, customer_id: str) -> CustomerDetail:
        """Customer with its latest devices and tickets and the _count block."""
        customer = await CustomerRepository.find_by_key(db, customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")

        limit = settings.fleet.detail_related_limit
        devices = await DeviceRepository.find_latest(
            db,
            conditions=[Device.customer_id == customer_id],
            order_by=Device.created_at.desc(),
            limit=limit,
        )
        tickets = await TicketRepository.find_latest(
            db,
            conditions=[Ticket.customer_id == customer_id],
            order_by=Ticket.created_at.desc(),
            limit=limit,
        )
        counts = await _record_counts(db, [customer_id])

        return CustomerDetail(
            **CustomerRead.model_validate(customer).model_dump(),
            record_counts=counts[customer_id],
            devices=[DeviceSummary.model_validate(d) for d in devices],
            tickets=[TicketSummary.model_validate(t) for t in tickets],
        )

    @staticmethod
    @transactional_database_operation("create_customer")
    @log_database_operation("customer creation", level="debug")
    async def create_customer(db: AsyncSession, customer_data: CustomerCreate) -> Customer:
        """Create an ACTIVE customer whose contract starts now."""
        now = utc_now()
        customer = Customer(
            customer_id=generate_customer_id(),
            name=customer_data.name,
            contact=customer_data.contact,
            email=customer_data.email,
            phone=customer_data.phone,
            location=customer_data.location,
            support_level=customer_data.support_level.value,
            device_count=0,
            contract_start=now,
            contract_end=now + timedelta(days=settings.fleet.contract_length_days),
            account_manager=customer_data.account_manager or "Unassigned",
            status=CustomerStatus.ACTIVE.value,
        )
        db.add(customer)
        await db.commit()

        track_customer_created(customer.support_level)
        logger.info(f"Customer created: {customer.customer_id} ({customer.name})")
        return await CustomerRepository.find_by_key(db, customer.customer_id)

    @staticmethod
    @transactional_database_operation("update_customer")
    @log_database_operation("customer update", level="debug")
    async def update_customer(
        db: AsyncSession, customer_id: str, update_data: CustomerUpdate
    ) -> Customer:
        """Apply a partial update; only provided fields are written."""
        customer = await CustomerRepository.find_by_key(db, customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")

        for field, value in update_data.model_dump(exclude_unset=True).items():
            if hasattr(value, "value"):
                value = value.value
            setattr(customer, field, value)

        await db.commit()
        return await CustomerRepository.find_by_key(db, customer_id)

    @staticmethod
    @critical_database_operation("customer_stats_summary")
    @log_database_operation("customer stats summary", level="debug")
    async def get_stats_summary(db: AsyncSession) -> CustomerStatsSummary:
        now = utc_now()
        contract_until = now + timedelta(days=settings.fleet.contract_window_days)

        total = await CustomerRepository.count(db)
        support_rows = await CustomerRepository.group_counts(db, Customer.support_level)
        status_rows = await CustomerRepository.group_counts(db, Customer.status)
        total_devices = await CustomerRepository.aggregate(db, func.sum, Customer.device_count)
        expiring = await CustomerRepository.count(
            db,
            conditions=[Customer.contract_end >= now, Customer.contract_end <= contract_until],
        )

        return CustomerStatsSummary(
            total=total,
            by_support_level=to_distribution(support_rows),
            by_status=to_distribution(status_rows),
            total_devices=total_devices or 0,
            avg_devices_per_customer=safe_ratio(total_devices, total),
            contracts_expiring_soon=expiring,
        )
