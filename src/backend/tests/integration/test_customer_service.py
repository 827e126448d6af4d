"""
Integration tests for the customer service.

Tests:
- Listing with support tier ordering and related row counts
- Customer detail
- Create customer (generated ID, contract window, defaults)
- Partial updates
- Summary statistics
"""

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import NotFoundError
from models.model_enum import CustomerStatus, SupportLevel
from schemas.customer import CustomerCreate, CustomerUpdate
from services.customer_service import CustomerService
from tests.factories import CustomerFactory


class TestListCustomers:
    """Tests for CustomerService.list_customers()."""

    async def test_enterprise_first_with_counts(self, db_session: AsyncSession, fleet):
        customers, total = await CustomerService.list_customers(db_session)
        assert total == 2
        assert [c.customer_id for c in customers] == ["CUST-B", "CUST-A"]

        counts = {c.customer_id: c.record_counts for c in customers}
        assert counts["CUST-A"].devices == 2
        assert counts["CUST-A"].tickets == 1
        assert counts["CUST-B"].devices == 1
        assert counts["CUST-B"].tickets == 1

    async def test_customer_without_rows_has_zero_counts(self, db_session: AsyncSession, fleet):
        db_session.add(CustomerFactory.create(customer_id="CUST-C", support_level="BASIC"))
        await db_session.commit()

        customers, _ = await CustomerService.list_customers(
            db_session, support_level=SupportLevel.BASIC
        )
        assert customers[0].record_counts.devices == 0
        assert customers[0].record_counts.tickets == 0

    async def test_search(self, db_session: AsyncSession, fleet):
        customers, total = await CustomerService.list_customers(db_session, search="globex")
        assert total == 1
        assert customers[0].name == "Globex Finance"

    async def test_status_filter(self, db_session: AsyncSession, fleet):
        _, total = await CustomerService.list_customers(
            db_session, status=CustomerStatus.SUSPENDED
        )
        assert total == 0


class TestCustomerDetail:
    """Tests for CustomerService.get_customer_detail()."""

    async def test_detail(self, db_session: AsyncSession, fleet):
        detail = await CustomerService.get_customer_detail(db_session, "CUST-A")
        assert detail.name == "Acme Corporation"
        assert {d.device_id for d in detail.devices} == {"DEV-A1", "DEV-A2"}
        assert [t.ticket_id for t in detail.tickets] == ["T-1001"]
        assert detail.record_counts.devices == 2

    async def test_unknown_customer(self, db_session: AsyncSession, fleet):
        with pytest.raises(NotFoundError, match="Customer not found"):
            await CustomerService.get_customer_detail(db_session, "CUST-404")


class TestCreateCustomer:
    """Tests for CustomerService.create_customer()."""

    async def test_create(self, db_session: AsyncSession):
        customer = await CustomerService.create_customer(
            db_session,
            CustomerCreate(
                name="Design Studios Ltd",
                contact="Emma Wilson",
                location="Creative Hub",
                support_level=SupportLevel.PREMIUM,
            ),
        )
        assert customer.customer_id.startswith("CUST-")
        assert customer.status == "ACTIVE"
        assert customer.support_level == "PREMIUM"
        assert customer.device_count == 0
        assert customer.account_manager == "Unassigned"
        assert customer.contract_end - customer.contract_start == timedelta(
            days=settings.fleet.contract_length_days
        )

    async def test_account_manager_kept(self, db_session: AsyncSession):
        customer = await CustomerService.create_customer(
            db_session,
            CustomerCreate(
                name="HealthCare Plus",
                contact="Dr. Robert Smith",
                location="Medical Center",
                email="robert.smith@healthcareplus.com",
                support_level=SupportLevel.ENTERPRISE,
                account_manager="Lisa Davis",
            ),
        )
        assert customer.account_manager == "Lisa Davis"
        assert customer.email == "robert.smith@healthcareplus.com"


class TestUpdateCustomer:
    """Tests for CustomerService.update_customer()."""

    async def test_partial_update(self, db_session: AsyncSession, fleet):
        customer = await CustomerService.update_customer(
            db_session,
            "CUST-A",
            CustomerUpdate(status=CustomerStatus.SUSPENDED, phone="+1-555-0199"),
        )
        assert customer.status == "SUSPENDED"
        assert customer.phone == "+1-555-0199"
        assert customer.name == "Acme Corporation"
        assert customer.support_level == "PREMIUM"

    async def test_unknown_customer(self, db_session: AsyncSession, fleet):
        with pytest.raises(NotFoundError):
            await CustomerService.update_customer(
                db_session, "CUST-404", CustomerUpdate(name="Nobody")
            )


class TestCustomerStats:
    """Tests for CustomerService.get_stats_summary()."""

    async def test_summary(self, db_session: AsyncSession, fleet):
        db_session.add(
            CustomerFactory.create(customer_id="CUST-C", device_count=7, contract_days_left=10)
        )
        await db_session.commit()

        summary = await CustomerService.get_stats_summary(db_session)
        assert summary.total == 3
        assert summary.by_support_level == {"premium": 1, "enterprise": 1, "basic": 1}
        assert summary.by_status == {"active": 3}
        assert summary.total_devices == 180
        assert summary.avg_devices_per_customer == "60.0"
        assert summary.contracts_expiring_soon == 1

    async def test_empty(self, db_session: AsyncSession):
        summary = await CustomerService.get_stats_summary(db_session)
        assert summary.total == 0
        assert summary.total_devices == 0
        assert summary.avg_devices_per_customer == "0"
