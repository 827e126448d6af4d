"""
Unit tests for the wire format of HTTP schemas.

Tests cover:
- Alias generation (camelCase except identifiers and raw device columns)
- Datetime serialization with a 'Z' suffix
- Pagination metadata
- The _count block on customer list items
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.schema_base import serialize_datetime, to_camel, to_wire_name
from schemas.common import APIResponse, PaginatedResponse, build_pagination
from schemas.customer import CustomerCounts, CustomerListItem, CustomerUpdate
from schemas.ticket import TicketUpdate


class TestWireNames:
    """Tests for to_wire_name()."""

    @pytest.mark.parametrize(
        "name,wire",
        [
            ("risk_level", "riskLevel"),
            ("health_score", "healthScore"),
            ("avg_devices_per_customer", "avgDevicesPerCustomer"),
            ("status", "status"),
            ("device_id", "device_id"),
            ("customer_id", "customer_id"),
            ("ticket_id", "ticket_id"),
            ("device_brand", "device_brand"),
            ("os_version", "os_version"),
            ("udc_channel", "udc_channel"),
            ("device_count", "deviceCount"),
            ("total_device_count", "totalDeviceCount"),
        ],
    )
    def test_wire_name(self, name, wire):
        assert to_wire_name(name) == wire

    def test_to_camel(self):
        assert to_camel("items_per_page") == "itemsPerPage"


class TestDatetimeSerialization:
    """Tests for serialize_datetime()."""

    def test_naive_datetime_gets_z_suffix(self):
        assert serialize_datetime(datetime(2024, 1, 15, 10, 30)) == "2024-01-15T10:30:00Z"

    def test_aware_datetime_converted_to_utc(self):
        cairo = timezone(timedelta(hours=2))
        value = datetime(2024, 1, 15, 12, 30, tzinfo=cairo)
        assert serialize_datetime(value) == "2024-01-15T10:30:00Z"

    def test_none(self):
        assert serialize_datetime(None) is None

    def test_envelope_timestamp_serialized(self):
        body = APIResponse[dict](data={}).model_dump(mode="json", by_alias=True)
        assert body["success"] is True
        assert body["timestamp"].endswith("Z")


class TestPagination:
    """Tests for build_pagination()."""

    def test_middle_page(self):
        meta = build_pagination(page=2, limit=1, total=3)
        assert meta.total_pages == 3
        assert meta.has_next_page is True
        assert meta.has_prev_page is True

    def test_last_page(self):
        meta = build_pagination(page=3, limit=10, total=23)
        assert meta.total_pages == 3
        assert meta.has_next_page is False

    def test_empty_result(self):
        meta = build_pagination(page=1, limit=20, total=0)
        assert meta.total_pages == 0
        assert meta.has_next_page is False
        assert meta.has_prev_page is False

    def test_page_past_the_end(self):
        meta = build_pagination(page=5, limit=10, total=23)
        assert meta.current_page == 5
        assert meta.has_next_page is False
        assert meta.has_prev_page is True

    def test_wire_keys(self):
        body = build_pagination(1, 20, 5).model_dump(by_alias=True)
        assert set(body) == {
            "currentPage",
            "totalPages",
            "totalItems",
            "itemsPerPage",
            "hasNextPage",
            "hasPrevPage",
        }

    def test_stats_null_when_absent(self):
        body = PaginatedResponse[dict, dict](
            data=[], pagination=build_pagination(1, 20, 0)
        ).model_dump(mode="json", by_alias=True)
        assert body["stats"] is None


class TestCustomerCounts:
    """Tests for the _count block."""

    def test_count_alias(self):
        now = datetime(2024, 1, 1)
        item = CustomerListItem(
            id=1,
            customer_id="CUST-001",
            name="Acme Corporation",
            contact="John Smith",
            location="Data Center 3",
            support_level="PREMIUM",
            device_count=45,
            account_manager="Sarah Johnson",
            status="ACTIVE",
            created_at=now,
            updated_at=now,
            record_counts=CustomerCounts(devices=2, tickets=1),
        )
        body = item.model_dump(by_alias=True)
        assert body["_count"] == {"devices": 2, "tickets": 1}
        assert body["supportLevel"] == "PREMIUM"
        assert body["deviceCount"] == 45
        assert body["customer_id"] == "CUST-001"


class TestPartialUpdates:
    """Only provided fields are treated as set."""

    def test_camel_case_input_accepted(self):
        update = TicketUpdate.model_validate({"assignedTo": "Hardware Team"})
        assert update.model_dump(exclude_unset=True) == {"assigned_to": "Hardware Team"}

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            TicketUpdate.model_validate({"status": "DONE"})

    def test_null_status_rejected(self):
        with pytest.raises(ValueError, match="status cannot be null"):
            TicketUpdate.model_validate({"status": None})

    def test_null_assignee_allowed(self):
        update = TicketUpdate.model_validate({"assignedTo": None})
        assert update.model_dump(exclude_unset=True) == {"assigned_to": None}

    def test_null_customer_name_rejected(self):
        with pytest.raises(ValueError):
            CustomerUpdate.model_validate({"name": None})
