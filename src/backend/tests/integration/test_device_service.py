"""
Integration tests for the device service.

Tests:
- Listing with filters, ordering and filter-scoped stats
- Fleet summary
- Device detail and telemetry windows
- Device registration and its DEVICE event
- Operator notifications and their ALERT event
"""

from datetime import timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import NotFoundError, ReferentialIntegrityError
from db.models import SystemEvent, utc_now
from models.model_enum import RiskLevel, TicketPriority
from schemas.device import DeviceCreate, NotifyRequest
from services.device_service import DeviceService
from tests.factories import DeviceFactory, TelemetryFactory


class TestListDevices:
    """Tests for DeviceService.list_devices()."""

    async def test_riskiest_first(self, db_session: AsyncSession, fleet):
        devices, total, _ = await DeviceService.list_devices(db_session)
        assert total == 3
        assert [d.device_id for d in devices] == ["DEV-A1", "DEV-A2", "DEV-B1"]

    async def test_ties_broken_by_health_score(self, db_session: AsyncSession, fleet):
        db_session.add(
            DeviceFactory.create(customer_id="CUST-A", device_id="DEV-A3",
                                 health_score=10, risk_level="HIGH")
        )
        await db_session.commit()

        devices, _, _ = await DeviceService.list_devices(db_session, risk_level=RiskLevel.HIGH)
        assert [d.device_id for d in devices] == ["DEV-A3", "DEV-A1"]

    async def test_stats_cover_whole_filtered_set(self, db_session: AsyncSession, fleet):
        devices, total, stats = await DeviceService.list_devices(db_session, page=1, limit=1)
        assert len(devices) == 1
        assert total == 3
        assert stats.total == 3
        assert stats.online == 2
        assert stats.avg_health_score == 64
        assert stats.warranty_expiring == 1
        assert stats.risk_distribution == {"high": 1, "medium": 1, "low": 1}

    async def test_risk_filter(self, db_session: AsyncSession, fleet):
        devices, total, stats = await DeviceService.list_devices(
            db_session, risk_level=RiskLevel.HIGH
        )
        assert total == 1
        assert devices[0].health_score == 23
        assert stats.avg_health_score == 23
        assert stats.risk_distribution == {"high": 1}

    async def test_health_score_is_an_upper_bound(self, db_session: AsyncSession, fleet):
        devices, total, stats = await DeviceService.list_devices(db_session, health_score=80)
        assert total == 2
        # (23 + 78) / 2 rounds half up
        assert stats.avg_health_score == 51
        assert {d.device_id for d in devices} == {"DEV-A1", "DEV-A2"}

    async def test_brand_and_channel_are_substring_matches(self, db_session: AsyncSession, fleet):
        _, total, _ = await DeviceService.list_devices(db_session, brand="len")
        assert total == 1
        _, total, _ = await DeviceService.list_devices(db_session, channel="retail")
        assert total == 2

    async def test_search_is_case_insensitive(self, db_session: AsyncSession, fleet):
        devices, total, _ = await DeviceService.list_devices(db_session, search="THINKPAD")
        assert total == 1
        assert devices[0].device_id == "DEV-B1"

    async def test_search_wildcards_are_literal(self, db_session: AsyncSession, fleet):
        _, total, stats = await DeviceService.list_devices(db_session, search="%")
        assert total == 0
        assert stats.avg_health_score == 0
        assert stats.risk_distribution == {}

    @pytest.mark.parametrize(
        "first,second",
        [
            ({"channel": "retail"}, {"health_score": 50}),
            ({"brand": "e"}, {"risk_level": RiskLevel.LOW}),
            ({"search": "dev-a"}, {"health_score": 80}),
        ],
    )
    async def test_filters_combine_as_intersection(
        self, db_session: AsyncSession, fleet, first, second
    ):
        db_session.add_all(
            [
                DeviceFactory.create(customer_id="CUST-A", device_id="DEV-A3", udc_channel="RETAIL",
                                     device_brand="Lenovo", health_score=40, risk_level="LOW"),
                DeviceFactory.create(customer_id="CUST-B", device_id="DEV-B2", udc_channel="BUSINESS",
                                     device_brand="Acer", health_score=35, risk_level="HIGH"),
            ]
        )
        await db_session.commit()

        async def ids(**filters):
            devices, total, _ = await DeviceService.list_devices(db_session, limit=100, **filters)
            assert total == len(devices)
            return {d.device_id for d in devices}

        combined = await ids(**first, **second)
        assert combined == await ids(**first) & await ids(**second)
        assert combined

    async def test_page_past_the_end(self, db_session: AsyncSession, fleet):
        devices, total, _ = await DeviceService.list_devices(db_session, page=9, limit=20)
        assert devices == []
        assert total == 3

    async def test_customer_is_loaded(self, db_session: AsyncSession, fleet):
        devices, _, _ = await DeviceService.list_devices(db_session, search="DEV-A1")
        assert devices[0].customer.name == "Acme Corporation"


class TestDeviceStatsSummary:
    """Tests for DeviceService.get_stats_summary()."""

    async def test_summary(self, db_session: AsyncSession, fleet):
        summary = await DeviceService.get_stats_summary(db_session)
        assert summary.total == 3
        assert summary.online == 2
        assert summary.offline == 1
        assert summary.brand_distribution == {"Dell": 1, "HP": 1, "Lenovo": 1}
        assert summary.channel_distribution == {"RETAIL": 2, "BUSINESS": 1}
        assert summary.health_score_stats.average == "64.3"
        assert summary.health_score_stats.minimum == 23
        assert summary.health_score_stats.maximum == 92
        assert summary.warranty_stats.active == 1
        assert summary.warranty_stats.expired == 2
        assert summary.warranty_stats.active + summary.warranty_stats.expired == summary.total
        assert summary.warranty_stats.expiring_soon == 1

    async def test_warranty_split_follows_flag(self, db_session: AsyncSession, fleet):
        db_session.add_all(
            [
                DeviceFactory.create(
                    customer_id="CUST-B",
                    warranty_status=True,
                    warranty_expiry_date=utc_now() - timedelta(days=1),
                ),
                DeviceFactory.create(customer_id="CUST-B", warranty_status=False),
            ]
        )
        await db_session.commit()

        summary = await DeviceService.get_stats_summary(db_session)
        assert summary.warranty_stats.active == 2
        assert summary.warranty_stats.expired == 3
        assert summary.warranty_stats.active + summary.warranty_stats.expired == summary.total
        # Expiry already passed, so it is not expiring soon
        assert summary.warranty_stats.expiring_soon == 1

    async def test_empty_fleet(self, db_session: AsyncSession):
        summary = await DeviceService.get_stats_summary(db_session)
        assert summary.total == 0
        assert summary.health_score_stats.average == "0"
        assert summary.risk_distribution == {}


class TestDeviceDetail:
    """Tests for DeviceService.get_device_detail() and get_telemetry()."""

    async def test_detail(self, db_session: AsyncSession, fleet):
        device, tickets, telemetry = await DeviceService.get_device_detail(db_session, "DEV-A1")
        assert device.device_name == "Dell Inspiron 15"
        assert [t.ticket_id for t in tickets] == ["T-1001"]
        assert len(telemetry) == 4
        # Newest sample first
        assert telemetry[0].timestamp > telemetry[-1].timestamp

    async def test_detail_not_found(self, db_session: AsyncSession, fleet):
        with pytest.raises(NotFoundError, match="Device not found"):
            await DeviceService.get_device_detail(db_session, "DEV-404")

    async def test_telemetry_window(self, db_session: AsyncSession, fleet):
        rows, summary = await DeviceService.get_telemetry(db_session, "DEV-A1", hours=24)
        assert [r.temperature for r in rows] == [63, 62, 61]
        assert summary.avg_temperature == "62.0"
        assert summary.avg_cpu_usage == "50.0"

    async def test_wider_window_includes_older_samples(self, db_session: AsyncSession, fleet):
        rows, _ = await DeviceService.get_telemetry(db_session, "DEV-A1", hours=48)
        assert len(rows) == 4

    async def test_dense_samples_are_all_returned(self, db_session: AsyncSession, fleet):
        now = utc_now()
        db_session.add_all(
            [
                TelemetryFactory.create("DEV-A2", timestamp=now - timedelta(seconds=20 * i))
                for i in range(1, 150)
            ]
        )
        await db_session.commit()

        rows, _ = await DeviceService.get_telemetry(db_session, "DEV-A2", hours=1)
        assert len(rows) == 149
        assert rows[0].timestamp < rows[-1].timestamp
        assert rows[-1].timestamp == now - timedelta(seconds=20)

    async def test_telemetry_without_samples(self, db_session: AsyncSession, fleet):
        rows, summary = await DeviceService.get_telemetry(db_session, "DEV-A2", hours=24)
        assert rows == []
        assert summary.avg_temperature == "0"
        assert summary.avg_power_consumption == "0"

    async def test_telemetry_unknown_device(self, db_session: AsyncSession, fleet):
        with pytest.raises(NotFoundError):
            await DeviceService.get_telemetry(db_session, "DEV-404", hours=24)


class TestCreateDevice:
    """Tests for DeviceService.create_device()."""

    async def test_create(self, db_session: AsyncSession, fleet):
        data = DeviceCreate(
            device_id="DEV-NEW",
            customer_id="CUST-B",
            device_name="ASUS ZenBook 14",
            device_brand="ASUS",
            health_score=45,
            risk_level=RiskLevel.HIGH,
        )
        device = await DeviceService.create_device(db_session, data)
        assert device.device_id == "DEV-NEW"
        assert device.risk_level == "HIGH"
        assert device.customer.name == "Globex Finance"

        result = await db_session.execute(
            select(SystemEvent).where(SystemEvent.source == "DEVICE_REGISTRY")
        )
        event = result.scalar_one()
        assert event.type == "DEVICE"
        assert event.event_metadata["device_id"] == "DEV-NEW"

    async def test_unknown_customer(self, db_session: AsyncSession, fleet):
        data = DeviceCreate(
            device_id="DEV-NEW", customer_id="CUST-404", device_name="X", device_brand="Y"
        )
        with pytest.raises(NotFoundError, match="Customer not found"):
            await DeviceService.create_device(db_session, data)

    async def test_duplicate_device_id(self, db_session: AsyncSession, fleet):
        data = DeviceCreate(
            device_id="DEV-A1", customer_id="CUST-A", device_name="X", device_brand="Y"
        )
        with pytest.raises(ReferentialIntegrityError):
            await DeviceService.create_device(db_session, data)


class TestNotifyDevice:
    """Tests for DeviceService.notify_device()."""

    async def test_notify(self, db_session: AsyncSession, fleet):
        request = NotifyRequest(
            message="Disk replacement scheduled",
            priority=TicketPriority.HIGH,
            recipients=["ops@example.com"],
        )
        notification = await DeviceService.notify_device(db_session, "DEV-A1", request)
        assert notification.id.startswith("NOTIF-")
        assert notification.status == "sent"
        assert notification.customer == "Acme Corporation"
        assert notification.priority == "HIGH"

        result = await db_session.execute(
            select(SystemEvent).where(SystemEvent.source == "NOTIFICATION_SYSTEM")
        )
        event = result.scalar_one()
        assert event.type == "ALERT"
        assert event.severity == "HIGH"
        assert event.event_metadata["recipients"] == ["ops@example.com"]

    async def test_notify_unknown_device(self, db_session: AsyncSession, fleet):
        with pytest.raises(NotFoundError):
            await DeviceService.notify_device(
                db_session, "DEV-404", NotifyRequest(message="hello")
            )
