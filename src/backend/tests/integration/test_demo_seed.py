"""
Integration tests for the demo data seeder.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Analytics, Customer, Device, SystemEvent, TelemetryData, Ticket
from db.setup import DemoDataSeeder, seed_demo_data


async def _count(db: AsyncSession, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar()


class TestDemoDataSeeder:
    """Tests for DemoDataSeeder.run()."""

    async def test_seed_creates_fleet(self, db_session: AsyncSession):
        created = await seed_demo_data(db_session)

        assert await _count(db_session, Customer) == 5
        assert await _count(db_session, Device) == 5
        assert await _count(db_session, Ticket) == 4
        assert await _count(db_session, SystemEvent) == 3
        assert await _count(db_session, Analytics) == 30
        assert await _count(db_session, TelemetryData) == 5 * 24
        assert created == 5 + 5 + 4 + 1 + 3 + 5 * 24 + 30

    async def test_seed_is_idempotent(self, db_session: AsyncSession):
        await seed_demo_data(db_session)
        assert await seed_demo_data(db_session) == 0
        assert await _count(db_session, Device) == 5

    async def test_seeded_ticket_has_snapshot(self, db_session: AsyncSession):
        await DemoDataSeeder().run(db_session)
        db_session.expunge_all()

        result = await db_session.execute(select(Ticket).where(Ticket.ticket_id == "T-2367"))
        ticket = result.scalar_one()
        assert ticket.telemetry_snapshot.smart_status == "Failing"
        assert ticket.device.device_name == "Dell Inspiron 15"

    async def test_resolved_ticket_has_resolution_time(self, db_session: AsyncSession):
        await seed_demo_data(db_session)

        result = await db_session.execute(select(Ticket).where(Ticket.status == "RESOLVED"))
        ticket = result.scalar_one()
        assert ticket.resolved_at > ticket.created_at
