"""
Pytest configuration and fixtures for testing.

Provides:
- Database fixtures (in-memory SQLite, fresh schema per test)
- An HTTP client bound to the application with the session dependency
  overridden
- Seeded fleet fixtures built from tests.factories

Usage:
    pytest src/backend/tests -v
"""

import os

# Settings are read at import time, so the environment is fixed up first.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["MONITORING_ENABLE_METRICS"] = "false"
os.environ["LOG_ENABLE_FILE_LOGGING"] = "false"
os.environ["DATABASE_SEED_DEMO_DATA"] = "false"

from datetime import timedelta  # noqa: E402
from typing import AsyncGenerator, Dict  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import db.models  # noqa: E402,F401
from app.factory import create_app  # noqa: E402
from core.database import get_session  # noqa: E402
from db.models import utc_now  # noqa: E402
from tests.factories import (  # noqa: E402
    CustomerFactory,
    DeviceFactory,
    TelemetryFactory,
    TicketFactory,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database with every table.

    StaticPool keeps a single connection so all sessions see the same
    in-memory database.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session used by tests to arrange data and call services directly."""
    async with session_factory() as session:
        yield session


# ============================================================================
# HTTP Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def app():
    return create_app()


@pytest_asyncio.fixture
async def client(app, session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests use the per-test database."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


# ============================================================================
# Fleet Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def fleet(db_session: AsyncSession) -> Dict[str, object]:
    """
    Two customers, three devices, two tickets and a few telemetry samples.

    - CUST-A owns DEV-A1 (health 23, HIGH, online) and DEV-A2 (health 78, MEDIUM)
    - CUST-B owns DEV-B1 (health 92, LOW, warranty expiring in 10 days)
    """
    now = utc_now()
    acme = CustomerFactory.create(customer_id="CUST-A", name="Acme Corporation",
                                  support_level="PREMIUM", device_count=45)
    globex = CustomerFactory.create(customer_id="CUST-B", name="Globex Finance",
                                    support_level="ENTERPRISE", device_count=128)
    db_session.add_all([acme, globex])
    await db_session.flush()

    dell = DeviceFactory.create(
        device_id="DEV-A1", customer_id="CUST-A", device_name="Dell Inspiron 15",
        device_brand="Dell", udc_channel="RETAIL", health_score=23, risk_level="HIGH",
        last_seen=now - timedelta(minutes=5),
    )
    hp = DeviceFactory.create(
        device_id="DEV-A2", customer_id="CUST-A", device_name="HP Pavilion Desktop",
        device_brand="HP", udc_channel="RETAIL", health_score=78, risk_level="MEDIUM",
        last_seen=now - timedelta(hours=3),
    )
    lenovo = DeviceFactory.create(
        device_id="DEV-B1", customer_id="CUST-B", device_name="Lenovo ThinkPad X1",
        device_brand="Lenovo", udc_channel="BUSINESS", health_score=92, risk_level="LOW",
        last_seen=now - timedelta(minutes=30),
        warranty_status=True, warranty_expiry_date=now + timedelta(days=10),
    )
    db_session.add_all([dell, hp, lenovo])
    await db_session.flush()

    disk = TicketFactory.create(
        ticket_id="T-1001", device_id="DEV-A1", customer_id="CUST-A",
        issue="Disk error prediction", status="ANALYSIS", priority="HIGH", confidence=87,
    )
    memory = TicketFactory.create(
        ticket_id="T-1002", device_id="DEV-B1", customer_id="CUST-B",
        issue="Memory usage spike", status="RESOLVED", priority="LOW", confidence=68,
        warranty=True, created_at=now - timedelta(hours=8), resolved_at=now - timedelta(hours=2),
    )
    db_session.add_all([disk, memory])

    db_session.add_all(
        TelemetryFactory.create(
            device_id="DEV-A1", timestamp=now - timedelta(hours=hours_ago),
            temperature=60 + hours_ago, cpu_usage=50,
        )
        for hours_ago in (1, 2, 3)
    )
    # Outside a 24h window
    db_session.add(
        TelemetryFactory.create(device_id="DEV-A1", timestamp=now - timedelta(hours=30))
    )
    await db_session.commit()
    # Services should load their own rows, relationships included
    db_session.expunge_all()

    return {
        "customers": [acme, globex],
        "devices": [dell, hp, lenovo],
        "tickets": [disk, memory],
    }
