"""
Demo data seeding.

Creates a small fleet (customers, devices, tickets, a telemetry snapshot,
system events, recent telemetry samples and 30 days of analytics rollups)
for local development. Every step is idempotent: rows whose business key
already exists are left untouched.

Device timestamps are relative to the time of seeding so the dashboard
shows online devices and upcoming warranty expiries.
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import (
    Analytics,
    Customer,
    Device,
    SystemEvent,
    TelemetryData,
    Ticket,
    TicketTelemetry,
    utc_now,
)
from models.model_enum import SystemEventType
from repositories import (
    AnalyticsRepository,
    CustomerRepository,
    DeviceRepository,
    TicketRepository,
    TicketTelemetryRepository,
)

logger = logging.getLogger(__name__)

TELEMETRY_HOURS = 24


class DemoDataSeeder:
    """Handles demo data setup."""

    def __init__(self, now: datetime = None):
        self.now = now or utc_now()

    # ========================================================================
    # DATA
    # ========================================================================

    def customers_data(self) -> List[Dict[str, Any]]:
        now = self.now
        base = [
            ("CUST-001", "Acme Corporation", "John Smith", "john.smith@acme.com", "+1-555-0101",
             "Data Center 3", "PREMIUM", 45, 365, 365, "Sarah Johnson"),
            ("CUST-002", "Global Finance Ltd", "Sarah Johnson", "sarah.johnson@globalfinance.com",
             "+1-555-0102", "Branch Office", "ENTERPRISE", 128, 730, 182, "Mike Chen"),
            ("CUST-003", "TechSolutions Inc.", "Mike Chen", "mike.chen@techsolutions.com",
             "+1-555-0103", "HQ Building", "BASIC", 67, 182, 547, "Emma Wilson"),
            ("CUST-004", "Design Studios Ltd", "Emma Wilson", "emma.wilson@designstudios.com",
             "+1-555-0104", "Creative Hub", "PREMIUM", 34, 243, 486, "Robert Smith"),
            ("CUST-005", "HealthCare Plus", "Dr. Robert Smith", "robert.smith@healthcareplus.com",
             "+1-555-0105", "Medical Center", "ENTERPRISE", 189, 1095, 273, "Lisa Davis"),
        ]
        return [
            {
                "customer_id": customer_id,
                "name": name,
                "contact": contact,
                "email": email,
                "phone": phone,
                "location": location,
                "support_level": support_level,
                "device_count": device_count,
                "contract_start": now - timedelta(days=started_days_ago),
                "contract_end": now + timedelta(days=ends_in_days),
                "account_manager": manager,
                "status": "ACTIVE",
            }
            for (customer_id, name, contact, email, phone, location, support_level,
                 device_count, started_days_ago, ends_in_days, manager) in base
        ]

    def devices_data(self) -> List[Dict[str, Any]]:
        now = self.now
        common = {
            "os_country": "US",
            "os_language": "en-US",
            "os_name": "Windows 11",
        }
        return [
            {
                **common,
                "device_id": "DEV001",
                "customer_id": "CUST-001",
                "device_name": "Dell Inspiron 15",
                "device_brand": "Dell",
                "device_manufacturer": "Dell Inc.",
                "device_family": "Inspiron",
                "device_modeltype": "Laptop",
                "device_subbrand": "Inspiron 15",
                "device_bios_version": "1.2.3",
                "device_purchase_date": datetime(2023, 12, 1),
                "os_version": "22H2",
                "udc_channel": "RETAIL",
                "health_score": 23,
                "risk_level": "HIGH",
                "last_seen": now - timedelta(minutes=5),
                "warranty_status": True,
                "warranty_expiry_date": now + timedelta(days=20),
                "temperature": 62,
                "disk_usage": 89,
                "cpu_usage": 67,
                "memory_usage": 84,
                "power_consumption": 450,
            },
            {
                **common,
                "device_id": "DEV002",
                "customer_id": "CUST-002",
                "device_name": "HP Pavilion Desktop",
                "device_brand": "HP",
                "device_manufacturer": "HP Inc.",
                "device_family": "Pavilion",
                "device_modeltype": "Desktop",
                "device_subbrand": "Pavilion Gaming",
                "device_bios_version": "2.1.0",
                "device_purchase_date": datetime(2023, 11, 15),
                "os_version": "23H2",
                "udc_channel": "RETAIL",
                "health_score": 78,
                "risk_level": "MEDIUM",
                "last_seen": now - timedelta(minutes=80),
                "warranty_status": False,
                "warranty_expiry_date": now - timedelta(days=60),
                "temperature": 45,
                "disk_usage": 73,
                "cpu_usage": 34,
                "memory_usage": 56,
                "power_consumption": 280,
            },
            {
                **common,
                "device_id": "DEV003",
                "customer_id": "CUST-003",
                "device_name": "Lenovo ThinkPad X1",
                "device_brand": "Lenovo",
                "device_manufacturer": "Lenovo Group",
                "device_family": "ThinkPad",
                "device_modeltype": "Laptop",
                "device_subbrand": "ThinkPad X1 Carbon",
                "device_bios_version": "1.5.2",
                "device_purchase_date": datetime(2023, 10, 20),
                "os_version": "22H2",
                "udc_channel": "BUSINESS",
                "health_score": 92,
                "risk_level": "LOW",
                "last_seen": now - timedelta(minutes=25),
                "warranty_status": True,
                "warranty_expiry_date": now + timedelta(days=200),
                "temperature": 38,
                "disk_usage": 45,
                "cpu_usage": 25,
                "memory_usage": 42,
                "power_consumption": 65,
            },
            {
                **common,
                "device_id": "DEV004",
                "customer_id": "CUST-004",
                "device_name": "ASUS ZenBook 14",
                "device_brand": "ASUS",
                "device_manufacturer": "ASUSTeK Computer",
                "device_family": "ZenBook",
                "device_modeltype": "Laptop",
                "device_subbrand": "ZenBook Pro",
                "device_bios_version": "2.0.1",
                "device_purchase_date": datetime(2023, 9, 10),
                "os_version": "23H2",
                "udc_channel": "RETAIL",
                "health_score": 45,
                "risk_level": "HIGH",
                "last_seen": now - timedelta(minutes=90),
                "warranty_status": True,
                "warranty_expiry_date": now + timedelta(days=12),
                "temperature": 58,
                "disk_usage": 92,
                "cpu_usage": 78,
                "memory_usage": 85,
                "power_consumption": 320,
            },
            {
                **common,
                "device_id": "DEV005",
                "customer_id": "CUST-005",
                "device_name": "Acer Aspire 5",
                "device_brand": "Acer",
                "device_manufacturer": "Acer Inc.",
                "device_family": "Aspire",
                "device_modeltype": "Laptop",
                "device_subbrand": "Aspire 5",
                "device_bios_version": "1.8.3",
                "device_purchase_date": datetime(2023, 8, 25),
                "os_version": "22H2",
                "udc_channel": "RETAIL",
                "health_score": 72,
                "risk_level": "MEDIUM",
                "last_seen": now - timedelta(minutes=15),
                "warranty_status": False,
                "warranty_expiry_date": now - timedelta(days=30),
                "temperature": 42,
                "disk_usage": 68,
                "cpu_usage": 45,
                "memory_usage": 62,
                "power_consumption": 180,
            },
        ]

    def tickets_data(self) -> List[Dict[str, Any]]:
        now = self.now
        return [
            {
                "ticket_id": "T-2367",
                "device_id": "DEV001",
                "customer_id": "CUST-001",
                "issue": "Disk error prediction",
                "description": "AI detected potential disk failure based on SMART data analysis",
                "status": "ANALYSIS",
                "priority": "HIGH",
                "confidence": 87,
                "warranty": True,
                "assigned_to": "Tech Support Team",
                "estimated_resolution": now + timedelta(hours=4),
            },
            {
                "ticket_id": "T-2366",
                "device_id": "DEV002",
                "customer_id": "CUST-002",
                "issue": "High temperature warning",
                "description": "Device operating at elevated temperatures consistently",
                "status": "CRITICAL",
                "priority": "HIGH",
                "confidence": 94,
                "warranty": False,
                "assigned_to": "Field Operations",
                "estimated_resolution": now + timedelta(hours=2),
            },
            {
                "ticket_id": "T-2365",
                "device_id": "DEV004",
                "customer_id": "CUST-004",
                "issue": "SSD degradation",
                "description": "Solid state drive showing signs of wear and performance degradation",
                "status": "ASSIGNED",
                "priority": "MEDIUM",
                "confidence": 76,
                "warranty": True,
                "assigned_to": "Hardware Team",
                "estimated_resolution": now + timedelta(hours=24),
            },
            {
                "ticket_id": "T-2364",
                "device_id": "DEV005",
                "customer_id": "CUST-005",
                "issue": "Memory usage spike",
                "description": "Unusual memory consumption patterns detected",
                "status": "RESOLVED",
                "priority": "LOW",
                "confidence": 68,
                "warranty": False,
                "created_at": now - timedelta(hours=8),
                "resolved_at": now - timedelta(hours=2),
            },
        ]

    # ========================================================================
    # SEEDING STEPS
    # ========================================================================

    async def _create_missing(self, db: AsyncSession, repository, model, rows) -> int:
        created = 0
        for row in rows:
            key = row[repository.key_column]
            if await repository.find_by_key(db, key) is not None:
                logger.debug(f"{model.__name__} '{key}' already exists, skipping...")
                continue
            db.add(model(**row))
            created += 1
        await db.flush()
        logger.info(f"✅ {model.__name__}: {created} created")
        return created

    async def create_ticket_snapshot(self, db: AsyncSession) -> int:
        if await TicketTelemetryRepository.find_by_key(db, "T-2367") is not None:
            return 0
        db.add(
            TicketTelemetry(
                ticket_id="T-2367",
                read_error_rate=78,
                temperature=62,
                reallocated_sectors=42,
                spin_retry_count=15,
                power_on_hours=12450,
                smart_status="Failing",
            )
        )
        await db.flush()
        return 1

    async def create_system_events(self, db: AsyncSession) -> int:
        """System events have no business key; skip when any demo event exists."""
        events = [
            {
                "type": SystemEventType.ALERT.value,
                "title": "A defect has been detected",
                "message": "Dell Inspiron 15: Disk failure imminent",
                "details": "Health score dropped to 23%",
                "severity": "HIGH",
                "source": "AI_ANALYSIS",
            },
            {
                "type": SystemEventType.SYSTEM.value,
                "title": "Analysis has been done",
                "message": "HP Pavilion Desktop: High temperature analysis completed",
                "details": "Operating at 45°C - within acceptable range",
                "severity": "MEDIUM",
                "source": "THERMAL_MONITOR",
            },
            {
                "type": SystemEventType.TICKET.value,
                "title": "Ticket Opened",
                "message": "Maintenance ticket created for ASUS ZenBook 14",
                "details": "Scheduled maintenance for disk optimization",
                "severity": "LOW",
                "source": "TICKET_SYSTEM",
            },
        ]
        result = await db.execute(
            select(SystemEvent.id).where(SystemEvent.title == events[0]["title"]).limit(1)
        )
        if result.scalar_one_or_none() is not None:
            return 0
        db.add_all(SystemEvent(**event) for event in events)
        await db.flush()
        return len(events)

    async def create_telemetry(self, db: AsyncSession) -> int:
        """Hourly samples for the last day, jittered around each device snapshot."""
        result = await db.execute(select(TelemetryData.id).limit(1))
        if result.scalar_one_or_none() is not None:
            return 0

        created = 0
        for device in self.devices_data():
            for hours_ago in range(TELEMETRY_HOURS, 0, -1):
                db.add(
                    TelemetryData(
                        device_id=device["device_id"],
                        timestamp=self.now - timedelta(hours=hours_ago),
                        temperature=device["temperature"] + random.uniform(-3, 3),
                        cpu_usage=max(0.0, device["cpu_usage"] + random.uniform(-10, 10)),
                        memory_usage=max(0.0, device["memory_usage"] + random.uniform(-5, 5)),
                        disk_usage=device["disk_usage"],
                        power_consumption=device["power_consumption"] + random.uniform(-20, 20),
                    )
                )
                created += 1
        await db.flush()
        return created

    async def create_analytics(self, db: AsyncSession) -> int:
        created = 0
        today = self.now.date()
        for days_ago in range(29, -1, -1):
            day = today - timedelta(days=days_ago)
            if await AnalyticsRepository.find_by_key(db, day) is not None:
                continue
            db.add(
                Analytics(
                    date=day,
                    total_devices=random.randint(950, 999),
                    devices_online=random.randint(900, 949),
                    devices_offline=random.randint(5, 24),
                    high_risk_devices=random.randint(5, 14),
                    medium_risk_devices=random.randint(20, 49),
                    low_risk_devices=random.randint(800, 849),
                    total_tickets=random.randint(10, 29),
                    open_tickets=random.randint(5, 19),
                    resolved_tickets=random.randint(5, 14),
                    avg_response_time=random.random() * 2 + 1,
                    avg_resolution_time=random.random() * 8 + 4,
                )
            )
            created += 1
        await db.flush()
        return created

    async def run(self, db: AsyncSession) -> int:
        """Execute every seeding step in one transaction; returns rows created."""
        logger.info("🚀 Demo data seeding started...")
        try:
            created = await self._create_missing(
                db, CustomerRepository, Customer, self.customers_data()
            )
            created += await self._create_missing(
                db, DeviceRepository, Device, self.devices_data()
            )
            created += await self._create_missing(
                db, TicketRepository, Ticket, self.tickets_data()
            )
            created += await self.create_ticket_snapshot(db)
            created += await self.create_system_events(db)
            created += await self.create_telemetry(db)
            created += await self.create_analytics(db)
            await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"❌ Demo data seeding failed: {e}")
            await db.rollback()
            raise

        logger.info(f"🎉 Demo data seeding completed ({created} rows created)")
        return created


async def seed_demo_data(db: AsyncSession) -> int:
    """
    Convenience function to seed the demo dataset.

    Returns:
        Number of rows created
    """
    return await DemoDataSeeder().run(db)


if __name__ == "__main__":
    """
    Standalone execution.
    Usage: python -m db.setup
    """
    import asyncio

    from core.database import AsyncSessionLocal, close_db, init_db

    async def main():
        await init_db()
        async with AsyncSessionLocal() as db:
            await seed_demo_data(db)
        await close_db()

    asyncio.run(main())
