"""
Health service: best-effort probes for the health endpoints.

Probes never raise; a failing dependency turns into a degraded report.
"""
import logging
import os
import platform
import shutil
import time

from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import ping
from core.decorators import safe_database_query
from repositories import CustomerRepository, DeviceRepository, TicketRepository
from schemas.health import (
    DatabaseHealth,
    DetailedHealthReport,
    HealthCheck,
    HealthReport,
    SystemInfo,
)

logger = logging.getLogger(__name__)

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"
DEGRADED = "degraded"

DISK_USED_PERCENT_LIMIT = 90.0

_started_at = time.monotonic()


@safe_database_query("health database ping", default_return=None)
async def _ping(db: AsyncSession):
    return await ping(db)


@safe_database_query("health row count", default_return=None)
async def _count(db: AsyncSession, repository):
    return await repository.count(db)


def _disk_check() -> HealthCheck:
    try:
        usage = shutil.disk_usage(os.getcwd())
    except OSError as e:
        logger.warning(f"Disk usage probe failed: {e}")
        return HealthCheck(status=UNHEALTHY, message=str(e))

    used_percent = round(usage.used / usage.total * 100, 1) if usage.total else 0.0
    return HealthCheck(
        status=HEALTHY if used_percent < DISK_USED_PERCENT_LIMIT else UNHEALTHY,
        free_gb=round(usage.free / 1024 ** 3, 2),
        used_percent=used_percent,
    )


class HealthService:
    """Service assembling the health reports."""

    @staticmethod
    async def get_health(db: AsyncSession) -> HealthReport:
        """Basic report: healthy when the database answers a ping."""
        latency = await _ping(db)
        database_ok = latency is not None

        if database_ok:
            database = DatabaseHealth(
                status=HEALTHY,
                devices=await _count(db, DeviceRepository) or 0,
                tickets=await _count(db, TicketRepository) or 0,
                customers=await _count(db, CustomerRepository) or 0,
            )
        else:
            database = DatabaseHealth(status=UNHEALTHY)

        return HealthReport(
            status=HEALTHY if database_ok else DEGRADED,
            uptime=round(time.monotonic() - _started_at, 3),
            version=settings.api.app_version,
            environment=settings.api.environment,
            system=SystemInfo(
                python=platform.python_version(),
                platform=platform.platform(),
                pid=os.getpid(),
            ),
            database=database,
            services={
                "api": HEALTHY,
                "database": HEALTHY if database_ok else UNHEALTHY,
                "analytics": HEALTHY if database_ok else UNHEALTHY,
            },
        )

    @staticmethod
    async def get_detailed_health(db: AsyncSession) -> DetailedHealthReport:
        """Per-dependency checks; overall healthy only if every check is."""
        api_started = time.perf_counter()
        checks = {
            "api": HealthCheck(
                status=HEALTHY,
                response_time=f"{(time.perf_counter() - api_started) * 1000:.0f}ms",
            ),
        }

        latency = await _ping(db)
        if latency is None:
            checks["database"] = HealthCheck(status=UNHEALTHY, message="Database ping failed")
        else:
            checks["database"] = HealthCheck(
                status=HEALTHY,
                query_time=f"{latency:.0f}ms",
                records=await _count(db, DeviceRepository),
            )

        checks["disk"] = _disk_check()
        checks["external"] = HealthCheck(
            status=HEALTHY, message="No external services configured"
        )

        overall = HEALTHY if all(c.status == HEALTHY for c in checks.values()) else DEGRADED
        if overall != HEALTHY:
            logger.warning(
                "Detailed health check degraded: "
                + ", ".join(name for name, c in checks.items() if c.status != HEALTHY)
            )
        return DetailedHealthReport(status=overall, checks=checks)
