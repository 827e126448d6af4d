"""Health check schemas."""

from datetime import datetime
from typing import Dict, Optional

from pydantic import Field

from core.schema_base import HTTPSchemaModel
from db.models import utc_now


class DatabaseHealth(HTTPSchemaModel):
    status: str
    devices: int = 0
    tickets: int = 0
    customers: int = 0


class SystemInfo(HTTPSchemaModel):
    python: str
    platform: str
    pid: int


class HealthReport(HTTPSchemaModel):
    """Basic health report."""

    status: str
    timestamp: datetime = Field(default_factory=utc_now)
    uptime: float = Field(..., description="Seconds since the process started")
    version: str
    environment: str
    system: SystemInfo
    database: DatabaseHealth
    services: Dict[str, str]


class HealthCheck(HTTPSchemaModel):
    """Outcome of one detailed check."""

    status: str
    response_time: Optional[str] = None
    query_time: Optional[str] = None
    records: Optional[int] = None
    free_gb: Optional[float] = None
    used_percent: Optional[float] = None
    message: Optional[str] = None


class DetailedHealthReport(HTTPSchemaModel):
    """Detailed health report; healthy only when every check is."""

    status: str
    timestamp: datetime = Field(default_factory=utc_now)
    checks: Dict[str, HealthCheck]
