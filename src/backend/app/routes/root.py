"""
Root and API info endpoint handlers.
"""

from fastapi import APIRouter

from core.config import settings
from core.schema_base import serialize_datetime
from db.models import utc_now

router = APIRouter()

RESOURCES = ("devices", "tickets", "customers", "analytics", "health")


def _endpoint_map() -> dict:
    prefix = settings.api.api_v1_prefix
    return {name: f"{prefix}/{name}" for name in RESOURCES}


def _database_type() -> str:
    return "SQLite" if settings.database.is_sqlite else "PostgreSQL"


@router.get("/")
async def root():
    """Service info and the endpoint map."""
    return {
        "message": f"{settings.api.app_name} with FastAPI & SQLModel",
        "version": settings.api.app_version,
        "status": "running",
        "timestamp": serialize_datetime(utc_now()),
        "database": f"{_database_type()} with SQLModel",
        "endpoints": _endpoint_map(),
    }


@router.get(settings.api.api_v1_prefix)
async def api_info():
    """API v1 info."""
    return {
        "message": f"{settings.api.app_name} v1",
        "version": settings.api.app_version,
        "database": {
            "type": _database_type(),
            "orm": "SQLModel",
        },
        "endpoints": _endpoint_map(),
        "documentation": "/api/docs",
    }
