"""Health schemas package."""
from .health import (
    DatabaseHealth,
    DetailedHealthReport,
    HealthCheck,
    HealthReport,
    SystemInfo,
)

__all__ = [
    "DatabaseHealth",
    "DetailedHealthReport",
    "HealthCheck",
    "HealthReport",
    "SystemInfo",
]
