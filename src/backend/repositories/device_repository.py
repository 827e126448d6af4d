"""
Device repository: device filters and the fleet ordering.
"""
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import and_
from sqlalchemy.sql import ColumnElement

from db.models import Device, TelemetryData
from models.model_enum import RiskLevel
from repositories.base_repository import BaseRepository

RISK_PRECEDENCE = (RiskLevel.HIGH.value, RiskLevel.MEDIUM.value, RiskLevel.LOW.value)


class DeviceRepository(BaseRepository[Device]):
    """Repository for Device queries."""

    model = Device
    key_column = "device_id"
    search_columns = ("device_name", "device_brand", "device_id")

    @classmethod
    def ordering(cls) -> List[Any]:
        # Riskiest first, then least healthy, then most recently updated
        return [
            cls.rank(Device.risk_level, RISK_PRECEDENCE),
            Device.health_score.asc(),
            Device.updated_at.desc(),
            Device.id.asc(),
        ]

    @classmethod
    def build_conditions(
        cls,
        *,
        brand: Optional[str] = None,
        channel: Optional[str] = None,
        risk_level: Optional[RiskLevel] = None,
        health_score: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[ColumnElement]:
        """Translate optional list filters into AND-ed conditions."""
        conditions: List[ColumnElement] = []
        if brand:
            conditions.append(cls.contains(Device.device_brand, brand))
        if channel:
            conditions.append(cls.contains(Device.udc_channel, channel))
        if risk_level is not None:
            conditions.append(Device.risk_level == RiskLevel(risk_level).value)
        if health_score is not None:
            conditions.append(Device.health_score <= health_score)
        if search:
            conditions.append(cls.search_clause(search))
        return conditions

    @staticmethod
    def online_condition(since: datetime) -> ColumnElement:
        return Device.last_seen >= since

    @staticmethod
    def warranty_expiring_condition(now: datetime, until: datetime) -> ColumnElement:
        return and_(
            Device.warranty_status.is_(True),
            Device.warranty_expiry_date >= now,
            Device.warranty_expiry_date <= until,
        )


class TelemetryRepository(BaseRepository[TelemetryData]):
    """Repository for per-device telemetry samples."""

    model = TelemetryData
    key_column = "id"

    @classmethod
    def ordering(cls) -> List[Any]:
        return [TelemetryData.timestamp.asc(), TelemetryData.id.asc()]

    @classmethod
    def window_conditions(cls, device_id: str, since: datetime) -> List[ColumnElement]:
        return [TelemetryData.device_id == device_id, TelemetryData.timestamp >= since]
