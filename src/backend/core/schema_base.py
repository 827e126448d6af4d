"""
Base schema model for API payloads.

Provides camelCase field aliases for the dashboard frontend, keeps
identifier and raw device columns under their storage names, and
serializes datetimes as UTC with a 'Z' suffix.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer

# Raw device columns that keep their storage name on the wire
SNAKE_CASE_FIELDS = frozenset(
    {
        "device_name",
        "device_brand",
        "device_subbrand",
        "device_family",
        "device_manufacturer",
        "device_modeltype",
        "device_bios_version",
        "device_purchase_date",
        "os_name",
        "os_version",
        "os_language",
        "os_country",
        "udc_channel",
    }
)


def to_camel(string: str) -> str:
    """
    Convert snake_case to camelCase.

    Example:
        >>> to_camel("health_score")
        'healthScore'
    """
    parts = string.split("_")
    return parts[0] + "".join(word.capitalize() for word in parts[1:])


def to_wire_name(string: str) -> str:
    """
    Alias generator used by every HTTP schema.

    Identifiers (``*_id``) and raw device/OS/channel columns are exposed
    unchanged, everything else is camelCased.

    Example:
        >>> to_wire_name("device_brand")
        'device_brand'
        >>> to_wire_name("customer_id")
        'customer_id'
        >>> to_wire_name("device_count")
        'deviceCount'
        >>> to_wire_name("risk_level")
        'riskLevel'
    """
    if string.endswith("_id") or string in SNAKE_CASE_FIELDS:
        return string
    return to_camel(string)


def serialize_datetime(dt: datetime | None) -> str | None:
    """
    Serialize datetime to ISO 8601 with a 'Z' suffix.

    Stored datetimes are naive UTC. Aware values are converted to UTC first.

    Returns:
        ISO 8601 string (e.g., "2025-12-18T14:30:00Z") or None
    """
    if dt is None:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)

    return dt.isoformat() + "Z"


class HTTPSchemaModel(BaseModel):
    """
    Base model for all HTTP API schemas.

    Provides:
    - Wire aliases from ``to_wire_name`` (camelCase except identifiers)
    - Support for both snake_case and aliased input
    - Conversion from ORM models (from_attributes=True)
    - Datetime serialization with UTC indicator ('Z' suffix)
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_wire_name,
        populate_by_name=True,
    )

    @field_serializer("*", mode="wrap")
    @classmethod
    def serialize_any_datetime(cls, value: Any, handler: Any) -> Any:
        """Serialize datetimes with the 'Z' suffix, delegate everything else."""
        if isinstance(value, datetime):
            return serialize_datetime(value)
        return handler(value)
