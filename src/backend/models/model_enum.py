"""
Model enums for database models and query parameters.

Enumerated columns are stored as plain strings; these closed enums are
what the API validates against, so unknown values are rejected at the
boundary instead of reaching the database.
"""
from enum import Enum


class RiskLevel(str, Enum):
    """
    Predicted failure risk of a device.

    Used by Device.risk_level field.
    """
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TicketStatus(str, Enum):
    """
    Ticket status.

    ANALYSIS -> ASSIGNED -> RESOLVED/CLOSED is the usual progression,
    CRITICAL and WAITING are side states. No transitions are enforced.
    """
    ANALYSIS = "ANALYSIS"
    CRITICAL = "CRITICAL"
    ASSIGNED = "ASSIGNED"
    RESOLVED = "RESOLVED"
    WAITING = "WAITING"
    CLOSED = "CLOSED"

    @classmethod
    def closed_states(cls) -> tuple["TicketStatus", ...]:
        """Statuses that count as finished and stamp resolved_at."""
        return (cls.RESOLVED, cls.CLOSED)


class TicketPriority(str, Enum):
    """
    Ticket priority, also used as notification and event severity.

    Used by Ticket.priority and SystemEvent.severity fields.
    """
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class SupportLevel(str, Enum):
    """
    Customer service tier.

    Used by Customer.support_level field.
    """
    BASIC = "BASIC"
    PREMIUM = "PREMIUM"
    ENTERPRISE = "ENTERPRISE"


class CustomerStatus(str, Enum):
    """
    Customer account status.

    Used by Customer.status field.
    """
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class SystemEventType(str, Enum):
    """
    Kind of system event log row.

    Used by SystemEvent.type field.
    """
    TICKET = "TICKET"
    ALERT = "ALERT"
    DEVICE = "DEVICE"
    SYSTEM = "SYSTEM"


class TimeRange(str, Enum):
    """Dashboard and trend time windows."""
    LAST_24_HOURS = "24h"
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"

    @property
    def hours(self) -> int:
        return {"24h": 24, "7d": 24 * 7, "30d": 24 * 30, "90d": 24 * 90}[self.value]


class TrendMetric(str, Enum):
    """Metric families served by the trends endpoint."""
    DEVICES = "devices"
    TICKETS = "tickets"
    HEALTH = "health"
    PERFORMANCE = "performance"


class PredictionType(str, Enum):
    """Prediction families served by the predictions endpoint."""
    DEVICE_FAILURE = "device_failure"
    TICKET_VOLUME = "ticket_volume"
    MAINTENANCE = "maintenance"


class PredictionHorizon(str, Enum):
    """How far ahead predictions are generated."""
    ONE_DAY = "1d"
    SEVEN_DAYS = "7d"
    THIRTY_DAYS = "30d"

    @property
    def days(self) -> int:
        return int(self.value[:-1])
