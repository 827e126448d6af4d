"""
Prometheus metrics for fleet operations.

HTTP request metrics come from prometheus-fastapi-instrumentator
(core.instrumentator); this module holds the business counters.

Usage:
    from core.metrics import track_ticket_created

    track_ticket_created(priority="HIGH")
"""

from prometheus_client import Counter

# ==============================================================================
# Business Metrics
# ==============================================================================

ticket_created_total = Counter(
    'deviceguard_tickets_created_total',
    'Total tickets created',
    ['priority']
)

ticket_status_changed_total = Counter(
    'deviceguard_ticket_status_changed_total',
    'Ticket status transitions',
    ['from_status', 'to_status']
)

ticket_deleted_total = Counter(
    'deviceguard_tickets_deleted_total',
    'Total tickets deleted',
    ['had_snapshot']
)

customer_created_total = Counter(
    'deviceguard_customers_created_total',
    'Total customers created',
    ['support_level']
)

device_registered_total = Counter(
    'deviceguard_devices_registered_total',
    'Total devices registered through the API',
    ['risk_level']
)

notification_sent_total = Counter(
    'deviceguard_notifications_sent_total',
    'Device notifications sent',
    ['priority']
)

system_event_recorded_total = Counter(
    'deviceguard_system_events_recorded_total',
    'System event log rows written',
    ['type']
)

# ==============================================================================
# Helper Functions
# ==============================================================================


def track_ticket_created(priority: str):
    """Track ticket creation."""
    ticket_created_total.labels(priority=priority).inc()


def track_ticket_status_change(from_status: str, to_status: str):
    """Track ticket status change."""
    if from_status != to_status:
        ticket_status_changed_total.labels(
            from_status=from_status,
            to_status=to_status
        ).inc()


def track_ticket_deleted(had_snapshot: bool):
    ticket_deleted_total.labels(had_snapshot=str(had_snapshot).lower()).inc()


def track_customer_created(support_level: str):
    customer_created_total.labels(support_level=support_level).inc()


def track_device_registered(risk_level: str):
    device_registered_total.labels(risk_level=risk_level).inc()


def track_notification_sent(priority: str):
    notification_sent_total.labels(priority=priority).inc()


def track_system_event(event_type: str):
    system_event_recorded_total.labels(type=event_type).inc()
