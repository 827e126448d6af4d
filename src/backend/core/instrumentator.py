"""
Prometheus HTTP instrumentation.

Request count, latency and in-progress gauges per route template come from
prometheus-fastapi-instrumentator; the business counters in core.metrics
share the same default registry and are exposed on the same endpoint.
"""

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from core.config import settings


def build_instrumentator() -> Instrumentator:
    return Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=[settings.monitoring.metrics_endpoint, "/api/docs", "/api/openapi.json"],
        inprogress_name="deviceguard_http_requests_inprogress",
        inprogress_labels=True,
    )


def instrument_app(app: FastAPI) -> None:
    """Instrument ``app`` and expose the metrics endpoint."""
    instrumentator = build_instrumentator()
    instrumentator.instrument(app)
    instrumentator.expose(
        app,
        endpoint=settings.monitoring.metrics_endpoint,
        include_in_schema=False,
    )
