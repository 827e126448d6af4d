"""
Application factory for FastAPI.

This module provides the create_app() function that creates and configures
the FastAPI application instance.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from api.v1 import api_router
from app.routes import root_router
from core.config import settings
from core.exceptions import register_exception_handlers
from core.instrumentator import instrument_app
from core.lifespan import lifespan
from core.middleware import CorrelationIdMiddleware, DebugLoggingMiddleware


def create_app() -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application with all necessary
    middleware, routes, and instrumentation.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    # Per-IP rate limit applied to every route by SlowAPIMiddleware
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit.default_limit],
        enabled=settings.rate_limit.enabled,
    )

    app = FastAPI(
        title=settings.api.app_name,
        version=settings.api.app_version,
        description="Device fleet monitoring API: devices, tickets, customers and analytics",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Error envelope for validation, HTTP, rate limit and unhandled errors
    register_exception_handlers(app)

    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    # Debug logging middleware (only enabled when DEBUG=True)
    if settings.api.debug:
        app.add_middleware(DebugLoggingMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With", "X-Correlation-ID"],
        expose_headers=["X-Correlation-ID"],
    )

    # Outermost, so every log line of the request carries the ID
    app.add_middleware(CorrelationIdMiddleware)

    # Include routers
    app.include_router(root_router)
    app.include_router(api_router, prefix=settings.api.api_v1_prefix)

    # Instrumentation
    if settings.monitoring.enable_metrics:
        instrument_app(app)

    return app
