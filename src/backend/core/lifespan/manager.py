"""
Application lifespan manager.

This module provides the lifespan context manager that handles
startup and shutdown events for the FastAPI application.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from core.config import settings
from core.logging_config import LogConfig
from . import tasks


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Setup logging
    log_config = LogConfig(**settings.logging.log_config)
    await tasks.initialize_logging(settings, log_config)

    logger = logging.getLogger("main")

    # Log CORS configuration for debugging
    await tasks.log_cors_configuration(settings, logger)

    # Initialize database
    await tasks.initialize_database()

    # Demo customers, devices and tickets (DATABASE_SEED_DEMO_DATA)
    if settings.database.seed_demo_data:
        await tasks.seed_demo_data()

    yield

    # Shutdown
    print(f"🛑 Shutting down {settings.api.app_name}...")
    logger.info(f"🛑 Shutting down {settings.api.app_name}...")

    # Close database connections
    await tasks.shutdown_database()

    # Stop logging queue listener last so shutdown messages are flushed
    await tasks.shutdown_logging()
