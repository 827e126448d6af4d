"""
Lifespan startup and shutdown task functions.

This module contains individual task functions for application startup
and shutdown sequences. Each function handles a specific responsibility.
"""

import logging


async def initialize_logging(settings, log_config):
    """Setup logging configuration."""
    from core.logging_config import setup_logging
    from core.uvicorn_logging import setup_uvicorn_error_logging

    logger = logging.getLogger("main")
    setup_logging(log_config)
    setup_uvicorn_error_logging()

    print(f"🚀 Starting {settings.api.app_name} ({settings.api.environment})...")
    logger.info(f"🚀 Starting {settings.api.app_name} v{settings.api.app_version}")


async def log_cors_configuration(settings, logger):
    """Log CORS configuration for debugging."""
    print(f"🔒 CORS Allowed Origins: {settings.cors.origins}")
    logger.info(f"🔒 CORS Allowed Origins: {settings.cors.origins}")


async def initialize_database():
    """Initialize database tables."""
    from core.database import init_db

    logger = logging.getLogger("main")
    await init_db()
    print("✅ Database initialized")
    logger.info("✅ Database initialized")


async def seed_demo_data():
    """Insert the demo dataset; rows that already exist are left alone."""
    from core.database import AsyncSessionLocal
    from db.setup import seed_demo_data as seed

    logger = logging.getLogger("main")
    logger.info("Seeding demo data...")
    async with AsyncSessionLocal() as db:
        created = await seed(db)
    print(f"✅ Demo data ready ({created} rows created)")
    logger.info(f"✅ Demo data ready ({created} rows created)")


async def shutdown_database():
    """Close database connections."""
    from core.database import close_db

    logger = logging.getLogger("main")
    await close_db()
    print("✅ Database connections closed")
    logger.info("✅ Database connections closed")


async def shutdown_logging():
    """Stop the queue listener that feeds the file handlers."""
    from core.logging_config import stop_queue_listener

    stop_queue_listener()
