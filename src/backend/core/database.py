"""
Database configuration.
Builds the async engine and session factory, and the per-request session
dependency injected into route handlers.
"""

import logging
import time
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import PendingRollbackError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from .config import settings

logger = logging.getLogger(__name__)


def build_engine(url: str) -> AsyncEngine:
    """Create the async engine, applying pool settings only for server databases."""
    engine_kwargs = {
        "echo": bool(settings.performance.enable_query_logging),
        "future": True,
    }
    if url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs.update(
            pool_pre_ping=True,
            pool_size=settings.database.pool_size,
            max_overflow=settings.database.max_overflow,
            pool_timeout=settings.database.pool_timeout,
            pool_recycle=settings.database.pool_recycle,
            connect_args={
                "server_settings": {"application_name": settings.api.app_name},
                "command_timeout": 60,
                "timeout": 30,
            },
        )
    return create_async_engine(url, **engine_kwargs)


engine = build_engine(settings.database.url)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Prevent additional queries after commit
    autoflush=False,
    autocommit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database sessions.
    Commits on success, rolls back when the handler raises.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            if session.in_transaction():
                try:
                    await session.commit()
                except PendingRollbackError:
                    await session.rollback()
                    raise
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Create all tables that don't exist yet.
    Should be called on application startup.
    """
    # Import models so they register on SQLModel.metadata
    import db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def ping(session: AsyncSession) -> float:
    """Run a trivial query and return its round-trip time in milliseconds."""
    started = time.perf_counter()
    await session.execute(text("SELECT 1"))
    return (time.perf_counter() - started) * 1000


async def close_db() -> None:
    """
    Close database connections.
    Should be called on application shutdown.
    """
    await engine.dispose()
