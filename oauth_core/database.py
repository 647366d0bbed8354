"""
Database Module
===============
Async engine/session factory for the SQL directory and one-time provisioning.
"""

from typing import Optional
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import (
    create_async_engine as sa_create_async_engine,
    AsyncSession,
    async_sessionmaker,
    AsyncEngine,
)
from sqlalchemy.orm import DeclarativeBase
import structlog

logger = structlog.get_logger(__name__)

REGISTRY_TABLE = "oauth_application_registry"


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""
    pass


# Global engine and session factory - initialized by create_async_engine()
_engine: Optional[AsyncEngine] = None
_async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def create_async_engine(
    database_url: str,
    echo: bool = False,
    **engine_kwargs,
) -> AsyncEngine:
    """
    Create and configure the async database engine.

    Call this once during application startup.

    Args:
        database_url: Async connection string (postgresql+asyncpg://..., sqlite+aiosqlite://...)
        echo: Log SQL statements (default: False)
        **engine_kwargs: Passed to SQLAlchemy, e.g. pool_size

    Returns:
        Configured AsyncEngine instance
    """
    global _engine, _async_session_factory

    _engine = sa_create_async_engine(database_url, echo=echo, **engine_kwargs)

    _async_session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    logger.info("database_engine_initialized")
    return _engine


def get_engine() -> AsyncEngine:
    """Get the current database engine."""
    if _engine is None:
        raise RuntimeError("Database engine not initialized. Call create_async_engine() first.")
    return _engine


def AsyncSessionLocal() -> async_sessionmaker[AsyncSession]:
    """
    Get the session factory for creating database sessions.

    Usage:
        async with AsyncSessionLocal()() as session:
            ...
    """
    if _async_session_factory is None:
        raise RuntimeError("Database not initialized. Call create_async_engine() first.")
    return _async_session_factory


async def install_check(engine: Optional[AsyncEngine] = None) -> bool:
    """
    Create the OAuth tables if the registry table does not exist yet.

    Meant for deployment tooling, not for the request path.

    Returns:
        True if tables were created
    """
    # Registers the table classes on Base.metadata
    from .directory import tables  # noqa: F401

    engine = engine or get_engine()
    async with engine.begin() as conn:
        exists = await conn.run_sync(lambda c: inspect(c).has_table(REGISTRY_TABLE))
        if exists:
            return False
        await conn.run_sync(Base.metadata.create_all)

    logger.info("oauth_tables_installed")
    return True


async def close_engine() -> None:
    """Close the database engine. Call during application shutdown."""
    global _engine, _async_session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        logger.info("database_engine_closed")
