"""Database connection and session management.

This module provides SQLModel engine setup, connection pooling, session management,
and database initialization utilities for the event server.
"""

from collections.abc import AsyncIterator, Generator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool, StaticPool
from sqlmodel import Session, SQLModel, create_engine

from .config import Settings, settings
from .logging_config import get_logger
# Import models to register them with SQLModel
from .models import Admin, Event, Item, Rsvp, User  # noqa: F401

logger = get_logger("database")


def engine_options(config: Settings) -> dict[str, Any]:
    """Build ``create_engine`` keyword arguments for the configured database.

    PostgreSQL gets a bounded connection pool; SQLite disables the
    same-thread check, and in-memory SQLite shares one connection so every
    session sees the same database.
    """
    options: dict[str, Any] = {"echo": config.debug}

    if config.database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in config.database_url:
            options["poolclass"] = StaticPool
        return options

    options.update(
        poolclass=QueuePool,
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_timeout=30,
        pool_recycle=3600,
        pool_pre_ping=True,
    )
    return options


# Create database engine with connection pooling
engine = create_engine(settings.database_url, **engine_options(settings))


def get_session() -> Generator[Session, None, None]:
    """Dependency to get database session.

    The session is rolled back if the request fails and is always closed,
    so the connection goes back to the pool on every exit path.

    Yields:
        Session: SQLModel database session
    """
    with Session(engine) as session:
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def create_db_and_tables() -> None:
    """Create database tables based on SQLModel definitions.

    Note:
        This function is idempotent - it won't recreate existing tables.
    """
    SQLModel.metadata.create_all(engine)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """FastAPI lifespan context manager for database initialization.

    Creates tables during application startup and disposes of pooled
    connections during shutdown.
    """
    logger.info("Creating database tables", extra={"database": settings.safe_database_url})
    create_db_and_tables()
    yield
    logger.info("Disposing database engine")
    engine.dispose()


def get_database_info() -> dict[str, Any]:
    """Get database connection information for health checks.

    Returns:
        dict: Database URL without credentials and pool status
    """
    pool = engine.pool
    info: dict[str, Any] = {
        "url": settings.safe_database_url,
        "pool": type(pool).__name__,
    }
    if isinstance(pool, QueuePool):
        info.update(
            pool_size=pool.size(),
            checked_in=pool.checkedin(),
            checked_out=pool.checkedout(),
            overflow=pool.overflow(),
        )
    return info


def check_database_connection() -> bool:
    """Test database connection.

    Returns:
        bool: True if ``SELECT 1`` succeeds, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection test failed: {type(e).__name__}", exc_info=True)
        return False
