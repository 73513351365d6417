"""
Database configuration and session management.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from budgetvault.core.config import settings
from budgetvault.core.logging import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ships with foreign key enforcement off for every new connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, **kwargs: Any) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Pool sizing is only passed to server databases; SQLite engines pick
    their own pool class and turn on foreign key enforcement.

    Args:
        database_url: SQLAlchemy async database URL
        **kwargs: Extra keyword arguments for create_async_engine

    Returns:
        AsyncEngine: Configured engine
    """
    options: Dict[str, Any] = {"echo": settings.debug}
    if not database_url.startswith("sqlite"):
        options["pool_size"] = settings.database_pool_size
        options["max_overflow"] = settings.database_max_overflow
    options.update(kwargs)

    new_engine = create_async_engine(database_url, **options)
    if database_url.startswith("sqlite"):
        event.listen(new_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return new_engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an engine."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# Create async engine
engine = build_engine(settings.database_url)

# Create async session factory
AsyncSessionLocal = build_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get database session.

    Yields:
        AsyncSession: Database session
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def close_database() -> None:
    """
    Close database connections.
    """
    await engine.dispose()
    logger.info("database_connections_closed")


async def is_database_healthy() -> bool:
    """
    Check if database connection is healthy.

    Returns:
        bool: True if database is healthy, False otherwise.
    """
    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            return True
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return False
