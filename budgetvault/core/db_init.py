"""
Database initialization module.
Create tables for all registered models.
"""

import asyncio

from budgetvault.core.database import engine
from budgetvault.core.logging import get_logger, setup_logging

# Importing the package registers every model on the metadata
from budgetvault.models import Base

logger = get_logger(__name__)


async def init_db() -> None:
    """Initialize database by creating all tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_tables_created", tables=sorted(Base.metadata.tables))


if __name__ == "__main__":
    setup_logging()
    asyncio.run(init_db())
