"""Schema bootstrap — creates the core tables and indexes."""

import logging
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine

from servicelog.infrastructure.database.base import Base
from servicelog.infrastructure.database import models  # noqa: F401  (registers tables)

logger = logging.getLogger(__name__)


def ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-based SQLite database if needed."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    database = url.database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)


async def create_schema(engine: AsyncEngine) -> None:
    """Create every core table and index that does not exist yet.

    The reporting projection is not part of this schema: it is created on its
    first refresh, and readers fall back to the live join until then.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready (%d tables)", len(Base.metadata.tables))


async def drop_schema(engine: AsyncEngine) -> None:
    """Drop every core table in reverse dependency order."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Database schema dropped")
