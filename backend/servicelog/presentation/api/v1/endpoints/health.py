"""Health check endpoint — reports the app version and whether the database answers."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from servicelog.config import get_settings
from servicelog.domain.exceptions import RepositoryError
from servicelog.infrastructure.database.reporting_projection import ServiceLogReportingProjection
from servicelog.infrastructure.database.session import get_db_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_db_session)) -> dict:
    """Returns the application health status.

    ``status`` is ``degraded`` when the database cannot be queried; the
    endpoint itself still answers 200 so that load balancers can read it.
    """
    settings = get_settings()
    database = "ok"
    projection_available = False
    try:
        await session.execute(text("SELECT 1"))
        projection_available = await ServiceLogReportingProjection(session).is_available()
    except (SQLAlchemyError, RepositoryError) as exc:
        logger.error("Health check database query failed: %s", exc)
        database = "unavailable"

    return {
        "status": "healthy" if database == "ok" else "degraded",
        "version": settings.app_version,
        "environment": settings.app_env,
        "database": database,
        "reporting_projection": projection_available,
    }
