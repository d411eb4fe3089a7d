"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from servicelog.config import get_settings
from servicelog.application.services import ReportingRefresher
from servicelog.infrastructure.database import create_schema, engine, ensure_sqlite_directory
from servicelog.infrastructure.database.reporting_projection import ServiceLogReportingProjection
from servicelog.infrastructure.database.session import async_session_factory
from servicelog.infrastructure.logging.log_config import setup_logging
from servicelog.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — create tables, start the reporting refresher."""
    settings = get_settings()
    setup_logging()

    # 1. Make sure the SQLite file can be created, then create all tables
    ensure_sqlite_directory(settings.database_url)
    await create_schema(engine)

    # 2. Start the periodic reporting projection refresh (disabled when interval is 0)
    refresher = ReportingRefresher(
        session_factory=async_session_factory,
        projection_factory=ServiceLogReportingProjection,
        interval=settings.reporting_refresh_interval_seconds,
    )
    await refresher.start()
    app.state.reporting_refresher = refresher

    yield

    # Shutdown
    await refresher.stop()
    await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "servicelog.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
