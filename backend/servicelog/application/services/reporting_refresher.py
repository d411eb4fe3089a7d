"""Reporting Refresher — asyncio daemon that keeps the reporting projection warm."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from servicelog.application.interfaces import ReportingProjection

logger = logging.getLogger(__name__)


class ReportingRefresher:
    """Rebuilds the reporting projection every ``interval`` seconds.

    Runs as an asyncio.Task inside FastAPI's lifespan. Each run gets its own
    database session from ``session_factory`` and commits on success.
    ``projection_factory`` builds the projection for that session.
    """

    def __init__(
        self,
        session_factory: Callable[[], Any],
        projection_factory: Callable[[Any], ReportingProjection],
        interval: float,
    ) -> None:
        self._session_factory = session_factory
        self._projection_factory = projection_factory
        self._interval = interval
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the refresh loop. A non-positive interval leaves it disabled."""
        if self._interval <= 0:
            logger.info("ReportingRefresher disabled (interval=%s)", self._interval)
            return
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("ReportingRefresher started (every %ss)", self._interval)

    async def stop(self) -> None:
        """Gracefully stop the refresh loop."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("ReportingRefresher stopped")

    async def refresh_once(self) -> int:
        async with self._session_factory() as session:
            rows = await self._projection_factory(session).refresh()
            await session.commit()
        return rows

    async def _loop(self) -> None:
        while self._running:
            try:
                await self.refresh_once()
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("ReportingRefresher refresh error")

            await asyncio.sleep(self._interval)
