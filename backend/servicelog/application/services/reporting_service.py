"""Application service (use case) for service log reports."""

from servicelog.application.interfaces import ReportingProjection, ServiceLogRepository
from servicelog.domain.entities import (
    Page,
    ServiceLogFilters,
    ServiceLogStatistics,
    ServiceLogSummary,
)


class ReportingService:
    """Filtered listings, statistics and projection maintenance."""

    def __init__(self, repository: ServiceLogRepository, projection: ReportingProjection):
        self._repository = repository
        self._projection = projection

    async def filtered_logs(
        self,
        filters: ServiceLogFilters,
        *,
        page: int = 1,
        limit: int | None = None,
        order_by: str = "service_date",
        order_direction: str = "DESC",
        use_projection: bool = True,
    ) -> Page[ServiceLogSummary]:
        return await self._repository.find_with_filters(
            filters,
            page=page,
            limit=limit,
            order_by=order_by,
            order_direction=order_direction,
            use_projection=use_projection,
        )

    async def statistics(
        self, filters: ServiceLogFilters, *, use_projection: bool = True,
    ) -> ServiceLogStatistics:
        return await self._repository.get_statistics(filters, use_projection=use_projection)

    async def projection_status(self) -> tuple[bool, str | None]:
        available = await self._projection.is_available()
        refreshed = await self._projection.last_refreshed_at() if available else None
        return available, refreshed

    async def refresh_projection(self) -> int:
        return await self._projection.refresh()
