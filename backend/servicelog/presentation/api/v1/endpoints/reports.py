"""Reporting endpoints — filtered service logs, statistics and projection upkeep."""

from fastapi import APIRouter, Depends, Query

from servicelog.application.schemas import (
    PageResponse,
    ProjectionRefreshResponse,
    ProjectionStatusResponse,
    ServiceLogStatisticsResponse,
    ServiceLogSummaryResponse,
)
from servicelog.application.services import ReportingService
from servicelog.domain.entities import ServiceLogFilters
from servicelog.infrastructure.dependencies import get_current_actor, get_reporting_service
from servicelog.presentation.api.v1.errors import domain_errors

router = APIRouter(prefix="/reports", tags=["Reports"])

_DATE = r"^\d{4}-\d{2}-\d{2}$"


def get_filters(
    user_id: str | None = Query(None),
    client_id: str | None = Query(None),
    activity_id: str | None = Query(None),
    is_draft: bool | None = Query(None),
    start_date: str | None = Query(None, pattern=_DATE, description="Inclusive, YYYY-MM-DD"),
    end_date: str | None = Query(None, pattern=_DATE, description="Inclusive, YYYY-MM-DD"),
) -> ServiceLogFilters:
    return ServiceLogFilters(
        user_id=user_id,
        client_id=client_id,
        activity_id=activity_id,
        is_draft=is_draft,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/service-logs", response_model=PageResponse[ServiceLogSummaryResponse])
async def filtered_logs(
    filters: ServiceLogFilters = Depends(get_filters),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    order_by: str = Query("service_date"),
    order_direction: str = Query("DESC"),
    use_projection: bool = Query(True, description="False reads the live tables"),
    service: ReportingService = Depends(get_reporting_service),
) -> PageResponse[ServiceLogSummaryResponse]:
    with domain_errors():
        result = await service.filtered_logs(
            filters,
            page=page,
            limit=limit,
            order_by=order_by,
            order_direction=order_direction,
            use_projection=use_projection,
        )
    return PageResponse[ServiceLogSummaryResponse].model_validate(result, from_attributes=True)


@router.get("/statistics", response_model=ServiceLogStatisticsResponse)
async def statistics(
    filters: ServiceLogFilters = Depends(get_filters),
    use_projection: bool = Query(True, description="False reads the live tables"),
    service: ReportingService = Depends(get_reporting_service),
) -> ServiceLogStatisticsResponse:
    with domain_errors():
        stats = await service.statistics(filters, use_projection=use_projection)
    return ServiceLogStatisticsResponse.model_validate(stats, from_attributes=True)


@router.get("/projection", response_model=ProjectionStatusResponse)
async def projection_status(
    service: ReportingService = Depends(get_reporting_service),
) -> ProjectionStatusResponse:
    with domain_errors():
        available, refreshed_at = await service.projection_status()
    return ProjectionStatusResponse(available=available, last_refreshed_at=refreshed_at)


@router.post("/projection/refresh", response_model=ProjectionRefreshResponse)
async def refresh_projection(
    actor_id: str = Depends(get_current_actor),
    service: ReportingService = Depends(get_reporting_service),
) -> ProjectionRefreshResponse:
    """Rebuild the reporting projection from the live tables."""
    with domain_errors():
        rows = await service.refresh_projection()
        _, refreshed_at = await service.projection_status()
    return ProjectionRefreshResponse(rows=rows, refreshed_at=refreshed_at)
