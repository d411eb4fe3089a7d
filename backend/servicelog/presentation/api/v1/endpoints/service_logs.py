"""Service log endpoints — recording, editing and the draft/submitted lifecycle."""

from fastapi import APIRouter, Depends, Query, status

from servicelog.application.schemas import (
    PageResponse,
    ServiceLogCreate,
    ServiceLogDetailsResponse,
    ServiceLogResponse,
    ServiceLogUpdate,
)
from servicelog.application.services import ServiceLogService
from servicelog.infrastructure.dependencies import get_current_actor, get_service_log_service
from servicelog.presentation.api.v1.errors import domain_errors

router = APIRouter(prefix="/service-logs", tags=["Service Logs"])


@router.get("", response_model=PageResponse[ServiceLogResponse])
async def list_logs(
    user_id: str | None = Query(None, description="Filter by author"),
    client_id: str | None = Query(None, description="Filter by client"),
    activity_id: str | None = Query(None, description="Filter by activity"),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    service: ServiceLogService = Depends(get_service_log_service),
) -> PageResponse[ServiceLogResponse]:
    """Live service logs, newest service date first."""
    with domain_errors():
        result = await service.list_logs(
            user_id=user_id, client_id=client_id, activity_id=activity_id, page=page, limit=limit,
        )
    return PageResponse[ServiceLogResponse].model_validate(result, from_attributes=True)


@router.get("/drafts", response_model=list[ServiceLogResponse])
async def list_my_drafts(
    actor_id: str = Depends(get_current_actor),
    service: ServiceLogService = Depends(get_service_log_service),
) -> list[ServiceLogResponse]:
    """The acting user's most recent drafts."""
    with domain_errors():
        logs = await service.list_drafts(actor_id)
    return [ServiceLogResponse.model_validate(log, from_attributes=True) for log in logs]


@router.delete("/by-user/{user_id}")
async def delete_user_logs(
    user_id: str,
    actor_id: str = Depends(get_current_actor),
    service: ServiceLogService = Depends(get_service_log_service),
) -> dict:
    with domain_errors():
        deleted = await service.delete_user_logs(user_id, actor_id)
    return {"deleted": deleted}


@router.get("/{log_id}", response_model=ServiceLogResponse)
async def get_log(
    log_id: str,
    service: ServiceLogService = Depends(get_service_log_service),
) -> ServiceLogResponse:
    with domain_errors():
        log = await service.get_log(log_id)
    return ServiceLogResponse.model_validate(log, from_attributes=True)


@router.get("/{log_id}/details", response_model=ServiceLogDetailsResponse)
async def get_log_details(
    log_id: str,
    service: ServiceLogService = Depends(get_service_log_service),
) -> ServiceLogDetailsResponse:
    """A log with client, activity and author names and its patient entries."""
    with domain_errors():
        details = await service.get_details(log_id)
    return ServiceLogDetailsResponse.model_validate(details, from_attributes=True)


@router.post("", response_model=ServiceLogResponse, status_code=status.HTTP_201_CREATED)
async def create_log(
    data: ServiceLogCreate,
    actor_id: str = Depends(get_current_actor),
    service: ServiceLogService = Depends(get_service_log_service),
) -> ServiceLogResponse:
    """Record a service log with its patient entries, authored by the acting user."""
    with domain_errors():
        log = await service.create_log(data, actor_id)
    return ServiceLogResponse.model_validate(log, from_attributes=True)


@router.put("/{log_id}", response_model=ServiceLogResponse)
async def update_log(
    log_id: str,
    data: ServiceLogUpdate,
    actor_id: str = Depends(get_current_actor),
    service: ServiceLogService = Depends(get_service_log_service),
) -> ServiceLogResponse:
    with domain_errors():
        log = await service.update_log(log_id, data, actor_id)
    return ServiceLogResponse.model_validate(log, from_attributes=True)


@router.post("/{log_id}/submit", response_model=ServiceLogResponse)
async def submit_log(
    log_id: str,
    actor_id: str = Depends(get_current_actor),
    service: ServiceLogService = Depends(get_service_log_service),
) -> ServiceLogResponse:
    """Submit a draft. Only its author may do so."""
    with domain_errors():
        log = await service.submit(log_id, actor_id)
    return ServiceLogResponse.model_validate(log, from_attributes=True)


@router.post("/{log_id}/convert-to-draft", response_model=ServiceLogResponse)
async def convert_log_to_draft(
    log_id: str,
    actor_id: str = Depends(get_current_actor),
    service: ServiceLogService = Depends(get_service_log_service),
) -> ServiceLogResponse:
    with domain_errors():
        log = await service.convert_to_draft(log_id, actor_id)
    return ServiceLogResponse.model_validate(log, from_attributes=True)


@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_log(
    log_id: str,
    actor_id: str = Depends(get_current_actor),
    service: ServiceLogService = Depends(get_service_log_service),
) -> None:
    with domain_errors():
        await service.delete_log(log_id, actor_id)
