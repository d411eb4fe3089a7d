"""Read-only audit trail endpoints."""

from fastapi import APIRouter, Depends, Query

from servicelog.application.schemas import AuditLogEntryResponse, PageResponse
from servicelog.application.services import AuditLogService
from servicelog.domain.entities import AuditAction
from servicelog.infrastructure.dependencies import get_audit_log_service
from servicelog.presentation.api.v1.errors import domain_errors

router = APIRouter(prefix="/audit-log", tags=["Audit Log"])


@router.get("", response_model=PageResponse[AuditLogEntryResponse])
async def list_entries(
    table_name: str | None = Query(None),
    record_id: str | None = Query(None),
    user_id: str | None = Query(None, description="Filter by acting user"),
    action: AuditAction | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    service: AuditLogService = Depends(get_audit_log_service),
) -> PageResponse[AuditLogEntryResponse]:
    """Audit entries, newest first."""
    with domain_errors():
        result = await service.list_entries(
            page=page,
            limit=limit,
            table_name=table_name,
            record_id=record_id,
            user_id=user_id,
            action=action,
        )
    return PageResponse[AuditLogEntryResponse](
        items=[AuditLogEntryResponse.from_entry(entry) for entry in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get("/{table_name}/{record_id}", response_model=list[AuditLogEntryResponse])
async def record_history(
    table_name: str,
    record_id: str,
    service: AuditLogService = Depends(get_audit_log_service),
) -> list[AuditLogEntryResponse]:
    """Every change to one row, oldest first."""
    with domain_errors():
        entries = await service.history(table_name, record_id)
    return [AuditLogEntryResponse.from_entry(entry) for entry in entries]
