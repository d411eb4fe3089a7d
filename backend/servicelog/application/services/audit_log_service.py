"""Application service (use case) for reading the audit trail."""

from servicelog.application.interfaces import AuditLogRepository
from servicelog.domain.entities import AuditAction, AuditLogEntry, Page


class AuditLogService:
    def __init__(self, repository: AuditLogRepository):
        self._repository = repository

    async def list_entries(
        self,
        *,
        page: int = 1,
        limit: int | None = None,
        table_name: str | None = None,
        record_id: str | None = None,
        user_id: str | None = None,
        action: AuditAction | None = None,
    ) -> Page[AuditLogEntry]:
        return await self._repository.find_all(
            page=page,
            limit=limit,
            table_name=table_name,
            record_id=record_id,
            user_id=user_id,
            action=action,
        )

    async def history(self, table_name: str, record_id: str) -> list[AuditLogEntry]:
        return await self._repository.find_by_record(table_name, record_id)
