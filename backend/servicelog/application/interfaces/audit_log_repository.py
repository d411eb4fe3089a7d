"""Abstract repository interface (port) for the audit trail."""

from abc import ABC, abstractmethod
from typing import Any

from servicelog.domain.entities import AuditAction, AuditLogEntry, Page


class AuditLogRepository(ABC):
    """Port for audit trail persistence."""

    @abstractmethod
    async def record(
        self,
        *,
        table_name: str,
        record_id: str,
        action: AuditAction,
        actor_id: str,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> None:
        """Append an audit entry. Never raises on storage failure."""
        ...

    @abstractmethod
    async def find_by_record(self, table_name: str, record_id: str) -> list[AuditLogEntry]:
        """All entries for one row, oldest first."""
        ...

    @abstractmethod
    async def find_all(
        self,
        *,
        page: int = 1,
        limit: int | None = None,
        table_name: str | None = None,
        record_id: str | None = None,
        user_id: str | None = None,
        action: AuditAction | None = None,
    ) -> Page[AuditLogEntry]:
        """Filtered audit entries, newest first."""
        ...
