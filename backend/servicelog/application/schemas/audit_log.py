"""Pydantic DTOs for the audit trail."""

from typing import Any

from pydantic import BaseModel

from servicelog.domain.entities import AuditAction, AuditLogEntry


class AuditLogEntryResponse(BaseModel):
    """Audit entry with its snapshots decoded."""

    id: int
    table_name: str
    record_id: str
    action: AuditAction
    user_id: str
    old_values: dict[str, Any] | None
    new_values: dict[str, Any] | None
    timestamp: str

    @classmethod
    def from_entry(cls, entry: AuditLogEntry) -> "AuditLogEntryResponse":
        return cls(
            id=entry.id,
            table_name=entry.table_name,
            record_id=entry.record_id,
            action=entry.action,
            user_id=entry.user_id,
            old_values=entry.decode_old(),
            new_values=entry.decode_new(),
            timestamp=entry.timestamp,
        )
