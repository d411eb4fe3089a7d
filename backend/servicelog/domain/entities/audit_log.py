"""Domain entity for audit trail entries."""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from servicelog.domain.clock import utc_now_iso


class AuditAction(str, Enum):
    """Mutation kinds recorded in the audit trail."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass
class AuditLogEntry:
    """An immutable record of who changed which row, and how.

    ``old_values`` / ``new_values`` hold JSON snapshots exactly as stored;
    use :meth:`decode_old` / :meth:`decode_new` when specific fields are needed.
    """

    table_name: str
    record_id: str
    action: AuditAction
    user_id: str
    old_values: str | None = None
    new_values: str | None = None
    id: int | None = None
    timestamp: str = field(default_factory=utc_now_iso)

    def decode_old(self) -> dict[str, Any] | None:
        return json.loads(self.old_values) if self.old_values else None

    def decode_new(self) -> dict[str, Any] | None:
        return json.loads(self.new_values) if self.new_values else None
