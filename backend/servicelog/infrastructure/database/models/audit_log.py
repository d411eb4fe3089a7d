"""SQLAlchemy ORM model for the audit trail."""

from sqlalchemy import CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from servicelog.infrastructure.database.base import Base


class AuditLogModel(Base):
    """ORM model — maps to the 'audit_log' table.

    ``user_id`` is not a foreign key: actors come from the authentication
    layer and may be service accounts (e.g. ``system``).
    """

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    table_name: Mapped[str] = mapped_column(String(64), nullable=False)
    record_id: Mapped[str] = mapped_column(String(64), nullable=False)
    action: Mapped[str] = mapped_column(String(10), nullable=False)
    old_values: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON
    new_values: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    timestamp: Mapped[str] = mapped_column(String(32), nullable=False)

    __table_args__ = (
        CheckConstraint("action IN ('INSERT', 'UPDATE', 'DELETE')", name="ck_audit_log_action"),
        Index("ix_audit_table_record", "table_name", "record_id"),
        Index("ix_audit_timestamp", "timestamp"),
        Index("ix_audit_user_timestamp", "user_id", "timestamp"),
        Index("ix_audit_action", "action"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return (
            f"<AuditLogModel(id={self.id}, table='{self.table_name}', "
            f"record='{self.record_id}', action='{self.action}')>"
        )
