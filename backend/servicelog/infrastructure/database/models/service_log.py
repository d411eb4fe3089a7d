"""SQLAlchemy ORM models for service logs and patient entries."""

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from servicelog.infrastructure.database.base import Base, LifecycleColumns


class ServiceLogModel(LifecycleColumns, Base):
    """ORM model — maps to the 'service_logs' table."""

    __tablename__ = "service_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    client_id: Mapped[int] = mapped_column(Integer, ForeignKey("clients.id"), nullable=False)
    activity_id: Mapped[int] = mapped_column(Integer, ForeignKey("activities.id"), nullable=False)
    service_date: Mapped[str] = mapped_column(String(10), nullable=False)
    patient_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_draft: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    submitted_at: Mapped[str | None] = mapped_column(String(32), nullable=True)

    __table_args__ = (
        Index("ix_service_logs_user_draft", "user_id", "is_draft"),
        Index("ix_service_logs_user_date", "user_id", "service_date"),
        Index("ix_service_logs_client_date", "client_id", "service_date"),
        Index("ix_service_logs_activity_date", "activity_id", "service_date"),
        Index("ix_service_logs_date_range", "service_date", "created_at"),
        Index("ix_service_logs_submitted_at", "submitted_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<ServiceLogModel(id={self.id}, user_id={self.user_id}, "
            f"date='{self.service_date}', draft={self.is_draft})>"
        )


class PatientEntryModel(LifecycleColumns, Base):
    """ORM model — maps to the 'patient_entries' table."""

    __tablename__ = "patient_entries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    service_log_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("service_logs.id", ondelete="CASCADE"), nullable=False,
    )
    appointment_type: Mapped[str] = mapped_column(String(10), nullable=False)
    outcome_id: Mapped[int] = mapped_column(Integer, ForeignKey("outcomes.id"), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "appointment_type IN ('new', 'followup', 'dna')",
            name="ck_patient_entries_type",
        ),
        Index("ix_patient_entries_service_log_created", "service_log_id", "created_at"),
        Index("ix_patient_entries_outcome", "outcome_id"),
        Index("ix_patient_entries_appointment_type", "appointment_type"),
    )
