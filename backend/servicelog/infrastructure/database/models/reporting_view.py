"""SQLAlchemy ORM model for the denormalised service log reporting projection."""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from servicelog.infrastructure.database.base import ReportingBase


class ServiceLogReportingViewModel(ReportingBase):
    """ORM model — maps to the 'service_log_reporting_view' table.

    Holds only live service logs as of ``refreshed_at``; rebuilt wholesale
    by the reporting projection and never written to elsewhere.
    """

    __tablename__ = "service_log_reporting_view"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    user_first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    user_last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    client_id: Mapped[int] = mapped_column(Integer, nullable=False)
    client_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    activity_id: Mapped[int] = mapped_column(Integer, nullable=False)
    activity_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    service_date: Mapped[str] = mapped_column(String(10), nullable=False)
    patient_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_draft: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    submitted_at: Mapped[str | None] = mapped_column(String(32), nullable=True)
    total_appointments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    new_appointments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    followup_appointments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dna_appointments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[str] = mapped_column(String(32), nullable=False)
    updated_at: Mapped[str] = mapped_column(String(32), nullable=False)
    refreshed_at: Mapped[str] = mapped_column(String(32), nullable=False)

    __table_args__ = (
        Index("ix_reporting_view_service_date", "service_date"),
        Index("ix_reporting_view_user_date", "user_id", "service_date"),
        Index("ix_reporting_view_client", "client_id"),
        Index("ix_reporting_view_activity", "activity_id"),
    )
