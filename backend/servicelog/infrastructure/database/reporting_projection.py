"""Denormalised service log reporting projection.

The projection is a plain table rebuilt wholesale from the live tables on
request. Until the first refresh it does not exist, and readers fall back to
the live join built by :func:`live_service_log_rows`, which is also what the
refresh copies, so both paths expose the same columns and values.
"""

import logging

from sqlalchemy import Select, case, delete, func, insert, inspect, literal, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from servicelog.application.interfaces import ReportingProjection
from servicelog.domain.clock import utc_now_iso
from servicelog.domain.entities import AppointmentType
from servicelog.domain.exceptions import RepositoryError
from servicelog.infrastructure.database.models import (
    ActivityModel,
    ClientModel,
    PatientEntryModel,
    ServiceLogModel,
    ServiceLogReportingViewModel,
    UserModel,
)
from servicelog.infrastructure.database.transaction import atomic

logger = logging.getLogger(__name__)

VIEW_TABLE = ServiceLogReportingViewModel.__table__


def _live(column):
    return (column.is_(None)) | (column == "")


def _count_type(appointment_type: AppointmentType):
    return func.coalesce(
        func.sum(case((PatientEntryModel.appointment_type == appointment_type.value, 1), else_=0)),
        0,
    )


def live_service_log_rows(refreshed_at: str | None = None) -> Select:
    """One row per live service log with names and live appointment counts.

    Column names match the projection table; ``refreshed_at`` is only
    included when given.
    """
    counts = (
        select(
            PatientEntryModel.service_log_id.label("service_log_id"),
            func.count(PatientEntryModel.id).label("total"),
            _count_type(AppointmentType.NEW).label("new"),
            _count_type(AppointmentType.FOLLOWUP).label("followup"),
            _count_type(AppointmentType.DNA).label("dna"),
        )
        .where(_live(PatientEntryModel.deleted_at))
        .group_by(PatientEntryModel.service_log_id)
        .subquery("appointment_counts")
    )

    columns = [
        ServiceLogModel.id.label("id"),
        ServiceLogModel.user_id.label("user_id"),
        UserModel.first_name.label("user_first_name"),
        UserModel.last_name.label("user_last_name"),
        ServiceLogModel.client_id.label("client_id"),
        ClientModel.name.label("client_name"),
        ServiceLogModel.activity_id.label("activity_id"),
        ActivityModel.name.label("activity_name"),
        ServiceLogModel.service_date.label("service_date"),
        ServiceLogModel.patient_count.label("patient_count"),
        ServiceLogModel.is_draft.label("is_draft"),
        ServiceLogModel.submitted_at.label("submitted_at"),
        func.coalesce(counts.c.total, 0).label("total_appointments"),
        func.coalesce(counts.c.new, 0).label("new_appointments"),
        func.coalesce(counts.c.followup, 0).label("followup_appointments"),
        func.coalesce(counts.c.dna, 0).label("dna_appointments"),
        ServiceLogModel.created_at.label("created_at"),
        ServiceLogModel.updated_at.label("updated_at"),
    ]
    if refreshed_at is not None:
        columns.append(literal(refreshed_at).label("refreshed_at"))

    return (
        select(*columns)
        .select_from(ServiceLogModel)
        .outerjoin(ClientModel, ClientModel.id == ServiceLogModel.client_id)
        .outerjoin(ActivityModel, ActivityModel.id == ServiceLogModel.activity_id)
        .outerjoin(UserModel, UserModel.id == ServiceLogModel.user_id)
        .outerjoin(counts, counts.c.service_log_id == ServiceLogModel.id)
        .where(_live(ServiceLogModel.deleted_at))
    )


class ServiceLogReportingProjection(ReportingProjection):
    """Implements the ReportingProjection port on the current session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def is_available(self) -> bool:
        try:
            conn = await self._session.connection()
            return await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).has_table(VIEW_TABLE.name)
            )
        except SQLAlchemyError as exc:
            logger.error("Failed to inspect %s: %s", VIEW_TABLE.name, exc)
            raise RepositoryError("inspect", VIEW_TABLE.name, str(exc)) from exc

    async def refresh(self) -> int:
        """Rebuild every row in one transaction; safe to call repeatedly."""
        refreshed_at = utc_now_iso()
        rows = live_service_log_rows(refreshed_at)
        try:
            async with atomic(self._session):
                conn = await self._session.connection()
                await conn.run_sync(lambda sync_conn: VIEW_TABLE.create(sync_conn, checkfirst=True))
                await self._session.execute(delete(VIEW_TABLE))
                await self._session.execute(
                    insert(VIEW_TABLE).from_select(
                        [column.name for column in rows.selected_columns], rows,
                    )
                )
                written = (
                    await self._session.execute(select(func.count()).select_from(VIEW_TABLE))
                ).scalar() or 0
        except SQLAlchemyError as exc:
            logger.error("Failed to refresh %s: %s", VIEW_TABLE.name, exc)
            raise RepositoryError("refresh", VIEW_TABLE.name, str(exc)) from exc

        logger.info("Reporting projection refreshed: %d rows at %s", written, refreshed_at)
        return written

    async def last_refreshed_at(self) -> str | None:
        if not await self.is_available():
            return None
        try:
            result = await self._session.execute(select(func.max(VIEW_TABLE.c.refreshed_at)))
        except SQLAlchemyError as exc:
            raise RepositoryError("read", VIEW_TABLE.name, str(exc)) from exc
        return result.scalar()
