"""Concrete repository implementation for service logs backed by SQLAlchemy.

Besides CRUD this covers the draft/submitted lifecycle and the reporting
queries. Reporting reads the projection when it exists and falls back to the
equivalent live join otherwise; the filters are expressed once against
whichever column source is chosen.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import case, false, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from servicelog.application.interfaces import (
    AuditLogRepository,
    ReportingProjection,
    ServiceLogRepository,
)
from servicelog.domain.clock import utc_now_iso
from servicelog.domain.entities import (
    AppointmentBreakdown,
    AppointmentType,
    NamedCount,
    Page,
    PatientEntry,
    PatientEntryDetails,
    ServiceLog,
    ServiceLogDetails,
    ServiceLogFilters,
    ServiceLogStatistics,
    ServiceLogSummary,
)
from servicelog.domain.exceptions import (
    DomainValidationError,
    InvalidStateTransitionError,
    PermissionDeniedError,
)
from servicelog.infrastructure.database.mappers import PatientEntryMapper, ServiceLogMapper
from servicelog.infrastructure.database.models import (
    ActivityModel,
    ClientModel,
    OutcomeModel,
    PatientEntryModel,
    ServiceLogModel,
    UserModel,
)
from servicelog.infrastructure.database.reporting_projection import (
    VIEW_TABLE,
    ServiceLogReportingProjection,
    live_service_log_rows,
)

from .base_repository import SQLAlchemyBaseRepository
from .patient_entry_repository import SQLAlchemyPatientEntryRepository

logger = logging.getLogger(__name__)

DRAFT_LIST_LIMIT = 50
STATISTICS_GROUP_LIMIT = 20

# Columns an update may change but never clear.
REQUIRED_FIELDS = ("client_id", "activity_id", "service_date", "patient_count")

# Columns a filtered report may be ordered by.
REPORT_ORDER_COLUMNS = frozenset({
    "service_date",
    "created_at",
    "updated_at",
    "submitted_at",
    "patient_count",
    "client_name",
    "activity_name",
})


def _int_or_none(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _filter_clauses(filters: ServiceLogFilters, columns) -> list[Any]:
    """Translate a filter set into clauses over ``columns`` (projection or live rows)."""
    clauses: list[Any] = []
    if filters.user_id is not None:
        clauses.append(columns.user_id == filters.user_id)
    if filters.client_id is not None:
        client_key = _int_or_none(filters.client_id)
        clauses.append(false() if client_key is None else columns.client_id == client_key)
    if filters.activity_id is not None:
        activity_key = _int_or_none(filters.activity_id)
        clauses.append(false() if activity_key is None else columns.activity_id == activity_key)
    if filters.is_draft is not None:
        clauses.append(columns.is_draft == (1 if filters.is_draft else 0))
    if filters.start_date:
        clauses.append(columns.service_date >= filters.start_date)
    if filters.end_date:
        clauses.append(columns.service_date <= filters.end_date)
    return clauses


def _to_summary(row) -> ServiceLogSummary:
    return ServiceLogSummary(
        id=row.id,
        user_id=row.user_id,
        client_id=str(row.client_id),
        activity_id=str(row.activity_id),
        service_date=row.service_date,
        patient_count=row.patient_count,
        is_draft=row.is_draft == 1,
        submitted_at=row.submitted_at or None,
        created_at=row.created_at,
        updated_at=row.updated_at,
        client_name=row.client_name,
        activity_name=row.activity_name,
        user_first_name=row.user_first_name,
        user_last_name=row.user_last_name,
        appointments=AppointmentBreakdown(
            new=row.new_appointments,
            followup=row.followup_appointments,
            dna=row.dna_appointments,
            total=row.total_appointments,
        ),
    )


class SQLAlchemyServiceLogRepository(
    SQLAlchemyBaseRepository[ServiceLog, ServiceLogModel], ServiceLogRepository,
):
    """Implements the ServiceLogRepository port."""

    model = ServiceLogModel
    mapper = ServiceLogMapper()
    entity_name = "ServiceLog"

    def __init__(
        self,
        session: AsyncSession,
        *,
        audit: AuditLogRepository | None = None,
        entries: SQLAlchemyPatientEntryRepository | None = None,
        projection: ReportingProjection | None = None,
        **kwargs: Any,
    ):
        super().__init__(session, audit=audit, **kwargs)
        self._entries = entries or SQLAlchemyPatientEntryRepository(session, audit=self._audit, **kwargs)
        self._projection = projection or ServiceLogReportingProjection(session)

    # ── Lookups ─────────────────────────────────────────────────────

    def _newest_first(self):
        return [
            ServiceLogModel.service_date.desc(),
            ServiceLogModel.created_at.desc(),
            ServiceLogModel.id.desc(),
        ]

    async def _page_where(self, clause, page: int, limit: int | None) -> Page[ServiceLog]:
        with self._storage_errors("list"):
            return await self._paginate(
                self._select_live(clause), page=page, limit=limit, order_by=self._newest_first(),
            )

    async def find_by_user(self, user_id: str, *, page: int = 1, limit: int | None = None) -> Page[ServiceLog]:
        return await self._page_where(ServiceLogModel.user_id == user_id, page, limit)

    async def find_by_client(self, client_id: str, *, page: int = 1, limit: int | None = None) -> Page[ServiceLog]:
        key = _int_or_none(client_id)
        clause = false() if key is None else ServiceLogModel.client_id == key
        return await self._page_where(clause, page, limit)

    async def find_by_activity(self, activity_id: str, *, page: int = 1, limit: int | None = None) -> Page[ServiceLog]:
        key = _int_or_none(activity_id)
        clause = false() if key is None else ServiceLogModel.activity_id == key
        return await self._page_where(clause, page, limit)

    async def find_drafts_by_user(self, user_id: str) -> list[ServiceLog]:
        with self._storage_errors("list"):
            return await self._fetch_all(
                self._select_live(ServiceLogModel.user_id == user_id, ServiceLogModel.is_draft == 1)
                .order_by(ServiceLogModel.updated_at.desc(), ServiceLogModel.id.desc())
                .limit(DRAFT_LIST_LIMIT)
            )

    async def find_by_id_with_details(self, log_id: str) -> ServiceLogDetails | None:
        with self._storage_errors("read"):
            result = await self._session.execute(
                select(
                    ServiceLogModel,
                    ClientModel.name,
                    ActivityModel.name,
                    UserModel.first_name,
                    UserModel.last_name,
                )
                .outerjoin(ClientModel, ClientModel.id == ServiceLogModel.client_id)
                .outerjoin(ActivityModel, ActivityModel.id == ServiceLogModel.activity_id)
                .outerjoin(UserModel, UserModel.id == ServiceLogModel.user_id)
                .where(ServiceLogModel.id == log_id, self._live())
                .execution_options(populate_existing=True)
            )
            row = result.first()
            if row is None:
                return None
            log_row, client_name, activity_name, first_name, last_name = row

            entry_rows = await self._session.execute(
                select(PatientEntryModel, OutcomeModel.name)
                .outerjoin(OutcomeModel, OutcomeModel.id == PatientEntryModel.outcome_id)
                .where(
                    PatientEntryModel.service_log_id == log_id,
                    self._live(PatientEntryModel.__table__),
                )
                .order_by(PatientEntryModel.created_at.asc(), PatientEntryModel.id.asc())
                .execution_options(populate_existing=True)
            )
            entry_mapper = PatientEntryMapper()
            entries = [
                PatientEntryDetails(entry=entry_mapper.from_storage(entry), outcome_name=outcome_name)
                for entry, outcome_name in entry_rows.all()
            ]

        return ServiceLogDetails(
            service_log=self.mapper.from_storage(log_row),
            client_name=client_name,
            activity_name=activity_name,
            user_first_name=first_name,
            user_last_name=last_name,
            patient_entries=entries,
        )

    # ── Writes ──────────────────────────────────────────────────────

    async def _require_active_reference(self, model, label: str, ref_id: Any) -> None:
        """A log may only point at live, active reference rows."""
        key = _int_or_none(ref_id)
        if key is not None:
            with self._storage_errors("read"):
                key = await self._scalar(
                    select(model.id).where(
                        model.id == key, self._live(model.__table__), model.is_active == 1,
                    )
                )
        if key is None:
            raise DomainValidationError(self.entity_name, f"invalid or inactive {label} '{ref_id}'")

    async def _check_references(self, data: Mapping[str, Any]) -> None:
        for field_name in REQUIRED_FIELDS:
            if field_name in data and data[field_name] is None:
                raise DomainValidationError(self.entity_name, f"{field_name} cannot be null")
        if "client_id" in data:
            await self._require_active_reference(ClientModel, "client", data["client_id"])
        if "activity_id" in data:
            await self._require_active_reference(ActivityModel, "activity", data["activity_id"])

    async def create(self, data: Mapping[str, Any], actor_id: str) -> ServiceLog:
        """Create a log; a log created already submitted gets ``submitted_at`` stamped."""
        await self._check_references(data)
        values = dict(data)
        if values.get("is_draft"):
            values["submitted_at"] = None
        elif not values.get("submitted_at"):
            values["submitted_at"] = utc_now_iso()
        return await super().create(values, actor_id)

    async def update(self, entity_id: str, changes: Mapping[str, Any], actor_id: str) -> ServiceLog:
        """Update a log; only references that actually change are re-checked."""
        existing = await self._require_live(entity_id)
        await self._check_references(
            {key: value for key, value in changes.items() if getattr(existing, key, None) != value}
        )
        return await super().update(entity_id, changes, actor_id)

    @staticmethod
    def _validate_entry(entry: Mapping[str, Any]) -> None:
        try:
            AppointmentType(entry.get("appointment_type"))
        except ValueError:
            raise DomainValidationError(
                "PatientEntry", f"unknown appointment type '{entry.get('appointment_type')}'",
            ) from None
        if entry.get("outcome_id") in (None, ""):
            raise DomainValidationError("PatientEntry", "outcome_id is required")

    async def create_with_entries(
        self,
        data: Mapping[str, Any],
        entries: Sequence[Mapping[str, Any]],
        actor_id: str,
    ) -> ServiceLog:
        """Create a log and its patient entries in one transaction."""
        for entry in entries:
            self._validate_entry(entry)
        for outcome_id in {entry["outcome_id"] for entry in entries}:
            await self._require_active_reference(OutcomeModel, "outcome", outcome_id)
        values = dict(data)
        if entries:
            values["patient_count"] = len(entries)

        async with self._atomic():
            log = await self.create(values, actor_id)
            await self._entries.bulk_create(
                [{**entry, "service_log_id": log.id} for entry in entries], actor_id,
            )
        return log

    async def find_entries(self, log_id: str) -> list[PatientEntry]:
        return await self._entries.find_by_service_log_id(log_id)

    async def submit_draft(self, log_id: str, actor_id: str) -> ServiceLog:
        log = await self._require_live(log_id)
        if not log.is_draft:
            raise InvalidStateTransitionError(self.entity_name, log_id, "is not a draft")
        if log.user_id != actor_id:
            raise PermissionDeniedError(self.entity_name, log_id, actor_id)
        return await self.update(
            log_id, {"is_draft": False, "submitted_at": utc_now_iso()}, actor_id,
        )

    async def convert_to_draft(self, log_id: str, actor_id: str) -> ServiceLog:
        log = await self._require_live(log_id)
        if log.is_draft:
            raise InvalidStateTransitionError(self.entity_name, log_id, "is already a draft")
        return await self.update(log_id, {"is_draft": True, "submitted_at": None}, actor_id)

    async def bulk_delete_by_user(self, user_id: str, actor_id: str) -> int:
        """Soft-delete every live log of a user, all or nothing."""
        with self._storage_errors("delete"):
            logs = await self._fetch_all(self._select_live(ServiceLogModel.user_id == user_id))
            async with self._atomic():
                for log in logs:
                    await self._soft_delete_loaded(log, actor_id)
        logger.info("Deleted %d service logs of user %s by=%s", len(logs), user_id, actor_id)
        return len(logs)

    # ── Reporting ───────────────────────────────────────────────────

    async def _report_source(self, use_projection: bool):
        """Column source for reporting: the projection table or the live rows."""
        if use_projection and await self._projection.is_available():
            return VIEW_TABLE
        return live_service_log_rows().subquery("service_log_rows")

    async def find_with_filters(
        self,
        filters: ServiceLogFilters,
        *,
        page: int = 1,
        limit: int | None = None,
        order_by: str = "service_date",
        order_direction: str = "DESC",
        use_projection: bool = True,
    ) -> Page[ServiceLogSummary]:
        if order_by not in REPORT_ORDER_COLUMNS:
            raise DomainValidationError(self.entity_name, f"cannot order by '{order_by}'")
        direction = (order_direction or "").upper()
        if direction not in ("ASC", "DESC"):
            raise DomainValidationError(
                self.entity_name, f"order direction must be ASC or DESC, got '{order_direction}'",
            )
        page, limit = self._paging(page, limit)

        with self._storage_errors("report"):
            source = await self._report_source(use_projection)
            clauses = _filter_clauses(filters, source.c)
            column, tie_break = source.c[order_by], source.c.id
            ordering = (
                [column.asc(), tie_break.asc()]
                if direction == "ASC"
                else [column.desc(), tie_break.desc()]
            )

            total = await self._scalar(select(func.count()).select_from(source).where(*clauses))
            result = await self._session.execute(
                select(source)
                .where(*clauses)
                .order_by(*ordering)
                .limit(limit)
                .offset((page - 1) * limit)
            )
            items = [_to_summary(row) for row in result.all()]

        return Page(items=items, total=total or 0, page=page, limit=limit)

    async def get_statistics(
        self, filters: ServiceLogFilters, *, use_projection: bool = True,
    ) -> ServiceLogStatistics:
        with self._storage_errors("report"):
            source = await self._report_source(use_projection)
            clauses = _filter_clauses(filters, source.c)

            totals = (
                await self._session.execute(
                    select(
                        func.count().label("total_logs"),
                        func.coalesce(func.sum(case((source.c.is_draft == 1, 1), else_=0)), 0),
                        func.coalesce(func.sum(case((source.c.is_draft == 0, 1), else_=0)), 0),
                        func.coalesce(func.sum(source.c.total_appointments), 0),
                    )
                    .select_from(source)
                    .where(*clauses)
                )
            ).one()
            by_client = await self._grouped(source, clauses, source.c.client_id, source.c.client_name)
            by_activity = await self._grouped(source, clauses, source.c.activity_id, source.c.activity_name)

        total_logs, total_drafts, total_submitted, total_patients = totals
        average = round(total_patients / total_logs, 2) if total_logs else 0.0
        return ServiceLogStatistics(
            total_logs=total_logs,
            total_drafts=total_drafts,
            total_submitted=total_submitted,
            total_patients=total_patients,
            average_patients_per_log=average,
            logs_by_client=by_client,
            logs_by_activity=by_activity,
        )

    async def _grouped(self, source, clauses, key_column, name_column) -> list[NamedCount]:
        count = func.count().label("count")
        result = await self._session.execute(
            select(key_column, name_column, count)
            .select_from(source)
            .where(*clauses)
            .group_by(key_column, name_column)
            .order_by(count.desc(), key_column.asc())
            .limit(STATISTICS_GROUP_LIMIT)
        )
        return [NamedCount(id=str(key), name=name, count=n) for key, name, n in result.all()]
