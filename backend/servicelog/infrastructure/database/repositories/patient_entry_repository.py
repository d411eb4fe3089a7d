"""Concrete repository implementation for patient entries backed by SQLAlchemy."""

from collections.abc import Sequence

from sqlalchemy import false

from servicelog.application.interfaces import PatientEntryRepository
from servicelog.domain.entities import Page, PatientEntry
from servicelog.infrastructure.database.mappers import OutcomeMapper, PatientEntryMapper
from servicelog.infrastructure.database.models import PatientEntryModel

from .base_repository import SQLAlchemyBaseRepository


class SQLAlchemyPatientEntryRepository(
    SQLAlchemyBaseRepository[PatientEntry, PatientEntryModel], PatientEntryRepository,
):
    """Implements the PatientEntryRepository port."""

    model = PatientEntryModel
    mapper = PatientEntryMapper()
    entity_name = "PatientEntry"

    def _in_entry_order(self, *where):
        return self._select_live(*where).order_by(
            PatientEntryModel.created_at.asc(), PatientEntryModel.id.asc(),
        )

    async def find_by_service_log_id(self, service_log_id: str) -> list[PatientEntry]:
        with self._storage_errors("list"):
            return await self._fetch_all(
                self._in_entry_order(PatientEntryModel.service_log_id == service_log_id)
            )

    async def find_by_service_log_ids(self, service_log_ids: Sequence[str]) -> dict[str, list[PatientEntry]]:
        grouped: dict[str, list[PatientEntry]] = {log_id: [] for log_id in service_log_ids}
        if not service_log_ids:
            return grouped
        with self._storage_errors("list"):
            entries = await self._fetch_all(
                self._in_entry_order(PatientEntryModel.service_log_id.in_(list(service_log_ids)))
            )
        for entry in entries:
            grouped.setdefault(entry.service_log_id, []).append(entry)
        return grouped

    async def find_by_outcome(self, outcome_id: str, *, page: int = 1, limit: int | None = None) -> Page[PatientEntry]:
        outcome_key = OutcomeMapper().to_storage_key(outcome_id)
        clause = false() if outcome_key is None else PatientEntryModel.outcome_id == outcome_key
        with self._storage_errors("list"):
            return await self._paginate(
                self._select_live(clause),
                page=page,
                limit=limit,
                order_by=[PatientEntryModel.created_at.desc(), PatientEntryModel.id.desc()],
            )
