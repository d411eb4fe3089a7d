"""Abstract repository interfaces (ports) for service logs and patient entries."""

from abc import abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from servicelog.domain.entities import (
    Page,
    PatientEntry,
    ServiceLog,
    ServiceLogDetails,
    ServiceLogFilters,
    ServiceLogStatistics,
    ServiceLogSummary,
)

from .crud_repository import CrudRepository


class ServiceLogRepository(CrudRepository[ServiceLog]):
    """Port for service log persistence, lifecycle and reporting queries."""

    @abstractmethod
    async def find_by_user(self, user_id: str, *, page: int = 1, limit: int | None = None) -> Page[ServiceLog]:
        ...

    @abstractmethod
    async def find_by_client(self, client_id: str, *, page: int = 1, limit: int | None = None) -> Page[ServiceLog]:
        ...

    @abstractmethod
    async def find_by_activity(self, activity_id: str, *, page: int = 1, limit: int | None = None) -> Page[ServiceLog]:
        ...

    @abstractmethod
    async def find_drafts_by_user(self, user_id: str) -> list[ServiceLog]:
        ...

    @abstractmethod
    async def create_with_entries(
        self,
        data: Mapping[str, Any],
        entries: Sequence[Mapping[str, Any]],
        actor_id: str,
    ) -> ServiceLog:
        ...

    @abstractmethod
    async def find_by_id_with_details(self, log_id: str) -> ServiceLogDetails | None:
        ...

    @abstractmethod
    async def submit_draft(self, log_id: str, actor_id: str) -> ServiceLog:
        ...

    @abstractmethod
    async def convert_to_draft(self, log_id: str, actor_id: str) -> ServiceLog:
        ...

    @abstractmethod
    async def bulk_delete_by_user(self, user_id: str, actor_id: str) -> int:
        ...

    @abstractmethod
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
        ...

    @abstractmethod
    async def get_statistics(
        self, filters: ServiceLogFilters, *, use_projection: bool = True,
    ) -> ServiceLogStatistics:
        ...


class PatientEntryRepository(CrudRepository[PatientEntry]):
    """Port for patient entry persistence."""

    @abstractmethod
    async def find_by_service_log_id(self, service_log_id: str) -> list[PatientEntry]:
        ...

    @abstractmethod
    async def find_by_service_log_ids(self, service_log_ids: Sequence[str]) -> dict[str, list[PatientEntry]]:
        ...

    @abstractmethod
    async def find_by_outcome(self, outcome_id: str, *, page: int = 1, limit: int | None = None) -> Page[PatientEntry]:
        ...
