"""Application service (use case) for recording and managing service logs."""

from servicelog.application.interfaces import ServiceLogRepository
from servicelog.application.schemas.service_log import ServiceLogCreate, ServiceLogUpdate
from servicelog.domain.entities import Page, ServiceLog, ServiceLogDetails
from servicelog.domain.exceptions import EntityNotFoundError


class ServiceLogService:
    """Orchestrates service log logic. Depends on the repository port (DI)."""

    def __init__(self, repository: ServiceLogRepository):
        self._repository = repository

    async def get_log(self, log_id: str) -> ServiceLog:
        log = await self._repository.find_by_id(log_id)
        if log is None:
            raise EntityNotFoundError("ServiceLog", log_id)
        return log

    async def get_details(self, log_id: str) -> ServiceLogDetails:
        details = await self._repository.find_by_id_with_details(log_id)
        if details is None:
            raise EntityNotFoundError("ServiceLog", log_id)
        return details

    async def list_logs(
        self,
        *,
        user_id: str | None = None,
        client_id: str | None = None,
        activity_id: str | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> Page[ServiceLog]:
        if user_id is not None:
            return await self._repository.find_by_user(user_id, page=page, limit=limit)
        if client_id is not None:
            return await self._repository.find_by_client(client_id, page=page, limit=limit)
        if activity_id is not None:
            return await self._repository.find_by_activity(activity_id, page=page, limit=limit)
        return await self._repository.find_all(page=page, limit=limit, order_by="service_date")

    async def list_drafts(self, user_id: str) -> list[ServiceLog]:
        return await self._repository.find_drafts_by_user(user_id)

    async def create_log(self, data: ServiceLogCreate, actor_id: str) -> ServiceLog:
        values = data.model_dump(exclude={"patient_entries"})
        values["user_id"] = actor_id
        entries = [entry.model_dump() for entry in data.patient_entries]
        return await self._repository.create_with_entries(values, entries, actor_id)

    async def update_log(self, log_id: str, data: ServiceLogUpdate, actor_id: str) -> ServiceLog:
        return await self._repository.update(log_id, data.model_dump(exclude_unset=True), actor_id)

    async def submit(self, log_id: str, actor_id: str) -> ServiceLog:
        return await self._repository.submit_draft(log_id, actor_id)

    async def convert_to_draft(self, log_id: str, actor_id: str) -> ServiceLog:
        return await self._repository.convert_to_draft(log_id, actor_id)

    async def delete_log(self, log_id: str, actor_id: str) -> bool:
        return await self._repository.soft_delete(log_id, actor_id)

    async def delete_user_logs(self, user_id: str, actor_id: str) -> int:
        return await self._repository.bulk_delete_by_user(user_id, actor_id)
