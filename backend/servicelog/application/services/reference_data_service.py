"""Application service (use case) for clients, activities and outcomes."""

from servicelog.application.interfaces import ReferenceDataRepository
from servicelog.application.schemas.reference_data import ReferenceItemCreate, ReferenceItemUpdate
from servicelog.domain.entities import Page, ReferenceItem, ReferenceItemUsage
from servicelog.domain.exceptions import EntityNotFoundError


class ReferenceDataService:
    """One instance per kind of reference data; ``entity_name`` labels errors."""

    def __init__(self, repository: ReferenceDataRepository, entity_name: str):
        self._repository = repository
        self._entity_name = entity_name

    async def get_item(self, item_id: str) -> ReferenceItem:
        item = await self._repository.find_by_id(item_id)
        if item is None:
            raise EntityNotFoundError(self._entity_name, item_id)
        return item

    async def list_items(
        self,
        *,
        page: int = 1,
        limit: int | None = None,
        order_by: str = "name",
        order_direction: str = "ASC",
    ) -> Page[ReferenceItem]:
        return await self._repository.find_all(
            page=page, limit=limit, order_by=order_by, order_direction=order_direction,
        )

    async def list_active(self) -> list[ReferenceItem]:
        return await self._repository.find_active()

    async def search(self, term: str, *, active_only: bool = True) -> list[ReferenceItem]:
        return await self._repository.search_by_name(term, active_only=active_only)

    async def usage(self) -> list[ReferenceItemUsage]:
        return await self._repository.find_with_usage()

    async def count_active(self) -> int:
        return await self._repository.count()

    async def create_item(self, data: ReferenceItemCreate, actor_id: str) -> ReferenceItem:
        return await self._repository.create_item(data.model_dump(), actor_id)

    async def bulk_create(self, names: list[str], actor_id: str) -> list[ReferenceItem]:
        return await self._repository.bulk_create_items(names, actor_id)

    async def update_item(self, item_id: str, data: ReferenceItemUpdate, actor_id: str) -> ReferenceItem:
        return await self._repository.update_item(
            item_id, data.model_dump(exclude_unset=True), actor_id,
        )

    async def toggle_active(self, item_id: str, actor_id: str) -> ReferenceItem:
        return await self._repository.toggle_active(item_id, actor_id)

    async def delete_item(self, item_id: str, actor_id: str) -> bool:
        return await self._repository.soft_delete(item_id, actor_id)
