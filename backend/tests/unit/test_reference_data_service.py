"""Unit tests for the ReferenceDataService."""

import pytest

from servicelog.application.interfaces import ReferenceDataRepository
from servicelog.application.schemas import ReferenceItemCreate, ReferenceItemUpdate
from servicelog.application.services import ReferenceDataService
from servicelog.domain.entities import Client, Page, ReferenceItemUsage
from servicelog.domain.exceptions import DuplicateEntityError, EntityNotFoundError


class FakeClientRepository(ReferenceDataRepository[Client]):
    """In-memory fake repository for unit testing."""

    def __init__(self):
        self._items: dict[str, Client] = {}
        self._next_id = 1
        self.actors: list[str] = []

    def _live(self) -> list[Client]:
        return [item for item in self._items.values() if not item.deleted_at]

    async def find_by_id(self, entity_id):
        item = self._items.get(entity_id)
        return None if item is None or item.deleted_at else item

    async def find_all(self, *, page=1, limit=None, order_by="created_at", order_direction="DESC", where=()):
        items = sorted(self._live(), key=lambda item: getattr(item, order_by))
        if order_direction == "DESC":
            items.reverse()
        return Page(items=items, total=len(items), page=page, limit=limit or 20)

    async def create(self, data, actor_id):
        item = Client(id=str(self._next_id), **data)
        self._next_id += 1
        self._items[item.id] = item
        self.actors.append(actor_id)
        return item

    async def update(self, entity_id, changes, actor_id):
        item = await self.find_by_id(entity_id)
        if item is None:
            raise EntityNotFoundError("Client", entity_id)
        for key, value in changes.items():
            setattr(item, key, value)
        self.actors.append(actor_id)
        return item

    async def soft_delete(self, entity_id, actor_id):
        item = await self.find_by_id(entity_id)
        if item is None:
            raise EntityNotFoundError("Client", entity_id)
        item.deleted_at = "2025-01-01T00:00:00.000Z"
        return True

    async def hard_delete(self, entity_id, actor_id):
        return self._items.pop(entity_id, None) is not None

    async def bulk_create(self, rows, actor_id):
        return [await self.create(row, actor_id) for row in rows]

    async def count(self, where=()):
        return sum(1 for item in self._live() if item.is_active)

    async def is_name_taken(self, name, exclude_id=None):
        return any(i.name.lower() == name.lower() and i.id != exclude_id for i in self._live())

    async def create_item(self, data, actor_id):
        if await self.is_name_taken(data["name"]):
            raise DuplicateEntityError("Client", "name", data["name"])
        return await self.create(data, actor_id)

    async def update_item(self, item_id, changes, actor_id):
        return await self.update(item_id, changes, actor_id)

    async def bulk_create_items(self, names, actor_id):
        return await self.bulk_create([{"name": name} for name in names], actor_id)

    async def find_active(self):
        return sorted((i for i in self._live() if i.is_active), key=lambda item: item.name)

    async def search_by_name(self, term, *, active_only=True):
        return [i for i in await self.find_active() if term.lower() in i.name.lower()]

    async def toggle_active(self, item_id, actor_id):
        item = await self.find_by_id(item_id)
        return await self.update(item_id, {"is_active": not item.is_active}, actor_id)

    async def find_with_usage(self):
        return [ReferenceItemUsage(item=item, usage_count=0) for item in self._live()]


@pytest.fixture
def repository() -> FakeClientRepository:
    return FakeClientRepository()


@pytest.fixture
def service(repository) -> ReferenceDataService:
    return ReferenceDataService(repository, "Client")


@pytest.mark.asyncio
async def test_create_item_records_actor(service: ReferenceDataService, repository):
    item = await service.create_item(ReferenceItemCreate(name="Main Hospital"), "admin-1")

    assert item.id is not None
    assert item.is_active is True
    assert repository.actors == ["admin-1"]


@pytest.mark.asyncio
async def test_get_item_not_found(service: ReferenceDataService):
    with pytest.raises(EntityNotFoundError) as exc_info:
        await service.get_item("999")
    assert exc_info.value.entity_type == "Client"


@pytest.mark.asyncio
async def test_update_item_sends_only_supplied_fields(service: ReferenceDataService):
    created = await service.create_item(ReferenceItemCreate(name="Old"), "admin-1")

    updated = await service.update_item(created.id, ReferenceItemUpdate(is_active=False), "admin-1")

    assert updated.name == "Old"
    assert updated.is_active is False


@pytest.mark.asyncio
async def test_deleted_item_is_no_longer_found(service: ReferenceDataService):
    created = await service.create_item(ReferenceItemCreate(name="Gone"), "admin-1")

    assert await service.delete_item(created.id, "admin-1") is True
    with pytest.raises(EntityNotFoundError):
        await service.get_item(created.id)


@pytest.mark.asyncio
async def test_count_active(service: ReferenceDataService):
    await service.create_item(ReferenceItemCreate(name="A"), "admin-1")
    await service.create_item(ReferenceItemCreate(name="B", is_active=False), "admin-1")

    assert await service.count_active() == 1
    assert [i.name for i in await service.list_active()] == ["A"]
