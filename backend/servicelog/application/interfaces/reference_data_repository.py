"""Abstract repository interface (port) for clients, activities and outcomes."""

from abc import abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from servicelog.domain.entities import ReferenceItem, ReferenceItemUsage

from .crud_repository import CrudRepository

ItemT = TypeVar("ItemT", bound=ReferenceItem)


class ReferenceDataRepository(CrudRepository[ItemT], Generic[ItemT]):
    """Port for reference data persistence; names are unique among live rows."""

    @abstractmethod
    async def is_name_taken(self, name: str, exclude_id: str | None = None) -> bool:
        ...

    @abstractmethod
    async def create_item(self, data: Mapping[str, Any], actor_id: str) -> ItemT:
        ...

    @abstractmethod
    async def update_item(self, item_id: str, changes: Mapping[str, Any], actor_id: str) -> ItemT:
        ...

    @abstractmethod
    async def bulk_create_items(self, names: Sequence[str], actor_id: str) -> list[ItemT]:
        ...

    @abstractmethod
    async def find_active(self) -> list[ItemT]:
        ...

    @abstractmethod
    async def search_by_name(self, term: str, *, active_only: bool = True) -> list[ItemT]:
        ...

    @abstractmethod
    async def toggle_active(self, item_id: str, actor_id: str) -> ItemT:
        ...

    @abstractmethod
    async def find_with_usage(self) -> list[ReferenceItemUsage]:
        """Every live item with how often live service data references it."""
        ...
