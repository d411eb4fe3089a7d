"""Abstract repository interface (port) shared by every audited, soft-deletable table."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Generic, TypeVar

from servicelog.domain.entities import Page

EntityT = TypeVar("EntityT")


class CrudRepository(ABC, Generic[EntityT]):
    """Port for generic entity persistence — implemented in the infrastructure layer.

    Every mutation takes the acting user id and is recorded in the audit trail.
    Soft-deleted rows are invisible to every read.
    """

    @abstractmethod
    async def find_by_id(self, entity_id: str) -> EntityT | None:
        """Retrieve a live entity by id, or None."""
        ...

    @abstractmethod
    async def find_all(
        self,
        *,
        page: int = 1,
        limit: int | None = None,
        order_by: str = "created_at",
        order_direction: str = "DESC",
        where: Sequence[Any] = (),
    ) -> Page[EntityT]:
        """Retrieve one page of live entities matching the extra filters."""
        ...

    @abstractmethod
    async def create(self, data: Mapping[str, Any], actor_id: str) -> EntityT:
        """Persist a new entity and return it as stored."""
        ...

    @abstractmethod
    async def update(self, entity_id: str, changes: Mapping[str, Any], actor_id: str) -> EntityT:
        """Apply a partial update. Raises EntityNotFoundError if the entity is absent."""
        ...

    @abstractmethod
    async def soft_delete(self, entity_id: str, actor_id: str) -> bool:
        """Mark an entity deleted. Raises EntityNotFoundError if the entity is absent."""
        ...

    @abstractmethod
    async def hard_delete(self, entity_id: str, actor_id: str) -> bool:
        """Physically remove a row. Returns False if it did not exist."""
        ...

    @abstractmethod
    async def bulk_create(self, items: Iterable[Mapping[str, Any]], actor_id: str) -> list[EntityT]:
        """Create every item or none of them."""
        ...

    @abstractmethod
    async def count(self, where: Sequence[Any] = ()) -> int:
        """Count live (and, where applicable, active) rows."""
        ...
