"""Abstract repository interfaces (ports) for custom fields and their choices."""

from abc import abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from servicelog.domain.entities import CustomField, FieldChoice, FieldType

from .crud_repository import CrudRepository


class CustomFieldRepository(CrudRepository[CustomField]):
    """Port for custom field persistence; labels are unique per client scope."""

    @abstractmethod
    async def is_label_taken(
        self, label: str, client_id: str | None, exclude_id: str | None = None,
    ) -> bool:
        ...

    @abstractmethod
    async def get_next_field_order(self, client_id: str | None = None) -> int:
        ...

    @abstractmethod
    async def create_field(
        self,
        data: Mapping[str, Any],
        actor_id: str,
        choices: Sequence[str] = (),
    ) -> CustomField:
        ...

    @abstractmethod
    async def update_field(self, field_id: str, changes: Mapping[str, Any], actor_id: str) -> CustomField:
        ...

    @abstractmethod
    async def update_field_orders(self, orders: Sequence[tuple[str, int]], actor_id: str) -> None:
        ...

    @abstractmethod
    async def find_active_ordered(
        self, client_id: str | None = None, *, include_global: bool = True,
    ) -> list[CustomField]:
        ...

    @abstractmethod
    async def find_by_type(self, field_type: FieldType) -> list[CustomField]:
        ...

    @abstractmethod
    async def find_with_choices(
        self, client_id: str | None = None, *, include_global: bool = True,
    ) -> list[CustomField]:
        ...

    @abstractmethod
    async def toggle_active(self, field_id: str, actor_id: str) -> CustomField:
        ...

    @abstractmethod
    async def delete_field(self, field_id: str, actor_id: str) -> bool:
        """Remove a field's choices and soft-delete the field."""
        ...


class FieldChoiceRepository(CrudRepository[FieldChoice]):
    """Port for dropdown choice persistence; text is unique within a field."""

    @abstractmethod
    async def is_choice_taken(self, field_id: str, text: str, exclude_id: str | None = None) -> bool:
        ...

    @abstractmethod
    async def get_next_choice_order(self, field_id: str) -> int:
        ...

    @abstractmethod
    async def create_choice(self, data: Mapping[str, Any], actor_id: str) -> FieldChoice:
        ...

    @abstractmethod
    async def update_choice(self, choice_id: str, changes: Mapping[str, Any], actor_id: str) -> FieldChoice:
        ...

    @abstractmethod
    async def bulk_create_choices(self, field_id: str, texts: Sequence[str], actor_id: str) -> list[FieldChoice]:
        ...

    @abstractmethod
    async def update_choice_orders(
        self, field_id: str, orders: Sequence[tuple[str, int]], actor_id: str,
    ) -> None:
        ...

    @abstractmethod
    async def find_by_field_id(self, field_id: str) -> list[FieldChoice]:
        ...

    @abstractmethod
    async def find_by_field_ids(self, field_ids: Sequence[str]) -> dict[str, list[FieldChoice]]:
        ...

    @abstractmethod
    async def delete_by_field_id(self, field_id: str, actor_id: str) -> int:
        """Hard-delete every choice of a field; returns how many were removed."""
        ...
