"""Concrete repository implementation for custom form fields backed by SQLAlchemy.

Field labels are unique within a scope: every client has its own scope and
fields with no client share the global scope.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import false, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from servicelog.application.interfaces import AuditLogRepository, CustomFieldRepository
from servicelog.domain.entities import CustomField, FieldType
from servicelog.domain.exceptions import DomainValidationError, DuplicateEntityError
from servicelog.infrastructure.database.mappers import CustomFieldMapper
from servicelog.infrastructure.database.models import ClientModel, CustomFieldModel

from .base_repository import SQLAlchemyBaseRepository
from .field_choice_repository import SQLAlchemyFieldChoiceRepository

logger = logging.getLogger(__name__)


class SQLAlchemyCustomFieldRepository(
    SQLAlchemyBaseRepository[CustomField, CustomFieldModel], CustomFieldRepository,
):
    """Implements the CustomFieldRepository port."""

    model = CustomFieldModel
    mapper = CustomFieldMapper()
    entity_name = "CustomField"
    audit_exclude = frozenset({"choices"})

    def __init__(
        self,
        session: AsyncSession,
        *,
        audit: AuditLogRepository | None = None,
        choices: SQLAlchemyFieldChoiceRepository | None = None,
        **kwargs: Any,
    ):
        super().__init__(session, audit=audit, **kwargs)
        self._choices = choices or SQLAlchemyFieldChoiceRepository(session, audit=self._audit, **kwargs)

    @staticmethod
    def _scope(client_id: str | None):
        if client_id is None:
            return CustomFieldModel.client_id.is_(None)
        key = CustomFieldMapper().to_storage_key(client_id)
        if key is None:
            return false()
        return CustomFieldModel.client_id == key

    @staticmethod
    def _field_type(value: Any) -> FieldType:
        try:
            return FieldType(value)
        except ValueError:
            raise DomainValidationError("CustomField", f"unknown field type '{value}'") from None

    async def _require_client(self, client_id: str | None) -> None:
        """A scoped field must belong to a live client."""
        if client_id is None:
            return
        key = self.mapper.to_storage_key(client_id)
        if key is not None:
            with self._storage_errors("read"):
                key = await self._scalar(
                    select(ClientModel.id).where(ClientModel.id == key, self._live(ClientModel.__table__))
                )
        if key is None:
            raise DomainValidationError(self.entity_name, f"unknown client '{client_id}'")

    async def is_label_taken(
        self, label: str, client_id: str | None, exclude_id: str | None = None,
    ) -> bool:
        where = [
            self._scope(client_id),
            func.lower(CustomFieldModel.field_label) == label.strip().lower(),
        ]
        key = self.mapper.to_storage_key(exclude_id)
        if key is not None:
            where.append(CustomFieldModel.id != key)
        with self._storage_errors("read"):
            total = await self._scalar(
                select(func.count()).select_from(self.table).where(self._live(), *where)
            )
        return bool(total)

    async def get_next_field_order(self, client_id: str | None = None) -> int:
        with self._storage_errors("read"):
            current = await self._scalar(
                select(func.max(CustomFieldModel.field_order)).where(
                    self._live(), self._scope(client_id),
                )
            )
        return (current or 0) + 1

    async def create_field(
        self,
        data: Mapping[str, Any],
        actor_id: str,
        choices: Sequence[str] = (),
    ) -> CustomField:
        """Create a field and its dropdown choices together.

        Every check runs before the first write, so a rejected field never
        leaves a row behind.
        """
        label = (data.get("field_label") or "").strip()
        if not label:
            raise DomainValidationError(self.entity_name, "field_label is required")
        field_type = self._field_type(data.get("field_type", FieldType.TEXT))
        choice_texts = [(text or "").strip() for text in choices]
        if field_type == FieldType.DROPDOWN and not any(choice_texts):
            raise DomainValidationError(self.entity_name, "dropdown fields need at least one choice")
        if field_type != FieldType.DROPDOWN and choice_texts:
            raise DomainValidationError(self.entity_name, "only dropdown fields can have choices")

        client_id = data.get("client_id")
        await self._require_client(client_id)
        if await self.is_label_taken(label, client_id):
            raise DuplicateEntityError(self.entity_name, "field_label", label)

        values = {**data, "field_label": label, "field_type": field_type}
        if values.get("field_order") is None:
            values["field_order"] = await self.get_next_field_order(client_id)

        async with self._atomic():
            field = await self.create(values, actor_id)
            if choice_texts:
                field.choices = await self._choices.bulk_create_choices(field.id, choice_texts, actor_id)
        return field

    async def update_field(self, field_id: str, changes: Mapping[str, Any], actor_id: str) -> CustomField:
        field = await self._require_live(field_id)
        changes = dict(changes)
        if "field_label" in changes:
            changes["field_label"] = (changes["field_label"] or "").strip()
            if not changes["field_label"]:
                raise DomainValidationError(self.entity_name, "field_label is required")
        if "field_type" in changes:
            changes["field_type"] = self._field_type(changes["field_type"])
            if changes["field_type"] == FieldType.DROPDOWN and not await self._choices.find_by_field_id(field_id):
                raise DomainValidationError(self.entity_name, "dropdown fields need at least one choice")

        label = changes.get("field_label", field.field_label)
        client_id = changes.get("client_id", field.client_id)
        if "client_id" in changes:
            await self._require_client(client_id)
        if "field_label" in changes or "client_id" in changes:
            if await self.is_label_taken(label, client_id, exclude_id=field_id):
                raise DuplicateEntityError(self.entity_name, "field_label", label)
        return await self.update(field_id, changes, actor_id)

    async def update_field_orders(self, orders: Sequence[tuple[str, int]], actor_id: str) -> None:
        """Write every ``(field_id, order)`` pair as given, all or nothing."""
        async with self._atomic():
            for field_id, order in orders:
                await self.update(field_id, {"field_order": order}, actor_id)
        logger.info("Reordered %d custom fields by=%s", len(orders), actor_id)

    def _active_ordered(self, *where):
        return self._select_live(CustomFieldModel.is_active == 1, *where).order_by(
            CustomFieldModel.field_order.asc(),
            CustomFieldModel.field_label.asc(),
            CustomFieldModel.id.asc(),
        )

    async def find_active_ordered(
        self, client_id: str | None = None, *, include_global: bool = True,
    ) -> list[CustomField]:
        """Active form fields for a client, or the global fields when no client is given."""
        if client_id is None:
            scope = self._scope(None)
        elif include_global:
            scope = or_(self._scope(client_id), self._scope(None))
        else:
            scope = self._scope(client_id)
        with self._storage_errors("list"):
            return await self._fetch_all(self._active_ordered(scope))

    async def find_by_type(self, field_type: FieldType) -> list[CustomField]:
        with self._storage_errors("list"):
            return await self._fetch_all(
                self._active_ordered(CustomFieldModel.field_type == self._field_type(field_type).value)
            )

    async def find_with_choices(
        self, client_id: str | None = None, *, include_global: bool = True,
    ) -> list[CustomField]:
        fields = await self.find_active_ordered(client_id, include_global=include_global)
        choices = await self._choices.find_by_field_ids([field.id for field in fields])
        for field in fields:
            field.choices = choices.get(field.id, [])
        return fields

    async def toggle_active(self, field_id: str, actor_id: str) -> CustomField:
        field = await self._require_live(field_id)
        return await self.update(field_id, {"is_active": not field.is_active}, actor_id)

    async def delete_field(self, field_id: str, actor_id: str) -> bool:
        field = await self._require_live(field_id)
        async with self._atomic():
            await self._choices.delete_by_field_id(field.id, actor_id)
            await self.soft_delete(field.id, actor_id)
        return True
