"""Concrete repository implementation for dropdown field choices backed by SQLAlchemy."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import func, select

from servicelog.application.interfaces import FieldChoiceRepository
from servicelog.domain.entities import FieldChoice
from servicelog.domain.exceptions import (
    DomainValidationError,
    DuplicateEntityError,
    EntityNotFoundError,
)
from servicelog.infrastructure.database.mappers import FieldChoiceMapper
from servicelog.infrastructure.database.models import FieldChoiceModel

from .base_repository import SQLAlchemyBaseRepository

logger = logging.getLogger(__name__)


class SQLAlchemyFieldChoiceRepository(
    SQLAlchemyBaseRepository[FieldChoice, FieldChoiceModel], FieldChoiceRepository,
):
    """Implements the FieldChoiceRepository port.

    Choice text is unique within its field, compared case-insensitively.
    """

    model = FieldChoiceModel
    mapper = FieldChoiceMapper()
    entity_name = "FieldChoice"

    def _field_key(self, field_id: str) -> int:
        key = self.mapper.to_storage_key(field_id)
        if key is None:
            raise EntityNotFoundError("CustomField", field_id)
        return key

    def _ordered(self, *where):
        return self._select_live(*where).order_by(
            FieldChoiceModel.field_id.asc(),
            FieldChoiceModel.choice_order.asc(),
            FieldChoiceModel.id.asc(),
        )

    async def is_choice_taken(self, field_id: str, text: str, exclude_id: str | None = None) -> bool:
        where = [
            FieldChoiceModel.field_id == self._field_key(field_id),
            func.lower(FieldChoiceModel.choice_text) == text.strip().lower(),
        ]
        key = self.mapper.to_storage_key(exclude_id)
        if key is not None:
            where.append(FieldChoiceModel.id != key)
        with self._storage_errors("read"):
            total = await self._scalar(
                select(func.count()).select_from(self.table).where(self._live(), *where)
            )
        return bool(total)

    async def get_next_choice_order(self, field_id: str) -> int:
        with self._storage_errors("read"):
            current = await self._scalar(
                select(func.max(FieldChoiceModel.choice_order)).where(
                    self._live(), FieldChoiceModel.field_id == self._field_key(field_id),
                )
            )
        return (current or 0) + 1

    async def create_choice(self, data: Mapping[str, Any], actor_id: str) -> FieldChoice:
        field_id = data.get("field_id")
        text = (data.get("choice_text") or "").strip()
        if field_id is None:
            raise DomainValidationError(self.entity_name, "field_id is required")
        if not text:
            raise DomainValidationError(self.entity_name, "choice_text is required")
        if await self.is_choice_taken(field_id, text):
            raise DuplicateEntityError(self.entity_name, "choice_text", text)
        order = data.get("choice_order")
        if order is None:
            order = await self.get_next_choice_order(field_id)
        return await self.create(
            {**data, "choice_text": text, "choice_order": order}, actor_id,
        )

    async def update_choice(self, choice_id: str, changes: Mapping[str, Any], actor_id: str) -> FieldChoice:
        choice = await self._require_live(choice_id)
        changes = {key: value for key, value in changes.items() if key != "field_id"}
        if "choice_text" in changes:
            text = (changes["choice_text"] or "").strip()
            if not text:
                raise DomainValidationError(self.entity_name, "choice_text is required")
            if await self.is_choice_taken(choice.field_id, text, exclude_id=choice_id):
                raise DuplicateEntityError(self.entity_name, "choice_text", text)
            changes["choice_text"] = text
        return await self.update(choice_id, changes, actor_id)

    async def bulk_create_choices(self, field_id: str, texts: Sequence[str], actor_id: str) -> list[FieldChoice]:
        """Append several choices to a field; nothing is written if any text clashes."""
        cleaned = [(text or "").strip() for text in texts]
        seen: set[str] = set()
        for text in cleaned:
            if not text:
                raise DomainValidationError(self.entity_name, "choice_text is required")
            if text.lower() in seen:
                raise DuplicateEntityError(self.entity_name, "choice_text", text)
            seen.add(text.lower())
        for text in cleaned:
            if await self.is_choice_taken(field_id, text):
                raise DuplicateEntityError(self.entity_name, "choice_text", text)

        start = await self.get_next_choice_order(field_id)
        return await self.bulk_create(
            [
                {"field_id": field_id, "choice_text": text, "choice_order": start + offset}
                for offset, text in enumerate(cleaned)
            ],
            actor_id,
        )

    async def update_choice_orders(
        self, field_id: str, orders: Sequence[tuple[str, int]], actor_id: str,
    ) -> None:
        """Write every ``(choice_id, order)`` pair as given, all or nothing."""
        async with self._atomic():
            for choice_id, order in orders:
                choice = await self._require_live(choice_id)
                if choice.field_id != str(field_id):
                    raise EntityNotFoundError(self.entity_name, choice_id)
                await self.update(choice_id, {"choice_order": order}, actor_id)

    async def find_by_field_id(self, field_id: str) -> list[FieldChoice]:
        with self._storage_errors("list"):
            return await self._fetch_all(
                self._ordered(FieldChoiceModel.field_id == self._field_key(field_id))
            )

    async def find_by_field_ids(self, field_ids: Sequence[str]) -> dict[str, list[FieldChoice]]:
        keys = [self._field_key(field_id) for field_id in field_ids]
        grouped: dict[str, list[FieldChoice]] = {str(field_id): [] for field_id in field_ids}
        if not keys:
            return grouped
        with self._storage_errors("list"):
            choices = await self._fetch_all(self._ordered(FieldChoiceModel.field_id.in_(keys)))
        for choice in choices:
            grouped.setdefault(choice.field_id, []).append(choice)
        return grouped

    async def delete_by_field_id(self, field_id: str, actor_id: str) -> int:
        removed = 0
        async with self._atomic():
            for choice in await self.find_by_field_id(field_id):
                if await self.hard_delete(choice.id, actor_id):
                    removed += 1
        logger.info("Removed %d choices of field %s", removed, field_id)
        return removed
