"""Application service (use case) for custom form fields and their choices."""

from servicelog.application.interfaces import CustomFieldRepository, FieldChoiceRepository
from servicelog.application.schemas.common import OrderItem
from servicelog.application.schemas.custom_field import (
    CustomFieldCreate,
    CustomFieldUpdate,
    FieldChoiceCreate,
    FieldChoiceUpdate,
)
from servicelog.domain.entities import CustomField, FieldChoice
from servicelog.domain.exceptions import EntityNotFoundError


class CustomFieldService:
    """Orchestrates custom field logic. Depends on the repository ports (DI)."""

    def __init__(self, fields: CustomFieldRepository, choices: FieldChoiceRepository):
        self._fields = fields
        self._choices = choices

    async def get_field(self, field_id: str) -> CustomField:
        field = await self._fields.find_by_id(field_id)
        if field is None:
            raise EntityNotFoundError("CustomField", field_id)
        field.choices = await self._choices.find_by_field_id(field_id)
        return field

    async def list_fields(
        self, client_id: str | None = None, *, include_global: bool = True,
    ) -> list[CustomField]:
        return await self._fields.find_with_choices(client_id, include_global=include_global)

    async def create_field(self, data: CustomFieldCreate, actor_id: str) -> CustomField:
        values = data.model_dump(exclude={"choices"})
        return await self._fields.create_field(values, actor_id, choices=data.choices)

    async def update_field(self, field_id: str, data: CustomFieldUpdate, actor_id: str) -> CustomField:
        await self._fields.update_field(field_id, data.model_dump(exclude_unset=True), actor_id)
        return await self.get_field(field_id)

    async def reorder_fields(self, items: list[OrderItem], actor_id: str) -> None:
        await self._fields.update_field_orders([(item.id, item.order) for item in items], actor_id)

    async def toggle_active(self, field_id: str, actor_id: str) -> CustomField:
        await self._fields.toggle_active(field_id, actor_id)
        return await self.get_field(field_id)

    async def delete_field(self, field_id: str, actor_id: str) -> bool:
        return await self._fields.delete_field(field_id, actor_id)

    # ── Choices ─────────────────────────────────────────────────────

    async def add_choice(self, field_id: str, data: FieldChoiceCreate, actor_id: str) -> FieldChoice:
        await self.get_field(field_id)
        return await self._choices.create_choice(
            {**data.model_dump(), "field_id": field_id}, actor_id,
        )

    async def update_choice(
        self, field_id: str, choice_id: str, data: FieldChoiceUpdate, actor_id: str,
    ) -> FieldChoice:
        await self._require_choice(field_id, choice_id)
        return await self._choices.update_choice(choice_id, data.model_dump(exclude_unset=True), actor_id)

    async def reorder_choices(self, field_id: str, items: list[OrderItem], actor_id: str) -> None:
        await self._choices.update_choice_orders(
            field_id, [(item.id, item.order) for item in items], actor_id,
        )

    async def delete_choice(self, field_id: str, choice_id: str, actor_id: str) -> bool:
        await self._require_choice(field_id, choice_id)
        return await self._choices.hard_delete(choice_id, actor_id)

    async def _require_choice(self, field_id: str, choice_id: str) -> FieldChoice:
        choice = await self._choices.find_by_id(choice_id)
        if choice is None or choice.field_id != str(field_id):
            raise EntityNotFoundError("FieldChoice", choice_id)
        return choice
