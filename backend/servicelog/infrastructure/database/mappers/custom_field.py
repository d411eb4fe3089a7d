"""Mappers for 'custom_fields' and 'field_choices'."""

from servicelog.domain.entities import CustomField, FieldChoice, FieldType
from servicelog.infrastructure.database.models import CustomFieldModel, FieldChoiceModel

from .base import (
    EntityMapper,
    bool_from_storage,
    bool_to_storage,
    date_from_storage,
    date_to_storage,
    enum_to_storage,
    id_from_storage,
    int_id_to_storage,
    passthrough,
)


class CustomFieldMapper(EntityMapper[CustomField, CustomFieldModel]):
    integer_key = True
    converters = {
        "id": int_id_to_storage,
        "field_label": passthrough,
        "field_type": enum_to_storage,
        "field_order": passthrough,
        "is_active": bool_to_storage,
        "client_id": int_id_to_storage,
        "created_at": passthrough,
        "updated_at": passthrough,
        "deleted_at": date_to_storage,
    }

    def from_storage(self, row: CustomFieldModel) -> CustomField:
        return CustomField(
            id=id_from_storage(row.id),
            field_label=row.field_label,
            field_type=FieldType(row.field_type),
            field_order=row.field_order,
            is_active=bool_from_storage(row.is_active),
            client_id=id_from_storage(row.client_id),
            created_at=row.created_at,
            updated_at=row.updated_at,
            deleted_at=date_from_storage(row.deleted_at),
        )


class FieldChoiceMapper(EntityMapper[FieldChoice, FieldChoiceModel]):
    integer_key = True
    converters = {
        "id": int_id_to_storage,
        "field_id": int_id_to_storage,
        "choice_text": passthrough,
        "choice_order": passthrough,
        "created_at": passthrough,
        "updated_at": passthrough,
        "deleted_at": date_to_storage,
    }

    def from_storage(self, row: FieldChoiceModel) -> FieldChoice:
        return FieldChoice(
            id=id_from_storage(row.id),
            field_id=id_from_storage(row.field_id),
            choice_text=row.choice_text,
            choice_order=row.choice_order,
            created_at=row.created_at,
            updated_at=row.updated_at,
            deleted_at=date_from_storage(row.deleted_at),
        )
