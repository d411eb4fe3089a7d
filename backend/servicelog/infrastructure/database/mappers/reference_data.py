"""Mappers for clients, activities and outcomes.

The tables use integer keys while the domain passes ids around as strings.
"""

from typing import Generic, TypeVar

from servicelog.domain.entities import Activity, Client, Outcome, ReferenceItem
from servicelog.infrastructure.database.models import ActivityModel, ClientModel, OutcomeModel
from servicelog.infrastructure.database.models.reference_data import ReferenceDataColumns

from .base import (
    EntityMapper,
    bool_from_storage,
    bool_to_storage,
    date_from_storage,
    date_to_storage,
    id_from_storage,
    int_id_to_storage,
    passthrough,
)

ItemT = TypeVar("ItemT", bound=ReferenceItem)


class ReferenceDataMapper(EntityMapper[ItemT, ReferenceDataColumns], Generic[ItemT]):
    entity_class: type[ItemT]
    integer_key = True
    converters = {
        "id": int_id_to_storage,
        "name": passthrough,
        "is_active": bool_to_storage,
        "created_at": passthrough,
        "updated_at": passthrough,
        "deleted_at": date_to_storage,
    }

    def from_storage(self, row: ReferenceDataColumns) -> ItemT:
        return self.entity_class(
            id=id_from_storage(row.id),
            name=row.name,
            is_active=bool_from_storage(row.is_active),
            created_at=row.created_at,
            updated_at=row.updated_at,
            deleted_at=date_from_storage(row.deleted_at),
        )


class ClientMapper(ReferenceDataMapper[Client]):
    entity_class = Client


class ActivityMapper(ReferenceDataMapper[Activity]):
    entity_class = Activity


class OutcomeMapper(ReferenceDataMapper[Outcome]):
    entity_class = Outcome


__all__ = [
    "ReferenceDataMapper",
    "ClientMapper",
    "ActivityMapper",
    "OutcomeMapper",
    "ClientModel",
    "ActivityModel",
    "OutcomeModel",
]
