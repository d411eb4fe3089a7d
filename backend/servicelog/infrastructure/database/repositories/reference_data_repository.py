"""Repositories for clients, activities and outcomes.

The three tables are identical in shape; they differ only in their model,
their mapper and which live table records their usage.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import and_, func, select

from servicelog.application.interfaces import ReferenceDataRepository
from servicelog.domain.entities import (
    Activity,
    Client,
    Outcome,
    ReferenceItem,
    ReferenceItemUsage,
)
from servicelog.domain.exceptions import DomainValidationError, DuplicateEntityError
from servicelog.infrastructure.database.mappers import ActivityMapper, ClientMapper, OutcomeMapper
from servicelog.infrastructure.database.models import (
    ActivityModel,
    ClientModel,
    OutcomeModel,
    PatientEntryModel,
    ServiceLogModel,
)

from .base_repository import SQLAlchemyBaseRepository

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=ReferenceItem)


class SQLAlchemyReferenceDataRepository(
    SQLAlchemyBaseRepository[ItemT, Any], ReferenceDataRepository[ItemT], Generic[ItemT],
):
    """Shared implementation of the ReferenceDataRepository port."""

    # Live table whose rows count as a use of an item, and its foreign key column.
    usage_model: ClassVar[type]
    usage_column: ClassVar[str]

    def _name_matches(self, name: str):
        return func.lower(self.table.c.name) == name.strip().lower()

    async def is_name_taken(self, name: str, exclude_id: str | None = None) -> bool:
        where = [self._name_matches(name)]
        key = self.mapper.to_storage_key(exclude_id)
        if key is not None:
            where.append(self._pk != key)
        with self._storage_errors("read"):
            total = await self._scalar(
                select(func.count()).select_from(self.table).where(self._live(), *where)
            )
        return bool(total)

    async def create_item(self, data: Mapping[str, Any], actor_id: str) -> ItemT:
        name = (data.get("name") or "").strip()
        if not name:
            raise DomainValidationError(self.entity_name, "name is required")
        if await self.is_name_taken(name):
            raise DuplicateEntityError(self.entity_name, "name", name)
        return await self.create({**data, "name": name}, actor_id)

    async def update_item(self, item_id: str, changes: Mapping[str, Any], actor_id: str) -> ItemT:
        await self._require_live(item_id)
        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise DomainValidationError(self.entity_name, "name is required")
            if await self.is_name_taken(name, exclude_id=item_id):
                raise DuplicateEntityError(self.entity_name, "name", name)
            changes = {**changes, "name": name}
        return await self.update(item_id, changes, actor_id)

    async def bulk_create_items(self, names: Sequence[str], actor_id: str) -> list[ItemT]:
        """Create several items at once; nothing is written if any name clashes."""
        cleaned = [(name or "").strip() for name in names]
        seen: set[str] = set()
        for name in cleaned:
            if not name:
                raise DomainValidationError(self.entity_name, "name is required")
            if name.lower() in seen:
                raise DuplicateEntityError(self.entity_name, "name", name)
            seen.add(name.lower())
        for name in cleaned:
            if await self.is_name_taken(name):
                raise DuplicateEntityError(self.entity_name, "name", name)
        return await self.bulk_create([{"name": name} for name in cleaned], actor_id)

    async def find_active(self) -> list[ItemT]:
        with self._storage_errors("list"):
            return await self._fetch_all(
                self._select_live(self.table.c.is_active == 1).order_by(self.table.c.name.asc())
            )

    async def search_by_name(self, term: str, *, active_only: bool = True) -> list[ItemT]:
        where = [self.table.c.name.icontains(term.strip(), autoescape=True)]
        if active_only:
            where.append(self.table.c.is_active == 1)
        with self._storage_errors("list"):
            return await self._fetch_all(
                self._select_live(*where).order_by(self.table.c.name.asc())
            )

    async def toggle_active(self, item_id: str, actor_id: str) -> ItemT:
        item = await self._require_live(item_id)
        return await self.update(item_id, {"is_active": not item.is_active}, actor_id)

    async def find_with_usage(self) -> list[ReferenceItemUsage]:
        usage = self.usage_model.__table__
        stmt = (
            select(
                self.model,
                func.count(usage.c.id).label("usage_count"),
                func.max(usage.c.created_at).label("last_used_at"),
            )
            .outerjoin(
                usage,
                and_(usage.c[self.usage_column] == self._pk, self._live(usage)),
            )
            .where(self._live())
            .group_by(self._pk)
            .order_by(self.table.c.name.asc())
            .execution_options(populate_existing=True)
        )
        with self._storage_errors("list"):
            result = await self._session.execute(stmt)
            return [
                ReferenceItemUsage(
                    item=self.mapper.from_storage(row),
                    usage_count=usage_count,
                    last_used_at=last_used_at or None,
                )
                for row, usage_count, last_used_at in result.all()
            ]


class SQLAlchemyClientRepository(SQLAlchemyReferenceDataRepository[Client]):
    model = ClientModel
    mapper = ClientMapper()
    entity_name = "Client"
    usage_model = ServiceLogModel
    usage_column = "client_id"


class SQLAlchemyActivityRepository(SQLAlchemyReferenceDataRepository[Activity]):
    model = ActivityModel
    mapper = ActivityMapper()
    entity_name = "Activity"
    usage_model = ServiceLogModel
    usage_column = "activity_id"


class SQLAlchemyOutcomeRepository(SQLAlchemyReferenceDataRepository[Outcome]):
    model = OutcomeModel
    mapper = OutcomeMapper()
    entity_name = "Outcome"
    usage_model = PatientEntryModel
    usage_column = "outcome_id"
