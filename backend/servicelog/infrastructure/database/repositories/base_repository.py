"""Generic audited repository with soft-delete, shared by every domain table.

A concrete repository declares its ORM ``model``, its ``mapper`` and a
human-readable ``entity_name``; everything else (live-row filtering, paging,
timestamps, id generation, audit entries and transaction handling) lives here.

Transactions: when the session is already inside a transaction, a mutation
runs in a SAVEPOINT so that it can fail without discarding the caller's work;
otherwise it opens (and commits) its own transaction.
"""

import logging
import uuid
from collections.abc import Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import asdict
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import ColumnElement, Table, and_, delete, func, insert, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from servicelog.application.interfaces import AuditLogRepository, CrudRepository
from servicelog.config import get_settings
from servicelog.domain.clock import utc_now_iso
from servicelog.domain.entities import AuditAction, Page, clamp_page
from servicelog.domain.exceptions import DomainValidationError, EntityNotFoundError, RepositoryError
from servicelog.infrastructure.database.mappers import EntityMapper, StorageConversionError
from servicelog.infrastructure.database.transaction import atomic

from .audit_log_repository import SQLAlchemyAuditLogRepository

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")
ModelT = TypeVar("ModelT")

# Never accepted from callers of ``update``.
IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at", "deleted_at"})


class SQLAlchemyBaseRepository(CrudRepository[EntityT], Generic[EntityT, ModelT]):
    """Implements the CrudRepository port for one table using SQLAlchemy async sessions."""

    model: ClassVar[type]
    mapper: ClassVar[EntityMapper]
    entity_name: ClassVar[str] = "Entity"
    # Keys left out of audit snapshots.
    audit_exclude: ClassVar[frozenset[str]] = frozenset()

    def __init__(
        self,
        session: AsyncSession,
        *,
        audit: AuditLogRepository | None = None,
        default_page_size: int | None = None,
        max_page_size: int | None = None,
    ):
        settings = get_settings()
        self._session = session
        self._audit = audit if audit is not None else SQLAlchemyAuditLogRepository(session)
        self._default_page_size = default_page_size or settings.default_page_size
        self._max_page_size = max_page_size or settings.max_page_size

    # ── Table helpers ───────────────────────────────────────────────

    @property
    def table(self) -> Table:
        return self.model.__table__

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    @property
    def _pk(self):
        return self.table.c.id

    def _live(self, table: Table | None = None) -> ColumnElement[bool]:
        """Predicate matching rows that are not soft-deleted."""
        deleted_at = (table if table is not None else self.table).c.deleted_at
        return or_(deleted_at.is_(None), deleted_at == "")

    def _has_column(self, name: str) -> bool:
        return name in self.table.c

    def _paging(self, page: int | None, limit: int | None) -> tuple[int, int]:
        return clamp_page(
            page, limit,
            default_limit=self._default_page_size,
            max_limit=self._max_page_size,
        )

    def _snapshot(self, entity: EntityT) -> dict[str, Any]:
        """JSON-ready copy of an entity for the audit trail."""
        return {
            key: value.value if isinstance(value, Enum) else value
            for key, value in asdict(entity).items()
            if key not in self.audit_exclude
        }

    def _record_key(self, entity: EntityT) -> str:
        return str(getattr(entity, "id"))

    def _to_storage(self, data: Mapping[str, Any]) -> dict[str, Any]:
        try:
            return self.mapper.to_storage(data)
        except StorageConversionError as exc:
            raise DomainValidationError(self.entity_name, f"invalid {exc.field} '{exc.value}'") from exc

    @contextmanager
    def _storage_errors(self, operation: str) -> Iterator[None]:
        """Translate driver failures into RepositoryError; domain errors pass through."""
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error("Failed to %s %s: %s", operation, self.table_name, exc)
            raise RepositoryError(operation, self.table_name, str(exc)) from exc

    def _atomic(self):
        return atomic(self._session)

    # ── Query helpers for subclasses ────────────────────────────────

    def _select_live(self, *where: ColumnElement[bool]):
        return (
            select(self.model)
            .where(self._live(), *where)
            .execution_options(populate_existing=True)
        )

    async def _fetch_all(self, stmt) -> list[EntityT]:
        result = await self._session.execute(stmt)
        return [self.mapper.from_storage(row) for row in result.scalars().all()]

    async def _fetch_one(self, stmt) -> EntityT | None:
        result = await self._session.execute(stmt.limit(1))
        row = result.scalars().first()
        return self.mapper.from_storage(row) if row is not None else None

    async def _get_live(self, key: Any) -> EntityT | None:
        if key is None:
            return None
        return await self._fetch_one(self._select_live(self._pk == key))

    async def _require_live(self, entity_id: str) -> EntityT:
        entity = await self._get_live(self.mapper.to_storage_key(entity_id))
        if entity is None:
            raise EntityNotFoundError(self.entity_name, entity_id)
        return entity

    async def _scalar(self, stmt) -> Any:
        result = await self._session.execute(stmt)
        return result.scalar()

    async def _paginate(
        self,
        stmt,
        *,
        page: int | None,
        limit: int | None,
        order_by: Sequence[Any],
    ) -> Page[EntityT]:
        """Run ``stmt`` as a COUNT and as one LIMIT/OFFSET page."""
        page, limit = self._paging(page, limit)
        total = await self._scalar(select(func.count()).select_from(stmt.order_by(None).subquery()))
        rows = await self._fetch_all(
            stmt.order_by(*order_by).limit(limit).offset((page - 1) * limit)
        )
        return Page(items=rows, total=total or 0, page=page, limit=limit)

    def _ordering(self, order_by: str, order_direction: str) -> list[Any]:
        if order_by not in self.table.c:
            raise DomainValidationError(self.entity_name, f"cannot order by '{order_by}'")
        direction = (order_direction or "").upper()
        if direction not in ("ASC", "DESC"):
            raise DomainValidationError(
                self.entity_name, f"order direction must be ASC or DESC, got '{order_direction}'",
            )
        column = self.table.c[order_by]
        primary = column.asc() if direction == "ASC" else column.desc()
        tie_break = self._pk.asc() if direction == "ASC" else self._pk.desc()
        return [primary] if order_by == "id" else [primary, tie_break]

    # ── CrudRepository ──────────────────────────────────────────────

    async def find_by_id(self, entity_id: str) -> EntityT | None:
        with self._storage_errors("read"):
            return await self._get_live(self.mapper.to_storage_key(entity_id))

    async def find_all(
        self,
        *,
        page: int = 1,
        limit: int | None = None,
        order_by: str = "created_at",
        order_direction: str = "DESC",
        where: Sequence[ColumnElement[bool]] = (),
    ) -> Page[EntityT]:
        ordering = self._ordering(order_by, order_direction)
        with self._storage_errors("list"):
            return await self._paginate(
                self._select_live(*where), page=page, limit=limit, order_by=ordering,
            )

    async def create(self, data: Mapping[str, Any], actor_id: str) -> EntityT:
        now = utc_now_iso()
        values = self._to_storage(data)
        values.pop("deleted_at", None)
        values["created_at"] = now
        values["updated_at"] = now
        if values.get("id") is None:
            values.pop("id", None)
            if not self.mapper.integer_key:
                values["id"] = str(uuid.uuid4())

        with self._storage_errors("create"):
            async with self._atomic():
                result = await self._session.execute(insert(self.table).values(**values))
                key = values["id"] if "id" in values else result.inserted_primary_key[0]
                entity = await self._get_live(key)
                await self._audit.record(
                    table_name=self.table_name,
                    record_id=self._record_key(entity),
                    action=AuditAction.INSERT,
                    actor_id=actor_id,
                    new_values=self._snapshot(entity),
                )

        logger.info("%s created: id=%s by=%s", self.entity_name, self._record_key(entity), actor_id)
        return entity

    async def update(self, entity_id: str, changes: Mapping[str, Any], actor_id: str) -> EntityT:
        with self._storage_errors("update"):
            existing = await self._require_live(entity_id)
            current = self.mapper.to_storage(asdict(existing))
            requested = self._to_storage(
                {key: value for key, value in changes.items() if key not in IMMUTABLE_FIELDS}
            )
            values = {key: value for key, value in requested.items() if current.get(key) != value}
            if not values:
                return existing

            key = self.mapper.to_storage_key(entity_id)
            values["updated_at"] = utc_now_iso()
            async with self._atomic():
                result = await self._session.execute(
                    update(self.table).where(self._pk == key, self._live()).values(**values)
                )
                if result.rowcount == 0:
                    raise EntityNotFoundError(self.entity_name, entity_id)
                updated = await self._get_live(key)
                await self._audit.record(
                    table_name=self.table_name,
                    record_id=str(entity_id),
                    action=AuditAction.UPDATE,
                    actor_id=actor_id,
                    old_values=self._snapshot(existing),
                    new_values=self._snapshot(updated),
                )

        logger.info(
            "%s updated: id=%s by=%s fields=%s",
            self.entity_name, entity_id, actor_id, sorted(values),
        )
        return updated

    async def soft_delete(self, entity_id: str, actor_id: str) -> bool:
        with self._storage_errors("delete"):
            existing = await self._require_live(entity_id)
            await self._soft_delete_loaded(existing, actor_id)
        logger.info("%s deleted: id=%s by=%s", self.entity_name, entity_id, actor_id)
        return True

    async def _soft_delete_loaded(self, existing: EntityT, actor_id: str) -> None:
        """Soft-delete an already loaded live entity and audit it."""
        record_id = self._record_key(existing)
        key = self.mapper.to_storage_key(record_id)
        now = utc_now_iso()
        async with self._atomic():
            result = await self._session.execute(
                update(self.table)
                .where(self._pk == key, self._live())
                .values(deleted_at=now, updated_at=now)
            )
            if result.rowcount == 0:
                raise EntityNotFoundError(self.entity_name, record_id)
            old = self._snapshot(existing)
            await self._audit.record(
                table_name=self.table_name,
                record_id=record_id,
                action=AuditAction.DELETE,
                actor_id=actor_id,
                old_values=old,
                new_values={**old, "deleted_at": now, "updated_at": now},
            )

    async def hard_delete(self, entity_id: str, actor_id: str) -> bool:
        key = self.mapper.to_storage_key(entity_id)
        if key is None:
            return False
        with self._storage_errors("delete"):
            result = await self._session.execute(
                select(self.model).where(self._pk == key).execution_options(populate_existing=True)
            )
            row = result.scalars().first()
            if row is None:
                return False
            existing = self.mapper.from_storage(row)
            async with self._atomic():
                await self._session.execute(delete(self.table).where(self._pk == key))
                await self._audit.record(
                    table_name=self.table_name,
                    record_id=str(entity_id),
                    action=AuditAction.DELETE,
                    actor_id=actor_id,
                    old_values=self._snapshot(existing),
                    new_values=None,
                )
        logger.info("%s permanently deleted: id=%s by=%s", self.entity_name, entity_id, actor_id)
        return True

    async def bulk_create(self, items: Iterable[Mapping[str, Any]], actor_id: str) -> list[EntityT]:
        created: list[EntityT] = []
        async with self._atomic():
            for item in items:
                created.append(await self.create(item, actor_id))
        return created

    async def count(self, where: Sequence[ColumnElement[bool]] = ()) -> int:
        clauses = [self._live(), *where]
        if self._has_column("is_active"):
            clauses.append(self.table.c.is_active == 1)
        with self._storage_errors("count"):
            total = await self._scalar(
                select(func.count()).select_from(self.table).where(and_(*clauses))
            )
        return total or 0
