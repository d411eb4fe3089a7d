"""Audit trail repository backed by SQLAlchemy.

Audit writes are best-effort: each entry is inserted inside its own SAVEPOINT
in the caller's transaction, and a failure rolls back only that savepoint.
The mutation being audited still commits.
"""

import json
import logging
from typing import Any

from sqlalchemy import func, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from servicelog.application.interfaces import AuditLogRepository
from servicelog.config import get_settings
from servicelog.domain.clock import utc_now_iso
from servicelog.domain.entities import AuditAction, AuditLogEntry, Page, clamp_page
from servicelog.domain.exceptions import RepositoryError
from servicelog.infrastructure.database.models import AuditLogModel

logger = logging.getLogger(__name__)


def _encode(values: dict[str, Any] | None) -> str | None:
    if values is None:
        return None
    return json.dumps(values, default=str, sort_keys=True)


class SQLAlchemyAuditLogRepository(AuditLogRepository):
    """Implements the AuditLogRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: AuditLogModel) -> AuditLogEntry:
        """Map ORM model → domain entity."""
        return AuditLogEntry(
            id=model.id,
            table_name=model.table_name,
            record_id=model.record_id,
            action=AuditAction(model.action),
            user_id=model.user_id,
            old_values=model.old_values,
            new_values=model.new_values,
            timestamp=model.timestamp,
        )

    async def record(
        self,
        *,
        table_name: str,
        record_id: str,
        action: AuditAction,
        actor_id: str,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> None:
        try:
            async with self._session.begin_nested():
                await self._session.execute(
                    insert(AuditLogModel.__table__).values(
                        table_name=table_name,
                        record_id=str(record_id),
                        action=action.value,
                        user_id=actor_id,
                        old_values=_encode(old_values),
                        new_values=_encode(new_values),
                        timestamp=utc_now_iso(),
                    )
                )
        except SQLAlchemyError:
            logger.exception(
                "Audit write failed: table=%s record=%s action=%s actor=%s",
                table_name, record_id, action.value, actor_id,
            )

    async def find_by_record(self, table_name: str, record_id: str) -> list[AuditLogEntry]:
        stmt = (
            select(AuditLogModel)
            .where(AuditLogModel.table_name == table_name, AuditLogModel.record_id == str(record_id))
            .order_by(AuditLogModel.id.asc())
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Failed to read audit_log: %s", exc)
            raise RepositoryError("read", "audit_log", str(exc)) from exc
        return [self._to_entity(row) for row in result.scalars().all()]

    async def find_all(
        self,
        *,
        page: int = 1,
        limit: int | None = None,
        table_name: str | None = None,
        record_id: str | None = None,
        user_id: str | None = None,
        action: AuditAction | None = None,
    ) -> Page[AuditLogEntry]:
        settings = get_settings()
        page, limit = clamp_page(
            page, limit,
            default_limit=settings.default_page_size,
            max_limit=settings.max_page_size,
        )

        stmt = select(AuditLogModel)
        if table_name is not None:
            stmt = stmt.where(AuditLogModel.table_name == table_name)
        if record_id is not None:
            stmt = stmt.where(AuditLogModel.record_id == str(record_id))
        if user_id is not None:
            stmt = stmt.where(AuditLogModel.user_id == user_id)
        if action is not None:
            stmt = stmt.where(AuditLogModel.action == AuditAction(action).value)

        try:
            total = (
                await self._session.execute(select(func.count()).select_from(stmt.subquery()))
            ).scalar()
            result = await self._session.execute(
                stmt.order_by(AuditLogModel.id.desc()).limit(limit).offset((page - 1) * limit)
            )
        except SQLAlchemyError as exc:
            logger.error("Failed to list audit_log: %s", exc)
            raise RepositoryError("list", "audit_log", str(exc)) from exc

        return Page(
            items=[self._to_entity(row) for row in result.scalars().all()],
            total=total or 0,
            page=page,
            limit=limit,
        )
