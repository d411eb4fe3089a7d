"""Concrete repository implementation for portal users backed by SQLAlchemy."""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import func, or_, update

from servicelog.application.interfaces import UserRepository
from servicelog.domain.clock import utc_now_iso
from servicelog.domain.entities import Page, User, UserRole
from servicelog.domain.exceptions import DuplicateEntityError, EntityNotFoundError
from servicelog.infrastructure.database.mappers import UserMapper
from servicelog.infrastructure.database.models import UserModel

from .base_repository import SQLAlchemyBaseRepository

logger = logging.getLogger(__name__)


class SQLAlchemyUserRepository(SQLAlchemyBaseRepository[User, UserModel], UserRepository):
    """Implements the UserRepository port.

    Email and username are unique among live users, compared case-insensitively.
    """

    model = UserModel
    mapper = UserMapper()
    entity_name = "User"
    audit_exclude = frozenset({"password_hash"})

    async def find_by_email(self, email: str) -> User | None:
        with self._storage_errors("read"):
            return await self._fetch_one(
                self._select_live(func.lower(UserModel.email) == email.strip().lower())
            )

    async def find_by_username(self, username: str) -> User | None:
        with self._storage_errors("read"):
            return await self._fetch_one(
                self._select_live(func.lower(UserModel.username) == username.strip().lower())
            )

    async def _check_unique(self, data: Mapping[str, Any], exclude_id: str | None = None) -> None:
        email = data.get("email")
        if email:
            found = await self.find_by_email(email)
            if found is not None and found.id != exclude_id:
                raise DuplicateEntityError(self.entity_name, "email", email)
        username = data.get("username")
        if username:
            found = await self.find_by_username(username)
            if found is not None and found.id != exclude_id:
                raise DuplicateEntityError(self.entity_name, "username", username)

    async def create_user(self, data: Mapping[str, Any], actor_id: str) -> User:
        await self._check_unique(data)
        return await self.create(data, actor_id)

    async def update_user(self, user_id: str, changes: Mapping[str, Any], actor_id: str) -> User:
        await self._require_live(user_id)
        await self._check_unique(changes, exclude_id=user_id)
        return await self.update(user_id, changes, actor_id)

    async def find_users(
        self,
        *,
        page: int = 1,
        limit: int | None = None,
        role: UserRole | None = None,
        is_active: bool | None = None,
        search: str | None = None,
    ) -> Page[User]:
        where = []
        if role is not None:
            where.append(UserModel.role == UserRole(role).value)
        if is_active is not None:
            where.append(UserModel.is_active == (1 if is_active else 0))
        if search:
            term = search.strip()
            where.append(
                or_(*(
                    column.icontains(term, autoescape=True)
                    for column in (UserModel.email, UserModel.username, UserModel.first_name, UserModel.last_name)
                ))
            )
        with self._storage_errors("list"):
            return await self._paginate(
                self._select_live(*where),
                page=page,
                limit=limit,
                order_by=[UserModel.last_name.asc(), UserModel.first_name.asc(), UserModel.id.asc()],
            )

    async def update_last_login(self, user_id: str) -> None:
        """Stamp the login time. Logins are not audited."""
        with self._storage_errors("update"):
            async with self._atomic():
                result = await self._session.execute(
                    update(self.table)
                    .where(self._pk == user_id, self._live())
                    .values(last_login_at=utc_now_iso())
                )
        if result.rowcount == 0:
            raise EntityNotFoundError(self.entity_name, user_id)

    async def toggle_active(self, user_id: str, actor_id: str) -> User:
        user = await self._require_live(user_id)
        return await self.update(user_id, {"is_active": not user.is_active}, actor_id)
