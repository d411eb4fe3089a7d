"""Application service (use case) for user administration."""

from servicelog.application.interfaces import UserRepository
from servicelog.application.schemas.user import UserCreate, UserUpdate
from servicelog.domain.entities import Page, User, UserRole
from servicelog.domain.exceptions import EntityNotFoundError


class UserService:
    """Orchestrates user CRUD logic. Depends on the repository port (DI)."""

    def __init__(self, repository: UserRepository):
        self._repository = repository

    async def get_user(self, user_id: str) -> User:
        user = await self._repository.find_by_id(user_id)
        if user is None:
            raise EntityNotFoundError("User", user_id)
        return user

    async def list_users(
        self,
        *,
        page: int = 1,
        limit: int | None = None,
        role: UserRole | None = None,
        is_active: bool | None = None,
        search: str | None = None,
    ) -> Page[User]:
        return await self._repository.find_users(
            page=page, limit=limit, role=role, is_active=is_active, search=search,
        )

    async def create_user(self, data: UserCreate, actor_id: str) -> User:
        return await self._repository.create_user(data.model_dump(), actor_id)

    async def update_user(self, user_id: str, data: UserUpdate, actor_id: str) -> User:
        return await self._repository.update_user(
            user_id, data.model_dump(exclude_unset=True), actor_id,
        )

    async def toggle_active(self, user_id: str, actor_id: str) -> User:
        return await self._repository.toggle_active(user_id, actor_id)

    async def record_login(self, user_id: str) -> None:
        await self._repository.update_last_login(user_id)

    async def delete_user(self, user_id: str, actor_id: str) -> bool:
        return await self._repository.soft_delete(user_id, actor_id)
