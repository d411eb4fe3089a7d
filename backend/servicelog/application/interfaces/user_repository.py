"""Abstract repository interface (port) for portal users."""

from abc import abstractmethod
from collections.abc import Mapping
from typing import Any

from servicelog.domain.entities import Page, User, UserRole

from .crud_repository import CrudRepository


class UserRepository(CrudRepository[User]):
    """Port for user persistence."""

    @abstractmethod
    async def find_by_email(self, email: str) -> User | None:
        ...

    @abstractmethod
    async def find_by_username(self, username: str) -> User | None:
        ...

    @abstractmethod
    async def create_user(self, data: Mapping[str, Any], actor_id: str) -> User:
        """Create a user after checking email/username uniqueness."""
        ...

    @abstractmethod
    async def update_user(self, user_id: str, changes: Mapping[str, Any], actor_id: str) -> User:
        ...

    @abstractmethod
    async def find_users(
        self,
        *,
        page: int = 1,
        limit: int | None = None,
        role: UserRole | None = None,
        is_active: bool | None = None,
        search: str | None = None,
    ) -> Page[User]:
        ...

    @abstractmethod
    async def update_last_login(self, user_id: str) -> None:
        ...

    @abstractmethod
    async def toggle_active(self, user_id: str, actor_id: str) -> User:
        ...
