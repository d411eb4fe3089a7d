"""Mapper for the 'users' table."""

from servicelog.domain.entities import User, UserRole
from servicelog.infrastructure.database.models import UserModel

from .base import (
    EntityMapper,
    bool_from_storage,
    bool_to_storage,
    date_from_storage,
    date_to_storage,
    enum_to_storage,
    passthrough,
)


class UserMapper(EntityMapper[User, UserModel]):
    converters = {
        "id": passthrough,
        "username": passthrough,
        "email": passthrough,
        "password_hash": passthrough,
        "role": enum_to_storage,
        "first_name": passthrough,
        "last_name": passthrough,
        "is_active": bool_to_storage,
        "last_login_at": date_to_storage,
        "created_at": passthrough,
        "updated_at": passthrough,
        "deleted_at": date_to_storage,
    }

    def from_storage(self, row: UserModel) -> User:
        return User(
            id=row.id,
            username=row.username or None,
            email=row.email,
            password_hash=row.password_hash,
            role=UserRole(row.role),
            first_name=row.first_name,
            last_name=row.last_name,
            is_active=bool_from_storage(row.is_active),
            last_login_at=date_from_storage(row.last_login_at),
            created_at=row.created_at,
            updated_at=row.updated_at,
            deleted_at=date_from_storage(row.deleted_at),
        )
