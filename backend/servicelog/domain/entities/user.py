"""Domain entity for portal users — administrators and candidates who log services."""

from dataclasses import dataclass, field
from enum import Enum

from servicelog.domain.clock import utc_now_iso


class UserRole(str, Enum):
    """Roles recognised by the portal."""

    ADMIN = "admin"
    CANDIDATE = "candidate"


@dataclass
class User:
    """A portal account.

    Authentication (password hashing, token issuance) lives outside the core;
    the entity only carries the already-hashed password.
    """

    email: str
    password_hash: str
    first_name: str
    last_name: str
    role: UserRole = UserRole.CANDIDATE
    id: str | None = None
    username: str | None = None
    is_active: bool = True
    last_login_at: str | None = None
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)
    deleted_at: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_deleted(self) -> bool:
        return bool(self.deleted_at)
