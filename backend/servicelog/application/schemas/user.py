"""Pydantic DTOs for portal users."""

from pydantic import BaseModel, Field

from servicelog.domain.entities import UserRole

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(BaseModel):
    """Schema for creating a user. The password arrives already hashed."""

    email: str = Field(..., max_length=255, pattern=_EMAIL_PATTERN, examples=["jane@example.org"])
    username: str | None = Field(None, min_length=3, max_length=100)
    password_hash: str = Field(..., min_length=1, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: UserRole = UserRole.CANDIDATE
    is_active: bool = True


class UserUpdate(BaseModel):
    """Schema for updating a user — all fields optional."""

    email: str | None = Field(None, max_length=255, pattern=_EMAIL_PATTERN)
    username: str | None = Field(None, min_length=3, max_length=100)
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    role: UserRole | None = None
    is_active: bool | None = None


class UserResponse(BaseModel):
    id: str
    email: str
    username: str | None
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    last_login_at: str | None
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}
