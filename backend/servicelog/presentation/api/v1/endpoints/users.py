"""User administration endpoints."""

from fastapi import APIRouter, Depends, Query, status

from servicelog.application.schemas import PageResponse, UserCreate, UserResponse, UserUpdate
from servicelog.application.services import UserService
from servicelog.domain.entities import UserRole
from servicelog.infrastructure.dependencies import get_current_actor, get_user_service
from servicelog.presentation.api.v1.errors import domain_errors

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=PageResponse[UserResponse])
async def list_users(
    role: UserRole | None = Query(None, description="Filter by role"),
    is_active: bool | None = Query(None, description="Filter by active flag"),
    search: str | None = Query(None, description="Match email, username or name"),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    service: UserService = Depends(get_user_service),
) -> PageResponse[UserResponse]:
    """Retrieve a filtered, paginated list of users."""
    with domain_errors():
        result = await service.list_users(
            page=page, limit=limit, role=role, is_active=is_active, search=search,
        )
    return PageResponse[UserResponse].model_validate(result, from_attributes=True)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    with domain_errors():
        user = await service.get_user(user_id)
    return UserResponse.model_validate(user, from_attributes=True)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    actor_id: str = Depends(get_current_actor),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Create a user; email and username must be unused by live accounts."""
    with domain_errors():
        user = await service.create_user(data, actor_id)
    return UserResponse.model_validate(user, from_attributes=True)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: UserUpdate,
    actor_id: str = Depends(get_current_actor),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    with domain_errors():
        user = await service.update_user(user_id, data, actor_id)
    return UserResponse.model_validate(user, from_attributes=True)


@router.post("/{user_id}/toggle-active", response_model=UserResponse)
async def toggle_user_active(
    user_id: str,
    actor_id: str = Depends(get_current_actor),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    with domain_errors():
        user = await service.toggle_active(user_id, actor_id)
    return UserResponse.model_validate(user, from_attributes=True)


@router.post("/{user_id}/login", status_code=status.HTTP_204_NO_CONTENT)
async def record_login(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> None:
    """Stamp the user's last login time."""
    with domain_errors():
        await service.record_login(user_id)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    actor_id: str = Depends(get_current_actor),
    service: UserService = Depends(get_user_service),
) -> None:
    with domain_errors():
        await service.delete_user(user_id, actor_id)
