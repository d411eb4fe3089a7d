"""Custom form field endpoints, including dropdown choices and reordering."""

from fastapi import APIRouter, Depends, Query, status

from servicelog.application.schemas import (
    CustomFieldCreate,
    CustomFieldResponse,
    CustomFieldUpdate,
    FieldChoiceCreate,
    FieldChoiceResponse,
    FieldChoiceUpdate,
    ReorderRequest,
)
from servicelog.application.services import CustomFieldService
from servicelog.infrastructure.dependencies import get_current_actor, get_custom_field_service
from servicelog.presentation.api.v1.errors import domain_errors

router = APIRouter(prefix="/custom-fields", tags=["Custom Fields"])


@router.get("", response_model=list[CustomFieldResponse])
async def list_fields(
    client_id: str | None = Query(None, description="Fields for this client; global fields when omitted"),
    include_global: bool = Query(True, description="Also return global fields for a client"),
    service: CustomFieldService = Depends(get_custom_field_service),
) -> list[CustomFieldResponse]:
    """Active fields in form order, each with its choices."""
    with domain_errors():
        fields = await service.list_fields(client_id, include_global=include_global)
    return [CustomFieldResponse.model_validate(f, from_attributes=True) for f in fields]


@router.put("/reorder", status_code=status.HTTP_204_NO_CONTENT)
async def reorder_fields(
    data: ReorderRequest,
    actor_id: str = Depends(get_current_actor),
    service: CustomFieldService = Depends(get_custom_field_service),
) -> None:
    with domain_errors():
        await service.reorder_fields(data.items, actor_id)


@router.get("/{field_id}", response_model=CustomFieldResponse)
async def get_field(
    field_id: str,
    service: CustomFieldService = Depends(get_custom_field_service),
) -> CustomFieldResponse:
    with domain_errors():
        field = await service.get_field(field_id)
    return CustomFieldResponse.model_validate(field, from_attributes=True)


@router.post("", response_model=CustomFieldResponse, status_code=status.HTTP_201_CREATED)
async def create_field(
    data: CustomFieldCreate,
    actor_id: str = Depends(get_current_actor),
    service: CustomFieldService = Depends(get_custom_field_service),
) -> CustomFieldResponse:
    """Create a field; dropdown fields must include at least one choice."""
    with domain_errors():
        field = await service.create_field(data, actor_id)
    return CustomFieldResponse.model_validate(field, from_attributes=True)


@router.put("/{field_id}", response_model=CustomFieldResponse)
async def update_field(
    field_id: str,
    data: CustomFieldUpdate,
    actor_id: str = Depends(get_current_actor),
    service: CustomFieldService = Depends(get_custom_field_service),
) -> CustomFieldResponse:
    with domain_errors():
        field = await service.update_field(field_id, data, actor_id)
    return CustomFieldResponse.model_validate(field, from_attributes=True)


@router.post("/{field_id}/toggle-active", response_model=CustomFieldResponse)
async def toggle_field_active(
    field_id: str,
    actor_id: str = Depends(get_current_actor),
    service: CustomFieldService = Depends(get_custom_field_service),
) -> CustomFieldResponse:
    with domain_errors():
        field = await service.toggle_active(field_id, actor_id)
    return CustomFieldResponse.model_validate(field, from_attributes=True)


@router.delete("/{field_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_field(
    field_id: str,
    actor_id: str = Depends(get_current_actor),
    service: CustomFieldService = Depends(get_custom_field_service),
) -> None:
    """Remove the field's choices and soft-delete the field."""
    with domain_errors():
        await service.delete_field(field_id, actor_id)


# ── Choices ─────────────────────────────────────────────────────────


@router.post(
    "/{field_id}/choices",
    response_model=FieldChoiceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_choice(
    field_id: str,
    data: FieldChoiceCreate,
    actor_id: str = Depends(get_current_actor),
    service: CustomFieldService = Depends(get_custom_field_service),
) -> FieldChoiceResponse:
    with domain_errors():
        choice = await service.add_choice(field_id, data, actor_id)
    return FieldChoiceResponse.model_validate(choice, from_attributes=True)


@router.put("/{field_id}/choices/reorder", status_code=status.HTTP_204_NO_CONTENT)
async def reorder_choices(
    field_id: str,
    data: ReorderRequest,
    actor_id: str = Depends(get_current_actor),
    service: CustomFieldService = Depends(get_custom_field_service),
) -> None:
    with domain_errors():
        await service.reorder_choices(field_id, data.items, actor_id)


@router.put("/{field_id}/choices/{choice_id}", response_model=FieldChoiceResponse)
async def update_choice(
    field_id: str,
    choice_id: str,
    data: FieldChoiceUpdate,
    actor_id: str = Depends(get_current_actor),
    service: CustomFieldService = Depends(get_custom_field_service),
) -> FieldChoiceResponse:
    with domain_errors():
        choice = await service.update_choice(field_id, choice_id, data, actor_id)
    return FieldChoiceResponse.model_validate(choice, from_attributes=True)


@router.delete("/{field_id}/choices/{choice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_choice(
    field_id: str,
    choice_id: str,
    actor_id: str = Depends(get_current_actor),
    service: CustomFieldService = Depends(get_custom_field_service),
) -> None:
    with domain_errors():
        await service.delete_choice(field_id, choice_id, actor_id)
