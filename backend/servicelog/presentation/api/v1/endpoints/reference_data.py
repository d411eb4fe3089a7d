"""CRUD endpoints for clients, activities and outcomes.

The three resources behave identically, so one router factory builds each.
"""

from collections.abc import Callable

from fastapi import APIRouter, Depends, Query, status

from servicelog.application.schemas import (
    PageResponse,
    ReferenceItemBulkCreate,
    ReferenceItemCreate,
    ReferenceItemResponse,
    ReferenceItemUpdate,
    ReferenceItemUsageResponse,
)
from servicelog.application.services import ReferenceDataService
from servicelog.infrastructure.dependencies import (
    get_activity_service,
    get_client_service,
    get_current_actor,
    get_outcome_service,
)
from servicelog.presentation.api.v1.errors import domain_errors


def build_reference_router(prefix: str, tag: str, get_service: Callable) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.get("", response_model=PageResponse[ReferenceItemResponse])
    async def list_items(
        page: int = Query(1, ge=1),
        limit: int | None = Query(None, ge=1),
        order_by: str = Query("name"),
        order_direction: str = Query("ASC"),
        service: ReferenceDataService = Depends(get_service),
    ) -> PageResponse[ReferenceItemResponse]:
        with domain_errors():
            result = await service.list_items(
                page=page, limit=limit, order_by=order_by, order_direction=order_direction,
            )
        return PageResponse[ReferenceItemResponse].model_validate(result, from_attributes=True)

    @router.get("/active", response_model=list[ReferenceItemResponse])
    async def list_active(
        service: ReferenceDataService = Depends(get_service),
    ) -> list[ReferenceItemResponse]:
        """Active items ordered by name, for pickers."""
        with domain_errors():
            items = await service.list_active()
        return [ReferenceItemResponse.model_validate(i, from_attributes=True) for i in items]

    @router.get("/search", response_model=list[ReferenceItemResponse])
    async def search_items(
        q: str = Query(..., min_length=1),
        active_only: bool = Query(True),
        service: ReferenceDataService = Depends(get_service),
    ) -> list[ReferenceItemResponse]:
        with domain_errors():
            items = await service.search(q, active_only=active_only)
        return [ReferenceItemResponse.model_validate(i, from_attributes=True) for i in items]

    @router.get("/usage", response_model=list[ReferenceItemUsageResponse])
    async def list_usage(
        service: ReferenceDataService = Depends(get_service),
    ) -> list[ReferenceItemUsageResponse]:
        """Every item with how often live service data uses it."""
        with domain_errors():
            rows = await service.usage()
        return [ReferenceItemUsageResponse.model_validate(r, from_attributes=True) for r in rows]

    @router.get("/{item_id}", response_model=ReferenceItemResponse)
    async def get_item(
        item_id: str,
        service: ReferenceDataService = Depends(get_service),
    ) -> ReferenceItemResponse:
        with domain_errors():
            item = await service.get_item(item_id)
        return ReferenceItemResponse.model_validate(item, from_attributes=True)

    @router.post("", response_model=ReferenceItemResponse, status_code=status.HTTP_201_CREATED)
    async def create_item(
        data: ReferenceItemCreate,
        actor_id: str = Depends(get_current_actor),
        service: ReferenceDataService = Depends(get_service),
    ) -> ReferenceItemResponse:
        with domain_errors():
            item = await service.create_item(data, actor_id)
        return ReferenceItemResponse.model_validate(item, from_attributes=True)

    @router.post("/bulk", response_model=list[ReferenceItemResponse], status_code=status.HTTP_201_CREATED)
    async def bulk_create_items(
        data: ReferenceItemBulkCreate,
        actor_id: str = Depends(get_current_actor),
        service: ReferenceDataService = Depends(get_service),
    ) -> list[ReferenceItemResponse]:
        """Create several items at once; nothing is created if any name is taken."""
        with domain_errors():
            items = await service.bulk_create(data.names, actor_id)
        return [ReferenceItemResponse.model_validate(i, from_attributes=True) for i in items]

    @router.put("/{item_id}", response_model=ReferenceItemResponse)
    async def update_item(
        item_id: str,
        data: ReferenceItemUpdate,
        actor_id: str = Depends(get_current_actor),
        service: ReferenceDataService = Depends(get_service),
    ) -> ReferenceItemResponse:
        with domain_errors():
            item = await service.update_item(item_id, data, actor_id)
        return ReferenceItemResponse.model_validate(item, from_attributes=True)

    @router.post("/{item_id}/toggle-active", response_model=ReferenceItemResponse)
    async def toggle_item_active(
        item_id: str,
        actor_id: str = Depends(get_current_actor),
        service: ReferenceDataService = Depends(get_service),
    ) -> ReferenceItemResponse:
        with domain_errors():
            item = await service.toggle_active(item_id, actor_id)
        return ReferenceItemResponse.model_validate(item, from_attributes=True)

    @router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_item(
        item_id: str,
        actor_id: str = Depends(get_current_actor),
        service: ReferenceDataService = Depends(get_service),
    ) -> None:
        with domain_errors():
            await service.delete_item(item_id, actor_id)

    return router


clients_router = build_reference_router("/clients", "Clients", get_client_service)
activities_router = build_reference_router("/activities", "Activities", get_activity_service)
outcomes_router = build_reference_router("/outcomes", "Outcomes", get_outcome_service)
