"""Pydantic DTOs for clients, activities and outcomes."""

from pydantic import BaseModel, Field


class ReferenceItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Main Hospital"])
    is_active: bool = True


class ReferenceItemBulkCreate(BaseModel):
    names: list[str] = Field(..., min_length=1)


class ReferenceItemUpdate(BaseModel):
    """Schema for updating a reference item — all fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    is_active: bool | None = None


class ReferenceItemResponse(BaseModel):
    id: str
    name: str
    is_active: bool
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class ReferenceItemUsageResponse(BaseModel):
    item: ReferenceItemResponse
    usage_count: int
    last_used_at: str | None

    model_config = {"from_attributes": True}
