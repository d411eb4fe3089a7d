"""Pydantic DTOs for custom form fields and their choices."""

from pydantic import BaseModel, Field

from servicelog.domain.entities import FieldType


class CustomFieldCreate(BaseModel):
    """Schema for creating a field; dropdowns must bring their choices along."""

    field_label: str = Field(..., min_length=1, max_length=255, examples=["Priority"])
    field_type: FieldType = FieldType.TEXT
    field_order: int | None = Field(None, ge=0)
    client_id: str | None = None
    is_active: bool = True
    choices: list[str] = Field(default_factory=list)


class CustomFieldUpdate(BaseModel):
    """Schema for updating a field — all fields optional."""

    field_label: str | None = Field(None, min_length=1, max_length=255)
    field_type: FieldType | None = None
    field_order: int | None = Field(None, ge=0)
    client_id: str | None = None
    is_active: bool | None = None


class FieldChoiceCreate(BaseModel):
    choice_text: str = Field(..., min_length=1, max_length=255)
    choice_order: int | None = Field(None, ge=0)


class FieldChoiceUpdate(BaseModel):
    choice_text: str | None = Field(None, min_length=1, max_length=255)
    choice_order: int | None = Field(None, ge=0)


class FieldChoiceResponse(BaseModel):
    id: str
    field_id: str
    choice_text: str
    choice_order: int
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class CustomFieldResponse(BaseModel):
    id: str
    field_label: str
    field_type: FieldType
    field_order: int
    client_id: str | None
    is_active: bool
    created_at: str
    updated_at: str
    choices: list[FieldChoiceResponse] = []

    model_config = {"from_attributes": True}
