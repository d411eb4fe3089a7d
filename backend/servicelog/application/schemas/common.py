"""Pydantic DTOs shared across features."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """One page of results."""

    items: list[T]
    total: int
    page: int
    limit: int
    total_pages: int

    model_config = {"from_attributes": True}


class OrderItem(BaseModel):
    """A new position for one row."""

    id: str
    order: int


class ReorderRequest(BaseModel):
    items: list[OrderItem]
