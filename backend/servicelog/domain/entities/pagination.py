"""Pagination envelope returned by every paged repository query."""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of results plus the totals needed to render a pager."""

    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def clamp_page(page: int | None, limit: int | None, *, default_limit: int, max_limit: int) -> tuple[int, int]:
    """Normalise caller-supplied paging values.

    ``page`` is floored to 1 and ``limit`` clamped to ``[1, max_limit]``
    regardless of what the caller sent.
    """
    page = max(1, page or 1)
    limit = default_limit if limit is None else limit
    limit = max(1, min(limit, max_limit))
    return page, limit
