"""Resources – Page and PaginationMeta."""
from __future__ import annotations

import dataclasses
import math
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class PaginationMeta:
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def compute(cls, total: int, page: int, limit: int) -> "PaginationMeta":
        """Derive ``total_pages`` when the API does not send it."""
        total_pages = math.ceil(total / limit) if limit > 0 and total > 0 else 0
        return cls(total=total, page=page, limit=limit, total_pages=total_pages)


@dataclasses.dataclass
class Page(Generic[T]):
    """Offset-based page of results as returned by the list endpoints."""

    data: list[T]
    meta: PaginationMeta

    @property
    def has_next(self) -> bool:
        return self.meta.page < self.meta.total_pages

    @property
    def has_previous(self) -> bool:
        return self.meta.page > 1

    def filter(self, predicate: Callable[[T], Any]) -> "Page[T]":
        """Keep the items matching *predicate*; ``meta`` is left as the server sent it."""
        return Page(data=[item for item in self.data if predicate(item)], meta=self.meta)

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)


__all__ = ["Page", "PaginationMeta"]
