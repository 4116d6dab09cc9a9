"""Keyset pagination shared by the list operations."""
from typing import Callable, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from workoutplanner.core.pagination import encode_cursor

T = TypeVar("T")


class PaginationParams(BaseModel):
    cursor: Optional[str] = None
    limit: int = Field(default=20, ge=1, le=100)

    @property
    def fetch_size(self) -> int:
        """Rows to ask for: one extra tells whether another page exists."""
        return self.limit + 1


class PaginatedResult(BaseModel, Generic[T]):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: list[T]
    next_cursor: Optional[str] = None
    has_more: bool = False

    @classmethod
    def from_rows(
        cls,
        rows: list[T],
        pagination: PaginationParams,
        key: Callable[[T], object] = lambda row: row.id,
        field: str = "id",
    ) -> "PaginatedResult[T]":
        """Cut ``fetch_size`` rows down to one page and point at the next."""
        has_more = len(rows) > pagination.limit
        items = rows[: pagination.limit]
        next_cursor = encode_cursor(key(items[-1]), field) if items and has_more else None
        return cls(items=items, next_cursor=next_cursor, has_more=has_more)
