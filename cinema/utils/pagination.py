from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PaginationInfo(BaseModel):
    """Pagination metadata for limit/offset listings."""

    limit: int
    offset: int
    total_items: int
    has_next: bool
    has_prev: bool


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response wrapper."""

    data: list[T]
    pagination: PaginationInfo


def create_pagination_info(limit: int, offset: int, total_items: int) -> PaginationInfo:
    return PaginationInfo(
        limit=limit,
        offset=offset,
        total_items=total_items,
        has_next=offset + limit < total_items,
        has_prev=offset > 0,
    )
