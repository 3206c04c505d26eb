"""Pagination envelope shared by every list endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PaginationResponse(BaseModel, Generic[T]):
    """Page metadata plus the page's rows. data is always a list."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    page: int
    page_size: int
    total_records: int
    sort_by: str
    sort_order: str
    filters: dict[str, list[str]]
    data: list[T] = Field(default_factory=list)
