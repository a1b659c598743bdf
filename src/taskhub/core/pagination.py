from typing import Generic, TypeVar

from pydantic import BaseModel, Field, computed_field

T = TypeVar("T")


class PaginationResult(BaseModel, Generic[T]):
    """One page of a list endpoint plus the numbers needed to fetch the next."""

    items: list[T] = Field(..., description="Items in this page")
    total: int = Field(..., ge=0, description="Total number of items")
    limit: int = Field(..., ge=1, description="Page size requested")
    offset: int = Field(..., ge=0, description="Items skipped before this page")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total
