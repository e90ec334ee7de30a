"""Common API schemas."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field, computed_field

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    code: int = Field(default=0, description="Response code, 0 for success")
    message: str = Field(default="success", description="Response message")
    data: T | None = Field(default=None, description="Response data")


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated response wrapper."""

    code: int = Field(default=0, description="Response code")
    message: str = Field(default="success", description="Response message")
    data: list[T] = Field(default_factory=list, description="List of items")
    total: int = Field(default=0, ge=0, description="Total count")
    page: int = Field(default=1, ge=1, description="Current page")
    page_size: int = Field(default=20, ge=1, le=100, description="Page size")

    @computed_field
    @property
    def pages(self) -> int:
        """Number of pages."""
        return math.ceil(self.total / self.page_size)


class PaginationParams(BaseModel):
    """Pagination query parameters."""

    page: int = Field(default=1, ge=1, description="Page number")
    page_size: int = Field(default=20, ge=1, le=100, description="Items per page")

    @property
    def offset(self) -> int:
        """Offset of the first item on the page."""
        return (self.page - 1) * self.page_size
