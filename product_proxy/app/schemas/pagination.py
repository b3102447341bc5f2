"""
Pagination request parameters and the generic paged response envelope.
"""

import math
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


class PaginationParameters(BaseModel):
    """Paging and filtering for one list request.

    ``page_size`` above ``MAX_PAGE_SIZE`` is capped at construction, so the
    value read back is the value that will be used.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page_number: int = Field(1, ge=1, alias="pageNumber")
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1, alias="pageSize")
    name_filter: Optional[str] = Field(None, alias="nameFilter")

    @field_validator("page_size")
    @classmethod
    def clamp_page_size(cls, v: int) -> int:
        return min(v, MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size

    @property
    def has_name_filter(self) -> bool:
        return bool(self.name_filter and self.name_filter.strip())


class PagedResponse(BaseModel, Generic[T]):
    """One page of a filtered collection plus navigation metadata"""

    model_config = ConfigDict(populate_by_name=True)

    items: List[T] = Field(default_factory=list)
    page_number: int = Field(1, alias="pageNumber")
    page_size: int = Field(DEFAULT_PAGE_SIZE, alias="pageSize")
    total_count: int = Field(0, alias="totalCount")

    @computed_field(alias="totalPages")  # type: ignore[misc]
    @property
    def total_pages(self) -> int:
        if self.total_count == 0 or self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @computed_field(alias="hasPrevious")  # type: ignore[misc]
    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    @computed_field(alias="hasNext")  # type: ignore[misc]
    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages
