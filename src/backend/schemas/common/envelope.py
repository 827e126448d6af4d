"""Response envelope schemas shared by every endpoint."""

import math
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import Field

from core.schema_base import HTTPSchemaModel
from db.models import utc_now

T = TypeVar("T")
S = TypeVar("S")


class PaginationMeta(HTTPSchemaModel):
    """Pagination block computed from page, limit and the filtered total."""

    current_page: int = Field(..., description="1-based page number")
    total_pages: int = Field(..., description="ceil(totalItems / itemsPerPage)")
    total_items: int = Field(..., description="Rows matching the filters")
    items_per_page: int = Field(..., description="Requested page size")
    has_next_page: bool
    has_prev_page: bool


def build_pagination(page: int, limit: int, total: int) -> PaginationMeta:
    """Build pagination metadata for a page of a filtered result set."""
    return PaginationMeta(
        current_page=page,
        total_pages=math.ceil(total / limit) if limit else 0,
        total_items=total,
        items_per_page=limit,
        has_next_page=page * limit < total,
        has_prev_page=page > 1,
    )


class APIResponse(HTTPSchemaModel, Generic[T]):
    """Success envelope: {success, data, message?, timestamp}."""

    success: bool = True
    data: T
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)


class PaginatedResponse(HTTPSchemaModel, Generic[T, S]):
    """Success envelope for list endpoints: data page, pagination and stats."""

    success: bool = True
    data: List[T]
    pagination: PaginationMeta
    stats: Optional[S] = None
    timestamp: datetime = Field(default_factory=utc_now)


class FieldError(HTTPSchemaModel):
    """One validation failure."""

    field: Optional[str] = None
    message: str


class ErrorDetail(HTTPSchemaModel):
    message: str
    status_code: int
    details: Optional[List[FieldError]] = None


class ErrorResponse(HTTPSchemaModel):
    """Error envelope: {success: false, error: {message, ...}, timestamp}."""

    success: bool = False
    error: ErrorDetail
    timestamp: datetime = Field(default_factory=utc_now)
    path: Optional[str] = None
    method: Optional[str] = None
