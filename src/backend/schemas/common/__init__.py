"""Envelope and embedded summary schemas shared across resources."""
from .summary import CustomerSummary, DeviceSummary, TicketSummary
from .envelope import (
    APIResponse,
    ErrorDetail,
    ErrorResponse,
    FieldError,
    PaginatedResponse,
    PaginationMeta,
    build_pagination,
)

__all__ = [
    "CustomerSummary",
    "DeviceSummary",
    "TicketSummary",
    "APIResponse",
    "ErrorDetail",
    "ErrorResponse",
    "FieldError",
    "PaginatedResponse",
    "PaginationMeta",
    "build_pagination",
]
