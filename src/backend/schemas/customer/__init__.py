"""Customer schemas package."""
from .customer import (
    CustomerCounts,
    CustomerCreate,
    CustomerDetail,
    CustomerListItem,
    CustomerRead,
    CustomerStatsSummary,
    CustomerUpdate,
)

__all__ = [
    "CustomerCounts",
    "CustomerCreate",
    "CustomerDetail",
    "CustomerListItem",
    "CustomerRead",
    "CustomerStatsSummary",
    "CustomerUpdate",
]
