"""
Customer repository: customer filters and support-tier ordering.
"""
from typing import Any, List, Optional

from sqlalchemy.sql import ColumnElement

from db.models import Customer
from models.model_enum import CustomerStatus, SupportLevel
from repositories.base_repository import BaseRepository

SUPPORT_PRECEDENCE = (
    SupportLevel.ENTERPRISE.value,
    SupportLevel.PREMIUM.value,
    SupportLevel.BASIC.value,
)


class CustomerRepository(BaseRepository[Customer]):
    """Repository for Customer queries."""

    model = Customer
    key_column = "customer_id"
    search_columns = ("name", "contact", "email", "customer_id")

    @classmethod
    def ordering(cls) -> List[Any]:
        return [
            cls.rank(Customer.support_level, SUPPORT_PRECEDENCE),
            Customer.name.asc(),
            Customer.id.asc(),
        ]

    @classmethod
    def build_conditions(
        cls,
        *,
        support_level: Optional[SupportLevel] = None,
        status: Optional[CustomerStatus] = None,
        search: Optional[str] = None,
    ) -> List[ColumnElement]:
        """Translate optional list filters into AND-ed conditions."""
        conditions: List[ColumnElement] = []
        if support_level is not None:
            conditions.append(Customer.support_level == SupportLevel(support_level).value)
        if status is not None:
            conditions.append(Customer.status == CustomerStatus(status).value)
        if search:
            conditions.append(cls.search_clause(search))
        return conditions
