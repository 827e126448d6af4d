"""Customer schemas."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import EmailStr, Field, field_validator

from core.schema_base import HTTPSchemaModel
from models.model_enum import CustomerStatus, SupportLevel
from schemas.common.summary import DeviceSummary, TicketSummary


class CustomerCreate(HTTPSchemaModel):
    """Schema for creating a customer."""

    name: str = Field(..., min_length=1, max_length=200)
    contact: str = Field(..., min_length=1, max_length=200)
    location: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    support_level: SupportLevel
    account_manager: Optional[str] = Field(None, max_length=200)


class CustomerUpdate(HTTPSchemaModel):
    """Schema for updating a customer. Only provided fields are written."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    contact: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    support_level: Optional[SupportLevel] = None
    account_manager: Optional[str] = Field(None, max_length=200)
    status: Optional[CustomerStatus] = None

    @field_validator("name", "contact", "location", "support_level", "account_manager", "status")
    @classmethod
    def reject_null(cls, v, info):
        """Required columns may be changed but not cleared."""
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class CustomerCounts(HTTPSchemaModel):
    """Related row counts, serialized as ``_count``."""

    devices: int = 0
    tickets: int = 0


class CustomerRead(HTTPSchemaModel):
    """Schema for reading customer data."""

    id: int
    customer_id: str
    name: str
    contact: str
    email: Optional[str] = None
    phone: Optional[str] = None
    location: str
    support_level: str
    device_count: int
    contract_start: Optional[datetime] = None
    contract_end: Optional[datetime] = None
    account_manager: str
    status: str
    created_at: datetime
    updated_at: datetime


class CustomerListItem(CustomerRead):
    """Customer row in list responses."""

    record_counts: CustomerCounts = Field(default_factory=CustomerCounts, alias="_count")


class CustomerDetail(CustomerListItem):
    """Single customer with latest devices and tickets."""

    devices: List[DeviceSummary] = Field(default_factory=list)
    tickets: List[TicketSummary] = Field(default_factory=list)


class CustomerStatsSummary(HTTPSchemaModel):
    """Customer summary statistics."""

    total: int
    by_support_level: Dict[str, int]
    by_status: Dict[str, int]
    total_devices: int
    avg_devices_per_customer: str
    contracts_expiring_soon: int
