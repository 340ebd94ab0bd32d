from __future__ import annotations

import datetime as dt
import re
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator

from ..models import EstimateStatus, InvoiceStatus

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ClientBase(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=200)
    email: constr(strip_whitespace=True, max_length=200)
    phone: constr(max_length=20) = ""
    address: constr(max_length=500) = ""
    city: constr(max_length=100) = ""
    state: constr(max_length=50) = ""
    zip_code: constr(max_length=20) = ""

    @field_validator("email")
    def validate_email(cls, value: str) -> str:
        if not EMAIL_REGEX.match(value):
            raise ValueError("Invalid email address")
        return value


class ClientCreateRequest(ClientBase):
    pass


class ClientUpdateRequest(ClientBase):
    pass


class ClientResponse(BaseModel):
    """Read side mirrors stored rows as-is; limits apply to requests only."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    created_at: dt.datetime
    updated_at: dt.datetime


class EstimateBase(BaseModel):
    client_id: str
    title: constr(strip_whitespace=True, min_length=1, max_length=200)
    description: constr(max_length=2000) = ""
    total_amount: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2)
    status: EstimateStatus = EstimateStatus.DRAFT
    valid_until: Optional[dt.datetime] = None


class EstimateCreateRequest(EstimateBase):
    pass


class EstimateUpdateRequest(EstimateBase):
    pass


class EstimateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    client_id: str
    estimate_number: str
    title: str
    description: str = ""
    total_amount: Decimal
    status: EstimateStatus
    valid_until: Optional[dt.datetime] = None
    created_at: dt.datetime
    updated_at: dt.datetime


class InvoiceBase(BaseModel):
    client_id: str
    estimate_id: Optional[str] = None
    description: constr(max_length=2000) = ""
    amount: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    due_date: Optional[dt.datetime] = None
    paid_date: Optional[dt.datetime] = None


class InvoiceCreateRequest(InvoiceBase):
    pass


class InvoiceUpdateRequest(InvoiceBase):
    pass


class InvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    client_id: str
    estimate_id: Optional[str] = None
    invoice_number: str
    description: str = ""
    amount: Decimal
    status: InvoiceStatus
    due_date: Optional[dt.datetime] = None
    paid_date: Optional[dt.datetime] = None
    created_at: dt.datetime
    updated_at: dt.datetime


class ClientDetailResponse(ClientResponse):
    estimates: List[EstimateResponse] = Field(default_factory=list)
    invoices: List[InvoiceResponse] = Field(default_factory=list)


class EstimateDetailResponse(EstimateResponse):
    client: Optional[ClientResponse] = None
    invoices: List[InvoiceResponse] = Field(default_factory=list)
