"""Result shapes returned by the MCP tools.

Entity data is keyed in PascalCase (``EstimateNumber``, ``TotalAmount``) while
wrapper keys (``success``, ``estimate``, ``error``) stay lowercase. Stored money is
serialized as a string with two fractional digits.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, RootModel, SerializeAsAny, model_serializer
from pydantic.alias_generators import to_pascal


class Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)


class ToolError(BaseModel):
    error: str
    details: Optional[str] = None
    hint: Optional[str] = None

    @model_serializer(mode="wrap")
    def _drop_empty(self, handler):  # type: ignore[no-untyped-def]
        return {key: value for key, value in handler(self).items() if value is not None}


class ToolMessage(BaseModel):
    message: str


class ClientSummary(Record):
    id: str
    name: str
    email: str
    phone: str
    city: str
    state: str


class ClientEstimateBrief(Record):
    id: str
    estimate_number: str
    title: str
    total_amount: Decimal
    status: str
    created_at: dt.datetime


class ClientInvoiceBrief(Record):
    id: str
    invoice_number: str
    description: str
    amount: Decimal
    status: str
    due_date: Optional[dt.datetime]
    paid_date: Optional[dt.datetime]


class ClientDetail(Record):
    id: str
    name: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    zip_code: str
    created_at: dt.datetime
    updated_at: dt.datetime
    estimates: List[ClientEstimateBrief]
    invoices: List[ClientInvoiceBrief]


class EstimateListItem(Record):
    id: str
    client_id: str
    estimate_number: str
    title: str
    description: str
    total_amount: Decimal
    status: str
    valid_until: Optional[dt.datetime]
    created_at: dt.datetime


class RelatedInvoice(Record):
    id: str
    invoice_number: str
    amount: Decimal
    status: str


class EstimateDetail(Record):
    id: str
    client_id: str
    client_name: str
    estimate_number: str
    title: str
    description: str
    total_amount: Decimal
    status: str
    valid_until: Optional[dt.datetime]
    created_at: dt.datetime
    updated_at: dt.datetime
    related_invoices: List[RelatedInvoice]


class CreatedEstimate(Record):
    id: str
    estimate_number: str
    title: str
    description: str
    total_amount: Decimal
    status: str
    valid_until: Optional[dt.datetime]
    created_at: dt.datetime


class UpdatedEstimate(CreatedEstimate):
    updated_at: dt.datetime


class EstimateMutationResult(BaseModel):
    success: bool = True
    message: str
    estimate: SerializeAsAny[CreatedEstimate]


class EstimateStatusBreakdown(Record):
    status: str
    count: int
    total_value: Decimal


class InvoiceStatusBreakdown(Record):
    status: str
    count: int
    total_amount: Decimal


class RecentEstimate(Record):
    estimate_number: str
    title: str
    total_amount: Decimal
    status: str
    created_at: dt.datetime


class EstimateStatistics(Record):
    total_estimates: int
    total_value: Decimal
    average_value: Decimal
    status_breakdown: List[EstimateStatusBreakdown]
    recent_estimates: List[RecentEstimate]


class InvoiceListItem(Record):
    id: str
    client_id: str
    estimate_id: Optional[str]
    invoice_number: str
    description: str
    amount: Decimal
    status: str
    due_date: Optional[dt.datetime]
    paid_date: Optional[dt.datetime]
    created_at: dt.datetime


class OverdueInvoice(Record):
    invoice_number: str
    amount: Decimal
    due_date: Optional[dt.datetime]
    days_overdue: int


class RecentInvoice(Record):
    invoice_number: str
    amount: Decimal
    status: str
    due_date: Optional[dt.datetime]
    created_at: dt.datetime


class EstimateTotals(Record):
    total: int
    total_value: Decimal
    by_status: List[EstimateStatusBreakdown]


class InvoiceTotals(Record):
    total: int
    total_billed: Decimal
    total_paid: Decimal
    total_outstanding: Decimal
    by_status: List[InvoiceStatusBreakdown]
    overdue_invoices: List[OverdueInvoice]


class RecentActivity(Record):
    recent_estimates: List[RecentEstimate]
    recent_invoices: List[RecentInvoice]


class ClientFinancialSummary(Record):
    client_id: str
    client_name: str
    estimates: EstimateTotals
    invoices: InvoiceTotals
    recent_activity: RecentActivity


class ApiRoutesDocument(BaseModel):
    openapi_spec: Dict[str, Any]
    metadata: Dict[str, Any]


class ClientList(RootModel[List[ClientSummary]]):
    pass


class EstimateList(RootModel[List[EstimateListItem]]):
    pass


class InvoiceList(RootModel[List[InvoiceListItem]]):
    pass
