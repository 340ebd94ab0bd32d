from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel

from ...models import Invoice, InvoiceStatus, utcnow
from ...schemas.tools import (
    ClientFinancialSummary,
    EstimateStatusBreakdown,
    EstimateTotals,
    InvoiceList,
    InvoiceListItem,
    InvoiceStatusBreakdown,
    InvoiceTotals,
    OverdueInvoice,
    RecentActivity,
    RecentInvoice,
    ToolError,
)
from ...services.store import EstimationStore
from ...utils.parsing import Err, parse_optional_uuid, parse_uuid
from .base import group_by_status, guarded, money_sum, status_value
from .estimates import recent_estimate

RECENT_ACTIVITY_LIMIT = 3


def days_overdue(invoice: Invoice, now: dt.datetime) -> int:
    """Whole days past the due date, truncated toward zero."""
    if invoice.due_date is None:
        return 0
    return int((now - invoice.due_date).total_seconds() / 86400)


class InvoiceTools:
    def __init__(self, store: EstimationStore) -> None:
        self.store = store

    @guarded("Failed to retrieve invoices")
    def list_invoices(
        self,
        client_id: Optional[str] = None,
        estimate_id: Optional[str] = None,
    ) -> BaseModel:
        invoices = self.store.list_invoices(
            client_id=parse_optional_uuid(client_id),
            estimate_id=parse_optional_uuid(estimate_id),
        )
        return InvoiceList(
            [
                InvoiceListItem(
                    id=invoice.id,
                    client_id=invoice.client_id,
                    estimate_id=invoice.estimate_id,
                    invoice_number=invoice.invoice_number,
                    description=invoice.description,
                    amount=invoice.amount,
                    status=status_value(invoice.status),
                    due_date=invoice.due_date,
                    paid_date=invoice.paid_date,
                    created_at=invoice.created_at,
                )
                for invoice in invoices
            ]
        )

    @guarded("Failed to retrieve financial summary")
    def get_client_financial_summary(self, client_id: str) -> BaseModel:
        """Totals, status breakdowns and recent activity for one client.

        Outstanding covers every invoice that is not Paid, so billed always
        equals paid plus outstanding.
        """
        parsed = parse_uuid(client_id)
        if isinstance(parsed, Err):
            return ToolError(error="Invalid client ID format")

        client = self.store.get_client(parsed.value)
        if client is None:
            return ToolError(error="Client not found")

        estimates = self.store.list_estimates(client_id=client.id)
        invoices = self.store.list_invoices(client_id=client.id)
        paid = [invoice for invoice in invoices if invoice.status == InvoiceStatus.PAID]
        unpaid = [invoice for invoice in invoices if invoice.status != InvoiceStatus.PAID]
        now = utcnow()

        return ClientFinancialSummary(
            client_id=client.id,
            client_name=client.name,
            estimates=EstimateTotals(
                total=len(estimates),
                total_value=money_sum(estimate.total_amount for estimate in estimates),
                by_status=[
                    EstimateStatusBreakdown(status=status, count=count, total_value=value)
                    for status, count, value in group_by_status(estimates, "total_amount")
                ],
            ),
            invoices=InvoiceTotals(
                total=len(invoices),
                total_billed=money_sum(invoice.amount for invoice in invoices),
                total_paid=money_sum(invoice.amount for invoice in paid),
                total_outstanding=money_sum(invoice.amount for invoice in unpaid),
                by_status=[
                    InvoiceStatusBreakdown(status=status, count=count, total_amount=value)
                    for status, count, value in group_by_status(invoices, "amount")
                ],
                overdue_invoices=[
                    OverdueInvoice(
                        invoice_number=invoice.invoice_number,
                        amount=invoice.amount,
                        due_date=invoice.due_date,
                        days_overdue=days_overdue(invoice, now),
                    )
                    for invoice in invoices
                    if invoice.status == InvoiceStatus.OVERDUE
                ],
            ),
            recent_activity=RecentActivity(
                recent_estimates=[recent_estimate(estimate) for estimate in estimates[:RECENT_ACTIVITY_LIMIT]],
                recent_invoices=[
                    RecentInvoice(
                        invoice_number=invoice.invoice_number,
                        amount=invoice.amount,
                        status=status_value(invoice.status),
                        due_date=invoice.due_date,
                        created_at=invoice.created_at,
                    )
                    for invoice in invoices[:RECENT_ACTIVITY_LIMIT]
                ],
            ),
        )
