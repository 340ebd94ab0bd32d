from __future__ import annotations

from pydantic import BaseModel

from ...schemas.tools import (
    ClientDetail,
    ClientEstimateBrief,
    ClientInvoiceBrief,
    ClientList,
    ClientSummary,
    ToolError,
)
from ...services.store import EstimationStore
from ...utils.parsing import Err, parse_uuid
from .base import guarded, status_value


class ClientTools:
    def __init__(self, store: EstimationStore) -> None:
        self.store = store

    @guarded("Failed to retrieve clients")
    def list_clients(self) -> BaseModel:
        clients = self.store.list_clients()
        return ClientList(
            [
                ClientSummary(
                    id=client.id,
                    name=client.name,
                    email=client.email,
                    phone=client.phone,
                    city=client.city,
                    state=client.state,
                )
                for client in clients
            ]
        )

    @guarded("Failed to retrieve client details")
    def get_client_details(self, client_id: str) -> BaseModel:
        parsed = parse_uuid(client_id)
        if isinstance(parsed, Err):
            return ToolError(error="Invalid client ID format")

        client = self.store.get_client(parsed.value, with_records=True)
        if client is None:
            return ToolError(error="Client not found")

        return ClientDetail(
            id=client.id,
            name=client.name,
            email=client.email,
            phone=client.phone,
            address=client.address,
            city=client.city,
            state=client.state,
            zip_code=client.zip_code,
            created_at=client.created_at,
            updated_at=client.updated_at,
            estimates=[
                ClientEstimateBrief(
                    id=estimate.id,
                    estimate_number=estimate.estimate_number,
                    title=estimate.title,
                    total_amount=estimate.total_amount,
                    status=status_value(estimate.status),
                    created_at=estimate.created_at,
                )
                for estimate in client.estimates
            ],
            invoices=[
                ClientInvoiceBrief(
                    id=invoice.id,
                    invoice_number=invoice.invoice_number,
                    description=invoice.description,
                    amount=invoice.amount,
                    status=status_value(invoice.status),
                    due_date=invoice.due_date,
                    paid_date=invoice.paid_date,
                )
                for invoice in client.invoices
            ],
        )
