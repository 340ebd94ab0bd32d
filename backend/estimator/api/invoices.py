from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..core.database import run_sync
from ..core.dependencies import get_store
from ..schemas import InvoiceCreateRequest, InvoiceResponse, InvoiceUpdateRequest
from ..services.numbering import INVOICE_PREFIX, current_year, next_sequence_number, year_prefix
from ..services.store import EstimationStore

router = APIRouter(prefix="/api/invoices", tags=["invoices"])

logger = logging.getLogger(__name__)


def invoice_not_found(invoice_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Invoice with ID {invoice_id} not found.",
    )


def _check_references(store: EstimationStore, client_id: str, estimate_id: Optional[str]) -> None:
    if not store.client_exists(client_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Client with ID {client_id} not found.",
        )
    if estimate_id is not None and not store.estimate_exists(estimate_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Estimate with ID {estimate_id} not found.",
        )


def _create_invoice(store: EstimationStore, payload: InvoiceCreateRequest):
    _check_references(store, payload.client_id, payload.estimate_id)
    year = current_year()
    latest = store.latest_invoice_number(year_prefix(INVOICE_PREFIX, year))
    return store.create_invoice(
        invoice_number=next_sequence_number(INVOICE_PREFIX, year, latest),
        **payload.model_dump(),
    )


@router.get("", response_model=List[InvoiceResponse])
async def list_invoices(
    client_id: Optional[str] = Query(None),
    estimate_id: Optional[str] = Query(None),
    store: EstimationStore = Depends(get_store),
):
    return await run_sync(store.list_invoices, client_id=client_id, estimate_id=estimate_id)


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(invoice_id: str, store: EstimationStore = Depends(get_store)):
    invoice = await run_sync(store.get_invoice, invoice_id)
    if invoice is None:
        raise invoice_not_found(invoice_id)
    return invoice


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(payload: InvoiceCreateRequest, store: EstimationStore = Depends(get_store)):
    invoice = await run_sync(_create_invoice, store, payload)
    logger.info("Created invoice %s", invoice.invoice_number)
    return invoice


@router.put("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_invoice(
    invoice_id: str,
    payload: InvoiceUpdateRequest,
    store: EstimationStore = Depends(get_store),
):
    if not await run_sync(store.get_invoice, invoice_id):
        raise invoice_not_found(invoice_id)
    await run_sync(_check_references, store, payload.client_id, payload.estimate_id)
    await run_sync(store.update_invoice, invoice_id, **payload.model_dump())


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(invoice_id: str, store: EstimationStore = Depends(get_store)):
    deleted = await run_sync(store.delete_invoice, invoice_id)
    if not deleted:
        raise invoice_not_found(invoice_id)
    logger.info("Deleted invoice %s", invoice_id)
