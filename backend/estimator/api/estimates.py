from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..core.database import run_sync
from ..core.dependencies import get_store
from ..models import Estimate
from ..schemas import (
    EstimateCreateRequest,
    EstimateDetailResponse,
    EstimateResponse,
    EstimateUpdateRequest,
)
from ..services.numbering import ESTIMATE_PREFIX, current_year, next_sequence_number, year_prefix
from ..services.store import EstimationStore

router = APIRouter(prefix="/api/estimates", tags=["estimates"])

logger = logging.getLogger(__name__)


def estimate_not_found(estimate_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Estimate with ID {estimate_id} not found.",
    )


def unknown_client(client_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Client with ID {client_id} not found.",
    )


def _create_estimate(store: EstimationStore, payload: EstimateCreateRequest) -> Optional[Estimate]:
    if not store.client_exists(payload.client_id):
        return None
    year = current_year()
    latest = store.latest_estimate_number(year_prefix(ESTIMATE_PREFIX, year))
    return store.create_estimate(
        estimate_number=next_sequence_number(ESTIMATE_PREFIX, year, latest),
        **payload.model_dump(),
    )


@router.get("", response_model=List[EstimateResponse])
async def list_estimates(
    client_id: Optional[str] = Query(None),
    store: EstimationStore = Depends(get_store),
):
    return await run_sync(store.list_estimates, client_id=client_id)


@router.get("/{estimate_id}", response_model=EstimateDetailResponse)
async def get_estimate(estimate_id: str, store: EstimationStore = Depends(get_store)):
    estimate = await run_sync(store.get_estimate, estimate_id, with_related=True)
    if estimate is None:
        raise estimate_not_found(estimate_id)
    return estimate


@router.post("", response_model=EstimateResponse, status_code=status.HTTP_201_CREATED)
async def create_estimate(payload: EstimateCreateRequest, store: EstimationStore = Depends(get_store)):
    estimate = await run_sync(_create_estimate, store, payload)
    if estimate is None:
        raise unknown_client(payload.client_id)
    logger.info("Created estimate %s", estimate.estimate_number)
    return estimate


@router.put("/{estimate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_estimate(
    estimate_id: str,
    payload: EstimateUpdateRequest,
    store: EstimationStore = Depends(get_store),
):
    existing = await run_sync(store.get_estimate, estimate_id)
    if existing is None:
        raise estimate_not_found(estimate_id)
    if payload.client_id != existing.client_id and not await run_sync(store.client_exists, payload.client_id):
        raise unknown_client(payload.client_id)
    await run_sync(store.update_estimate, estimate_id, **payload.model_dump())


@router.delete("/{estimate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_estimate(estimate_id: str, store: EstimationStore = Depends(get_store)):
    deleted = await run_sync(store.delete_estimate, estimate_id)
    if not deleted:
        raise estimate_not_found(estimate_id)
    logger.info("Deleted estimate %s", estimate_id)
