from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ..core.database import run_sync
from ..core.dependencies import get_store
from ..models import Client
from ..schemas import (
    ClientCreateRequest,
    ClientDetailResponse,
    ClientResponse,
    ClientUpdateRequest,
)
from ..services.store import EstimationStore

router = APIRouter(prefix="/api/clients", tags=["clients"])

logger = logging.getLogger(__name__)


def client_not_found(client_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Client with ID {client_id} not found.",
    )


@router.get("", response_model=List[ClientResponse])
async def list_clients(store: EstimationStore = Depends(get_store)):
    return await run_sync(store.list_clients, newest_first=True)


@router.get("/{client_id}", response_model=ClientDetailResponse)
async def get_client(client_id: str, store: EstimationStore = Depends(get_store)):
    client = await run_sync(store.get_client, client_id, with_records=True)
    if client is None:
        raise client_not_found(client_id)
    return client


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(payload: ClientCreateRequest, store: EstimationStore = Depends(get_store)):
    client: Client = await run_sync(store.create_client, **payload.model_dump())
    logger.info("Created client %s", client.id)
    return client


@router.put("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_client(
    client_id: str,
    payload: ClientUpdateRequest,
    store: EstimationStore = Depends(get_store),
):
    client = await run_sync(store.update_client, client_id, **payload.model_dump())
    if client is None:
        raise client_not_found(client_id)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(client_id: str, store: EstimationStore = Depends(get_store)):
    deleted = await run_sync(store.delete_client, client_id)
    if not deleted:
        raise client_not_found(client_id)
    logger.info("Deleted client %s", client_id)
