from .records import (
    ClientCreateRequest,
    ClientDetailResponse,
    ClientResponse,
    ClientUpdateRequest,
    EstimateCreateRequest,
    EstimateDetailResponse,
    EstimateResponse,
    EstimateUpdateRequest,
    InvoiceCreateRequest,
    InvoiceResponse,
    InvoiceUpdateRequest,
)
from .tools import ToolError, ToolMessage

__all__ = [
    "ClientCreateRequest",
    "ClientUpdateRequest",
    "ClientResponse",
    "ClientDetailResponse",
    "EstimateCreateRequest",
    "EstimateUpdateRequest",
    "EstimateResponse",
    "EstimateDetailResponse",
    "InvoiceCreateRequest",
    "InvoiceUpdateRequest",
    "InvoiceResponse",
    "ToolError",
    "ToolMessage",
]
