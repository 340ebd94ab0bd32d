from .base import Base, Money, utcnow
from .entities import (
    STATUS_DESCRIPTIONS,
    Client,
    Estimate,
    EstimateStatus,
    Invoice,
    InvoiceStatus,
)

__all__ = [
    "Base",
    "Money",
    "utcnow",
    "Client",
    "Estimate",
    "Invoice",
    "EstimateStatus",
    "InvoiceStatus",
    "STATUS_DESCRIPTIONS",
]
