from __future__ import annotations

import datetime as dt
import enum
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, Money, TimestampMixin, UUIDMixin


class EstimateStatus(str, enum.Enum):
    DRAFT = "Draft"
    SENT = "Sent"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class InvoiceStatus(str, enum.Enum):
    DRAFT = "Draft"
    SENT = "Sent"
    PAID = "Paid"
    OVERDUE = "Overdue"


STATUS_DESCRIPTIONS = {
    EstimateStatus: {
        EstimateStatus.DRAFT: "Estimate is being prepared",
        EstimateStatus.SENT: "Estimate has been sent to client",
        EstimateStatus.APPROVED: "Client has approved the estimate",
        EstimateStatus.REJECTED: "Client has rejected the estimate",
    },
    InvoiceStatus: {
        InvoiceStatus.DRAFT: "Invoice is being prepared",
        InvoiceStatus.SENT: "Invoice has been sent to client",
        InvoiceStatus.PAID: "Invoice has been paid",
        InvoiceStatus.OVERDUE: "Invoice payment is overdue",
    },
}


def _status_column(enum_cls: type[enum.Enum]) -> Enum:
    # Stored as the display value ("Draft"), not the member name.
    return Enum(
        enum_cls,
        native_enum=False,
        length=16,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


class Client(Base, UUIDMixin, TimestampMixin):
    """A client for construction projects"""

    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(200), nullable=False, doc="Client name")
    email: Mapped[str] = mapped_column(String(200), nullable=False, doc="Client email address")
    phone: Mapped[str] = mapped_column(String(20), default="", doc="Client phone number")
    address: Mapped[str] = mapped_column(String(500), default="", doc="Street address")
    city: Mapped[str] = mapped_column(String(100), default="", doc="City")
    state: Mapped[str] = mapped_column(String(50), default="", doc="State or province")
    zip_code: Mapped[str] = mapped_column(String(20), default="", doc="ZIP or postal code")

    estimates: Mapped[List["Estimate"]] = relationship(
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="Estimate.created_at",
        doc="All estimates associated with this client",
    )
    invoices: Mapped[List["Invoice"]] = relationship(
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="Invoice.created_at",
        doc="All invoices associated with this client",
    )


class Estimate(Base, UUIDMixin, TimestampMixin):
    """A construction project estimate"""

    __tablename__ = "estimates"

    client_id: Mapped[str] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="ID of the client this estimate is for",
    )
    estimate_number: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True, doc="Auto-generated estimate number (format: EST-YYYY-###)"
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False, doc="Short title for the estimate")
    description: Mapped[str] = mapped_column(String(2000), default="", doc="Detailed description of the work")
    total_amount: Mapped[Decimal] = mapped_column(Money, nullable=False, doc="Total estimated cost")
    status: Mapped[EstimateStatus] = mapped_column(
        _status_column(EstimateStatus),
        nullable=False,
        default=EstimateStatus.DRAFT,
        doc="Current status of the estimate",
    )
    valid_until: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime, doc="Date until which the estimate is valid"
    )

    client: Mapped[Client] = relationship(back_populates="estimates", doc="The client this estimate belongs to")
    invoices: Mapped[List["Invoice"]] = relationship(
        back_populates="estimate",
        order_by="Invoice.created_at",
        doc="Invoices generated from this estimate",
    )


class Invoice(Base, UUIDMixin, TimestampMixin):
    """An invoice for construction work"""

    __tablename__ = "invoices"

    client_id: Mapped[str] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="ID of the client this invoice is for",
    )
    estimate_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("estimates.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        doc="ID of the estimate this invoice is based on (optional)",
    )
    invoice_number: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True, doc="Auto-generated invoice number (format: INV-YYYY-###)"
    )
    description: Mapped[str] = mapped_column(String(2000), default="", doc="Description of the invoiced work")
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False, doc="Invoice amount")
    status: Mapped[InvoiceStatus] = mapped_column(
        _status_column(InvoiceStatus),
        nullable=False,
        default=InvoiceStatus.DRAFT,
        doc="Current status of the invoice",
    )
    due_date: Mapped[Optional[dt.datetime]] = mapped_column(DateTime, doc="Date when payment is due")
    paid_date: Mapped[Optional[dt.datetime]] = mapped_column(DateTime, doc="Date when the invoice was paid")

    client: Mapped[Client] = relationship(back_populates="invoices", doc="The client this invoice belongs to")
    estimate: Mapped[Optional[Estimate]] = relationship(
        back_populates="invoices", doc="The estimate this invoice is based on (if any)"
    )
