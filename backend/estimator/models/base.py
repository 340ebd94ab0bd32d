from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from ..utils.parsing import quantize_money


def utcnow() -> dt.datetime:
    """Naive UTC timestamp; SQLite drops tzinfo on the way back anyway."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False, doc="When the record was created"
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False, doc="When the record was last updated"
    )


class UUIDMixin:
    id: Mapped[str] = mapped_column(
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        doc="Unique identifier",
    )


class Money(TypeDecorator):
    """Fixed-point amount stored as its decimal text.

    SQLite has no DECIMAL storage class and ``Numeric`` round-trips through
    REAL, which drops digits past the 15th significant one.
    """

    impl = String(40)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return format(quantize_money(Decimal(value)), "f")

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)
