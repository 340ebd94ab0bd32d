"""Parsers for the loosely-typed string arguments agents send us.

Each parser returns either ``Ok(value)`` or ``Err(reason)`` so callers branch
on the tag instead of catching exceptions.
"""

from __future__ import annotations

import datetime as dt
import enum
import re
import uuid
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Generic, Optional, Type, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=enum.Enum)

CENTS = Decimal("0.01")
# NUMERIC(18, 2): 16 integer digits
MONEY_LIMIT = Decimal(10) ** 16
AMOUNT_PATTERN = re.compile(r"^[+-]?[0-9]+(\.[0-9]+)?$")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    reason: str


ParseResult = Union[Ok[T], Err]


def parse_uuid(raw: Optional[str]) -> ParseResult[str]:
    """Accepts any form ``uuid.UUID`` understands and returns the canonical string."""
    if not raw:
        return Err("empty identifier")
    try:
        return Ok(str(uuid.UUID(raw.strip())))
    except (ValueError, AttributeError) as exc:
        return Err(str(exc))


def parse_optional_uuid(raw: Optional[str]) -> Optional[str]:
    """Filter variant: anything unparsable means "no filter"."""
    result = parse_uuid(raw)
    return result.value if isinstance(result, Ok) else None


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_EVEN)


def parse_decimal(raw: Optional[str]) -> ParseResult[Decimal]:
    """Plain signed decimal notation only, at most 16 integer digits after rounding."""
    if not isinstance(raw, str):
        return Err("missing amount")
    text = raw.strip()
    if not AMOUNT_PATTERN.match(text):
        return Err(f"not a decimal: {raw!r}")
    try:
        value = quantize_money(Decimal(text))
    except InvalidOperation:
        return Err(f"not a decimal: {raw!r}")
    if abs(value) >= MONEY_LIMIT:
        return Err(f"amount out of range: {raw!r}")
    return Ok(value)


def parse_enum(enum_cls: Type[E], raw: Optional[str]) -> ParseResult[E]:
    """Case-insensitive match against member values."""
    if raw is None:
        return Err("missing value")
    wanted = raw.strip().lower()
    for member in enum_cls:
        if str(member.value).lower() == wanted:
            return Ok(member)
    return Err(f"unknown {enum_cls.__name__}: {raw!r}")


def parse_datetime(raw: Optional[str]) -> ParseResult[dt.datetime]:
    """ISO 8601 date or datetime; aware values are converted to naive UTC."""
    if raw is None:
        return Err("missing date")
    try:
        value = dt.datetime.fromisoformat(raw.strip())
    except (ValueError, AttributeError):
        return Err(f"not an ISO 8601 date: {raw!r}")
    if value.tzinfo is not None:
        value = value.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return Ok(value)


def enum_values(enum_cls: Type[enum.Enum]) -> str:
    return ", ".join(str(member.value) for member in enum_cls)
