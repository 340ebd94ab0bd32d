from __future__ import annotations

import functools
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Tuple, TypeVar

from pydantic import BaseModel

from ...schemas.tools import ToolError
from ...utils.parsing import quantize_money

F = TypeVar("F", bound=Callable[..., BaseModel])

logger = logging.getLogger(__name__)


def guarded(failure_message: str) -> Callable[[F], F]:
    """Turn any exception raised by a tool method into a ``ToolError`` payload."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> BaseModel:
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                logger.exception("Tool %s failed", func.__name__)
                return ToolError(error=failure_message, details=str(exc))

        return wrapper  # type: ignore[return-value]

    return decorator


def encode_payload(payload: BaseModel) -> Any:
    return payload.model_dump(mode="json", by_alias=True)


def money_sum(values: Iterable[Decimal]) -> Decimal:
    return quantize_money(sum(values, Decimal("0")))


def status_value(status: Any) -> str:
    return getattr(status, "value", status)


def group_by_status(records: Iterable[Any], amount_field: str) -> List[Tuple[str, int, Decimal]]:
    """Group records by status as ``(status, count, total)`` in first-appearance order."""
    groups: Dict[str, List[Decimal]] = {}
    for record in records:
        groups.setdefault(status_value(record.status), []).append(getattr(record, amount_field))
    return [(status, len(amounts), money_sum(amounts)) for status, amounts in groups.items()]
