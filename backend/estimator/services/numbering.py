from __future__ import annotations

import datetime as dt
from typing import Optional

ESTIMATE_PREFIX = "EST"
INVOICE_PREFIX = "INV"


def year_prefix(prefix: str, year: int) -> str:
    return f"{prefix}-{year}-"


def format_sequence_number(prefix: str, year: int, sequence: int) -> str:
    return f"{prefix}-{year}-{sequence:03d}"


def next_sequence_number(prefix: str, year: int, latest: Optional[str]) -> str:
    """Derive the number following ``latest``, the greatest existing number for the year.

    A missing or unparsable ``latest`` restarts the sequence at 1.
    """
    sequence = 1
    if latest:
        parts = latest.split("-")
        if len(parts) == 3 and parts[2].isdigit():
            sequence = int(parts[2]) + 1
    return format_sequence_number(prefix, year, sequence)


def current_year() -> int:
    return dt.datetime.now(dt.timezone.utc).year
