from __future__ import annotations

import math
import numbers
from datetime import UTC, date, datetime, timedelta
from typing import Any

import pandas as pd

"""Date coercion for worksheet cells.

Cells arrive as spreadsheet serial numbers, native dates or free text. All of
them are reduced to a date value (or None) and rendered as YYYY-MM-DD using
UTC calendar fields.
"""

__all__ = [
    "SERIAL_EPOCH",
    "coerce_date",
    "format_date",
    "canonical_date",
]

# Day zero of spreadsheet serial dates. Serial n is taken as n days after this
# instant with no correction for the 1900 leap-year miscount.
SERIAL_EPOCH = datetime(1899, 12, 30, tzinfo=UTC)
MS_PER_DAY = 86_400_000


def _parse_date_text(text: str) -> datetime | None:
    # Words like "now"/"today" parse in pandas; real date text always has a digit
    if not any(ch.isdigit() for ch in text):
        return None
    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def coerce_date(value: Any) -> datetime | date | None:
    """Convert a cell value into a date, or None when it is not one.

    Args:
        value: Raw cell value (None, number, str, datetime/date/Timestamp)

    Returns:
        The native date unchanged, a UTC datetime for serial numbers, a parsed
        datetime for date text, otherwise None.
    """
    if value is pd.NaT:
        return None
    if isinstance(value, (datetime, date)):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        serial = float(value)
        if not math.isfinite(serial):
            return None
        try:
            return SERIAL_EPOCH + timedelta(milliseconds=serial * MS_PER_DAY)
        except OverflowError:
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        return _parse_date_text(text)
    return None


def format_date(value: datetime | date | None) -> str:
    """Render a coerced date as YYYY-MM-DD; None renders as ''."""
    if value is None:
        return ""
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(UTC)
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def canonical_date(value: Any) -> str:
    return format_date(coerce_date(value))
