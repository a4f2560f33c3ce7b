"""
Input boundary — the one place loose values become typed ones.

Records arrive from spreadsheets, JSON bodies and YAML files where amounts
may be strings, blanks or ``None`` and days may be floats. Everything here
returns a typed optional (or a safe default) instead of raising, so a bad
cell degrades a single record rather than the whole plan.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

_CENT = Decimal("0.01")


def parse_amount(value: Any) -> float | None:
    """Parse a money amount, returning ``None`` for blanks and garbage."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip().replace("\u00a0", "").replace(" ", "").replace(",", ".")
        if not text:
            return None
        try:
            parsed = float(text)
        except ValueError:
            return None
    elif isinstance(value, (int, float, Decimal)):
        parsed = float(value)
    else:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def normalize_amount(value: Any) -> float:
    """Like :func:`parse_amount` but falls back to ``0.0``."""
    parsed = parse_amount(value)
    return 0.0 if parsed is None else parsed


def parse_day(value: Any) -> int | None:
    """Parse a day of month (1-31). Fractions are truncated."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
    elif isinstance(value, (int, float)):
        parsed = float(value)
    else:
        return None
    if not math.isfinite(parsed):
        return None
    day = int(parsed)
    if day < 1 or day > 31:
        return None
    return day


def to_date(value: date | datetime | str) -> date:
    """Reduce a date, datetime or ISO string to its calendar date.

    Raises:
        ValueError: If a string is not an ISO 8601 date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def to_date_key(value: date | datetime | str) -> str:
    """ISO ``YYYY-MM-DD`` key for a date-like value."""
    return to_date(value).isoformat()


def round_money(value: float) -> float:
    """Round to cents, half away from zero on the exact binary value.

    Never returns ``-0.0``.
    """
    rounded = float(Decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))
    return rounded + 0.0
