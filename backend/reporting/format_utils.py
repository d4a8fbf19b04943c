"""Consistent formatting for proposal numbers, dates and filenames. Never render raw floats."""
from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

NOT_APPLICABLE = "N/A"
ZERO_PERCENT = "0%"

# Mirrors the form's accepted ideograph range (CJK Unified Ideographs U+4E00..U+9FA5).
_FILENAME_UNSAFE = re.compile(r"[^a-zA-Z0-9\u4e00-\u9fa5]")

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d", "%m/%d/%Y")


def format_plain_number(value: float) -> str:
    """Shortest decimal text for a number: 3.5 -> "3.5", 10.0 -> "10"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_money(value: float) -> str:
    """Group thousands with commas; up to three fraction digits, trailing zeros trimmed. No symbol."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    text = f"{value:,.3f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text


def compute_return_rate(amount: float, premium_total: float) -> str:
    """
    Total return as a whole-number percentage of premium, rounded half-up.

    A zero premium short-circuits to "0%" instead of dividing.
    """
    if premium_total == 0:
        return ZERO_PERCENT
    try:
        ratio = Decimal(str(amount)) / Decimal(str(premium_total)) * 100
        rounded = int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        # NaN or infinite inputs
        return ZERO_PERCENT
    return f"{rounded}%"


def parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        return None
    # ISO timestamps ("2025-03-31T00:00:00Z") keep only their calendar part.
    head = re.split(r"[T ]", text, maxsplit=1)[0]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(head, fmt).date()
        except ValueError:
            continue
    return None


def format_short_date(value: str, month_unit: str = "月", day_unit: str = "日") -> str:
    """Month-day label ("3月31日"). Empty stays empty; unparseable text passes through unchanged."""
    if not value:
        return ""
    parsed = parse_date(value)
    if parsed is None:
        return value
    return f"{parsed.month}{month_unit}{parsed.day}{day_unit}"


def sanitize_filename_component(name: str) -> str:
    """Replace each character outside ASCII letters, digits and CJK ideographs with one underscore."""
    return _FILENAME_UNSAFE.sub("_", name)
