"""
Parsing utilities for normalizing user input.

Handles deadline, money amount, and free-text normalization.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import Decimal

import dateparser

from tenderhub.core.errors import ValidationError


# =============================================================================
# Date Parsing
# =============================================================================

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_deadline(
    value: str | datetime | date | None,
    *,
    relative_base: datetime | None = None,
    field: str = "deadline",
) -> date:
    """Parse a deadline into a calendar date.

    Handles:
    - date and datetime objects (time part dropped)
    - ISO dates ("2026-11-19")
    - Anything dateparser understands ("in 30 days", "Nov 19 2026")

    Args:
        value: Input to parse
        relative_base: Base datetime for relative expressions
        field: Field name reported on failure

    Raises:
        ValidationError: Missing or unparseable value
    """
    if value is None:
        raise ValidationError("Deadline is required", field=field)

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = normalize_whitespace(str(value))
    if not text:
        raise ValidationError("Deadline is required", field=field)

    if _ISO_DATE.match(text):
        try:
            return date.fromisoformat(text)
        except ValueError as e:
            raise ValidationError(f"Invalid deadline: {text}", field=field) from e

    settings: dict = {
        "PREFER_DATES_FROM": "future",  # Deadlines are usually in the future
        "RETURN_AS_TIMEZONE_AWARE": False,
        "DATE_ORDER": "YMD",
    }
    if relative_base is not None:
        settings["RELATIVE_BASE"] = relative_base

    parsed = dateparser.parse(text, settings=settings)
    if parsed is None:
        raise ValidationError(f"Invalid deadline: {text}", field=field)
    return parsed.date()


# =============================================================================
# Money Parsing
# =============================================================================

_SUFFIXES = {"K": 1_000, "M": 1_000_000, "B": 1_000_000_000}
_AMOUNT = re.compile(r"^(-?[\d,]*\.?\d+)\s*([KMB])?$")


def parse_amount(
    value: str | float | int | Decimal | None,
    *,
    field: str = "budget",
) -> float | None:
    """Parse an optional non-negative money amount.

    Handles plain numbers, thousands separators ("10,000"), a leading
    currency symbol ("$5000") and K/M/B suffixes ("1.5M"). None and blank
    strings mean "absent" and yield None, never zero.

    Raises:
        ValidationError: Negative, non-finite or unparseable amount
    """
    if value is None:
        return None

    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field}: {value!r}", field=field)

    if isinstance(value, (int, float, Decimal)):
        try:
            amount = float(value)
        except OverflowError:
            raise ValidationError(f"Invalid {field}: amount is too large", field=field) from None
    else:
        text = str(value).strip().upper().replace(" ", "")
        if not text:
            return None

        text = text.lstrip("$€£")
        match = _AMOUNT.match(text)
        if not match:
            raise ValidationError(f"Invalid {field}: {value!r}", field=field)

        amount = float(match.group(1).replace(",", ""))
        if match.group(2):
            amount *= _SUFFIXES[match.group(2)]

    if not math.isfinite(amount):
        raise ValidationError(f"Invalid {field}: {value!r}", field=field)
    if amount < 0:
        raise ValidationError(f"{field.replace('_', ' ').capitalize()} cannot be negative", field=field)
    return amount


# =============================================================================
# Text Utilities
# =============================================================================


def normalize_whitespace(text: str | None) -> str:
    """Normalize whitespace in text."""
    if text is None:
        return ""
    return " ".join(text.split())


def clean_optional(text: str | None) -> str | None:
    """Strip text and map blank values to None."""
    if text is None:
        return None
    text = text.strip()
    return text or None
