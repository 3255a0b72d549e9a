"""Normalization of user input and derived display values."""

from .budget import NOT_SPECIFIED, format_amount, format_range
from .deadline import deadline_label, deadline_midnight, days_until, is_past_deadline
from .parsing import clean_optional, normalize_whitespace, parse_amount, parse_deadline

__all__ = [
    # Parsing
    "parse_amount",
    "parse_deadline",
    "normalize_whitespace",
    "clean_optional",
    # Budget
    "NOT_SPECIFIED",
    "format_amount",
    "format_range",
    # Deadline
    "days_until",
    "deadline_midnight",
    "deadline_label",
    "is_past_deadline",
]
