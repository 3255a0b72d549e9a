"""
Budget display formatting.

A missing bound is None; zero is a real amount and is shown.
"""

from __future__ import annotations

NOT_SPECIFIED = "not specified"


def format_amount(value: float, currency_symbol: str = "$") -> str:
    """Format an amount with thousands separators.

    Whole amounts drop the decimals: 10000 -> "$10,000", 99.5 -> "$99.50".
    """
    if float(value).is_integer():
        return f"{currency_symbol}{int(value):,}"
    return f"{currency_symbol}{value:,.2f}"


def format_range(
    budget_min: float | None,
    budget_max: float | None,
    currency_symbol: str = "$",
) -> str:
    """Render a budget range for display.

    | min     | max     | output        |
    |---------|---------|---------------|
    | None    | None    | not specified |
    | present | present | min–max       |
    | present | None    | from min      |
    | None    | present | up to max     |
    """
    if budget_min is None and budget_max is None:
        return NOT_SPECIFIED
    if budget_min is not None and budget_max is not None:
        return (
            f"{format_amount(budget_min, currency_symbol)}"
            f"–{format_amount(budget_max, currency_symbol)}"
        )
    if budget_min is not None:
        return f"from {format_amount(budget_min, currency_symbol)}"
    return f"up to {format_amount(budget_max, currency_symbol)}"
