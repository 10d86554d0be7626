"""Display formatting for dates and amounts placed into notices."""

from __future__ import annotations

from datetime import date, datetime


def format_date(value: date | datetime | str) -> str:
    """Long US date: 2025-01-05 -> "January 5, 2025"."""
    if isinstance(value, str):
        # 3.10 fromisoformat does not accept a Z suffix
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return f"{value:%B} {value.day}, {value.year}"


def format_currency(amount: float) -> str:
    """US dollars with two decimals: 1234.5 -> "$1,234.50"."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
