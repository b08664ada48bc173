from __future__ import annotations

from datetime import date

"""Billing period helpers.

Month names are fixed English abbreviations so labels do not depend on the
process locale.
"""

__all__ = [
    "MONTH_ABBR",
    "month_label",
    "previous_month_and_year",
]

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def month_label(d: date) -> str:
    """'Jan 2025' style label."""
    return f"{MONTH_ABBR[d.month - 1]} {d.year}"


def previous_month_and_year(today: date | None = None) -> tuple[str, str]:
    """Short name and year of the month before ``today``."""
    today = today or date.today()
    if today.month == 1:
        return MONTH_ABBR[11], str(today.year - 1)
    return MONTH_ABBR[today.month - 2], str(today.year)
