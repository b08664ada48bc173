from __future__ import annotations

from datetime import date

from timesheet_invoice.services.periods import month_label, previous_month_and_year


def test_month_label():
    assert month_label(date(2025, 1, 3)) == "Jan 2025"
    assert month_label(date(2024, 12, 31)) == "Dec 2024"


def test_previous_month_wraps_year():
    assert previous_month_and_year(date(2026, 1, 10)) == ("Dec", "2025")
    assert previous_month_and_year(date(2026, 10, 19)) == ("Sep", "2026")
    assert previous_month_and_year(date(2026, 3, 31)) == ("Feb", "2026")
