from __future__ import annotations

from ..models.invoice import Invoice
from ..models.timesheet import ParseResult

"""Summary line rendering.

Format:
SUMMARY items={n} hours={h} processed={p} skipped={s} subtotal={st}
tax={t} discount={d} total={tot}

Amounts and hours are shown with two decimals. Display only; the invoice
values themselves stay unrounded.
"""

__all__ = [
    "render_summary_line",
]


def _money(value: float) -> str:
    return f"{value:.2f}"


def render_summary_line(parsed: ParseResult, invoice: Invoice) -> str:
    """Render the SUMMARY line for one parsed timesheet and its invoice.

    Examples:
        >>> from timesheet_invoice.models.invoice import Invoice, Party
        >>> p = Party(name="A", address="", email="", phone="")
        >>> parsed = ParseResult(items=[], total_hours=6.0, month="Jan 2025",
        ...                      rows_processed=2, rows_skipped=1)
        >>> inv = Invoice(invoice_number="INV1", date="2025-02-01", due_date="2025-03-03",
        ...               from_party=p, to_party=p, items=(), subtotal=600.0, tax_rate=10.0,
        ...               tax_amount=60.0, discount=50.0, total=610.0, notes="")
        >>> render_summary_line(parsed, inv)
        'SUMMARY items=0 hours=6.00 processed=2 skipped=1 subtotal=600.00 tax=60.00 discount=50.00 total=610.00'
    """
    return (
        f"SUMMARY items={len(invoice.items)} "
        f"hours={parsed.total_hours:.2f} "
        f"processed={parsed.rows_processed} "
        f"skipped={parsed.rows_skipped} "
        f"subtotal={_money(invoice.subtotal)} "
        f"tax={_money(invoice.tax_amount)} "
        f"discount={_money(invoice.discount)} "
        f"total={_money(invoice.total)}"
    )
