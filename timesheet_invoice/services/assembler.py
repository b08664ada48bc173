from __future__ import annotations

import re
from datetime import datetime, timedelta

from ..excel.reader import TimesheetSource
from ..models.config_models import AppConfig, PartyConfig
from ..models.invoice import Invoice, InvoiceStatus, Party
from ..models.timesheet import ParseResult
from .aggregator import SkipCollector
from .calculator import compute_totals
from .parser import parse_timesheet_with_config
from .periods import previous_month_and_year

"""Invoice assembler.

Combines parsed line items, computed totals and the configured parties into
a draft Invoice. Assembly only formats already-valid data; a failed parse
propagates before any invoice exists.
"""

__all__ = [
    "DEFAULT_PAYMENT_DAYS",
    "assemble_invoice",
    "create_invoice_from_timesheet",
    "due_date",
    "format_rate",
    "invoice_number",
    "payment_days",
]

DEFAULT_PAYMENT_DAYS = 30
_NON_DIGITS = re.compile(r"\D")


def payment_days(payment_terms: str) -> int:
    """Days until due, taken from the digits of e.g. 'Net 30'."""
    digits = _NON_DIGITS.sub("", payment_terms or "")
    if not digits:
        return DEFAULT_PAYMENT_DAYS
    return int(digits)


def invoice_number(prefix: str, month: str, now: datetime) -> str:
    """{prefix}{last 4 digits of epoch millis}-{month}"""
    # float 誤差を避けるため秒とミリ秒を分けて計算
    millis = int(now.timestamp()) * 1000 + now.microsecond // 1000
    return f"{prefix}{str(millis)[-4:]}-{month}"


def due_date(now: datetime, payment_terms: str) -> datetime:
    """``now`` plus the payment-term days; falls back to 30 days when the
    digits do not make a representable date (e.g. a PO number in the terms).
    """
    try:
        return now + timedelta(days=payment_days(payment_terms))
    except OverflowError:
        return now + timedelta(days=DEFAULT_PAYMENT_DAYS)


def format_rate(rate: float) -> str:
    if rate == int(rate):
        return str(int(rate))
    return str(rate)


def _party(p: PartyConfig) -> Party:
    return Party(name=p.name, address=p.address, email=p.email, phone=p.phone, fax=p.fax)


def assemble_invoice(
    parsed: ParseResult,
    config: AppConfig,
    month: str | None = None,
    year: str | None = None,
    now: datetime | None = None,
) -> Invoice:
    """Build a draft invoice from a parse result.

    ``month`` / ``year`` name the billed period and default to the month
    before ``now``.
    """
    now = now or datetime.now()
    default_month, default_year = previous_month_and_year(now.date())
    invoice_month = month or default_month
    invoice_year = year or default_year

    settings = config.invoice
    totals = compute_totals(parsed.items, settings.tax_rate, settings.discount)
    due = due_date(now, settings.payment_terms)

    return Invoice(
        invoice_number=invoice_number(settings.prefix, invoice_month, now),
        date=now.date().isoformat(),
        due_date=due.date().isoformat(),
        from_party=_party(config.company),
        to_party=_party(config.client),
        items=tuple(parsed.items),
        subtotal=totals.subtotal,
        tax_rate=settings.tax_rate,
        tax_amount=totals.tax_amount,
        discount=settings.discount,
        total=totals.total,
        notes=(
            f"Invoice for {parsed.month}. Total hours: {parsed.total_hours:.2f}. "
            f"Rate: {settings.currency} {format_rate(settings.hourly_rate)}/hour."
        ),
        status=InvoiceStatus.DRAFT,
        period=f"{invoice_month} {invoice_year}",
    )


def create_invoice_from_timesheet(
    source: TimesheetSource,
    config: AppConfig,
    month: str | None = None,
    year: str | None = None,
    *,
    diagnostics: SkipCollector | None = None,
    now: datetime | None = None,
) -> Invoice:
    """Parse a timesheet with the configured columns and assemble its invoice."""
    parsed = parse_timesheet_with_config(
        source,
        config.invoice.hourly_rate,
        config.timesheet,
        policy=config.date_policy,
        diagnostics=diagnostics,
        today=now.date() if now else None,
    )
    return assemble_invoice(parsed, config, month=month, year=year, now=now)
