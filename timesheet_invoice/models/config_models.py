from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the timesheet -> invoice tool.

These are the typed values produced by config.loader. Defaults mirror the
values used when neither a YAML file nor environment variables provide one.
"""

__all__ = [
    "AppConfig",
    "DatePolicy",
    "InvoiceSettings",
    "PartyConfig",
    "TimesheetConfig",
]


@dataclass(frozen=True)
class DatePolicy:
    """Heuristic bounds used by the date normalizer.

    These are policy choices rather than calendar facts, so they are
    configurable:
    - min_year / max_year: parsed dates outside this range are not dates
    - two_digit_year_pivot: YY below the pivot -> 20YY, otherwise 19YY
    - max_serial: numeric cells at or above this are not date serials
    """
    min_year: int = 1900
    max_year: int = 2100
    two_digit_year_pivot: int = 50
    max_serial: int = 100000

    def year_in_range(self, year: int) -> bool:
        return self.min_year <= year <= self.max_year

    def expand_year(self, yy: int) -> int:
        return 2000 + yy if yy < self.two_digit_year_pivot else 1900 + yy


@dataclass(frozen=True)
class TimesheetConfig:
    """Where the timesheet data lives inside the workbook."""
    path: str = "data/Timesheet Template.xlsx"
    date_column: str = "A"
    hours_column: str = "B"
    description_column: str = "C"
    start_row: int = 2  # 1-based, first data row
    header_row: int = 1  # 1-based, used for name-based column lookup
    sheet_name: str | None = None  # None -> first sheet


@dataclass(frozen=True)
class InvoiceSettings:
    hourly_rate: float = 900.0
    currency: str = "INR"
    prefix: str = "INV"
    tax_rate: float = 0.0  # percent
    discount: float = 0.0  # currency units
    payment_terms: str = "Net 30"


@dataclass(frozen=True)
class PartyConfig:
    """Contact record for the invoicing company or the client."""
    name: str
    address: str
    email: str
    phone: str
    fax: str | None = None


DEFAULT_COMPANY = PartyConfig(
    name="Your Company Name",
    address="Your Company Address",
    email="your.email@example.com",
    phone="+91-1234567890",
)

DEFAULT_CLIENT = PartyConfig(
    name="Client Company Name",
    address="Client Company Address",
    email="client@example.com",
    phone="+91-9876543210",
)


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    timesheet: TimesheetConfig = TimesheetConfig()
    invoice: InvoiceSettings = InvoiceSettings()
    company: PartyConfig = DEFAULT_COMPANY
    client: PartyConfig = DEFAULT_CLIENT
    date_policy: DatePolicy = DatePolicy()
