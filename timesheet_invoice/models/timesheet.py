from __future__ import annotations

from dataclasses import dataclass, field

from .invoice import InvoiceItem

"""Timesheet-side domain models.

TimesheetRow is the accepted form of a spreadsheet row; DateBucket groups
accepted rows by ISO date. Both live only for the duration of one parse.
"""

__all__ = [
    "AggregationResult",
    "DateBucket",
    "LineItems",
    "ParseResult",
    "TimesheetRow",
]


@dataclass(frozen=True)
class TimesheetRow:
    row_number: int  # 1-based sheet row
    date: str  # ISO YYYY-MM-DD
    hours: float
    description: str


@dataclass
class DateBucket:
    """Hours and distinct descriptions for one calendar date."""
    date: str
    hours: float = 0.0
    descriptions: list[str] = field(default_factory=list)

    def add(self, row: TimesheetRow) -> None:
        self.hours += row.hours
        # 重複は初出順を保ったまま除外
        if row.description not in self.descriptions:
            self.descriptions.append(row.description)


@dataclass(frozen=True)
class AggregationResult:
    buckets: dict[str, DateBucket]  # ISO date -> bucket, first-seen order
    total_hours: float
    rows_processed: int
    rows_skipped: int


@dataclass(frozen=True)
class LineItems:
    items: list[InvoiceItem]
    month: str  # "Jan 2025" style label of the latest date


@dataclass(frozen=True)
class ParseResult:
    """Output of parsing one timesheet sheet."""
    items: list[InvoiceItem]
    total_hours: float
    month: str
    rows_processed: int = 0
    rows_skipped: int = 0
    sheet_name: str = ""
