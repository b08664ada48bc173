from __future__ import annotations

from collections.abc import Sequence

"""Structural errors raised while reading a timesheet.

Each error keeps its context (available sheet names / header columns) as
data, and pre-formats an actionable message from it.
Row-level data problems are never raised; see models.skip_record.
"""

__all__ = [
    "ColumnNotFoundError",
    "EmptyInputError",
    "NoSheetsError",
    "SheetNotFoundError",
    "TimesheetError",
    "TimesheetFileNotFoundError",
]


class TimesheetError(Exception):
    """Base class for structural timesheet failures."""

    def __init__(self, reason: str, available: Sequence[object] = ()) -> None:
        super().__init__(reason)
        self.reason = reason
        self.available = list(available)


class EmptyInputError(TimesheetError):
    """Raised when the supplied bytes are zero-length or cannot be decoded."""


class TimesheetFileNotFoundError(TimesheetError):
    def __init__(self, path: object) -> None:
        super().__init__(f"Timesheet file not found: {path}")
        self.path = path


class NoSheetsError(TimesheetError):
    def __init__(self) -> None:
        super().__init__("Excel file has no sheets or is invalid")


class SheetNotFoundError(TimesheetError):
    def __init__(self, sheet_name: str, available: Sequence[str]) -> None:
        super().__init__(
            f'Sheet "{sheet_name}" not found in Excel file. '
            f"Available sheets: {', '.join(available)}",
            available,
        )
        self.sheet_name = sheet_name


class ColumnNotFoundError(TimesheetError):
    """Raised when a named column is missing from the header row.

    ``available`` holds ``(index, header_text)`` pairs.
    """

    def __init__(self, column: str, available: Sequence[tuple[int, str]]) -> None:
        listing = ", ".join(f'{i}: "{text}"' for i, text in available)
        super().__init__(
            f'Column "{column}" not found in header row. Available columns: {listing}',
            available,
        )
        self.column = column
