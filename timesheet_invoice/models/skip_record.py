from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any

"""SkipRecord model for row-level diagnostics.

A timesheet row that does not become part of a date bucket is not an error:
it is dropped and reported here so callers can log or persist why.
Reason codes are UPPER_SNAKE_CASE.
"""

__all__ = [
    "SkipReason",
    "SkipRecord",
]


class SkipReason:
    """Reason codes used for skipped rows."""

    INVALID_DATE = "INVALID_DATE"
    EMPTY_DESCRIPTION = "EMPTY_DESCRIPTION"
    INVALID_HOURS = "INVALID_HOURS"
    NON_POSITIVE_HOURS = "NON_POSITIVE_HOURS"


@dataclass(frozen=True)
class SkipRecord:
    """One skipped timesheet row.

    Attributes:
        row: Sheet row number (1-based, as the user sees it in the spreadsheet)
        reason: Reason code (see SkipReason)
        value: The offending cell rendered as text ("" for empty cells)
    """

    row: int
    reason: str
    value: str

    @staticmethod
    def create(row: int, reason: str, value: Any) -> SkipRecord:
        return SkipRecord(row=row, reason=reason, value="" if value is None else str(value))

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
