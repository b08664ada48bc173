from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Any, Protocol

import numpy as np

from ..excel.dates import DEFAULT_POLICY, classify_date
from ..models.config_models import DatePolicy
from ..models.skip_record import SkipReason, SkipRecord
from ..models.timesheet import AggregationResult, DateBucket, TimesheetRow

logger = logging.getLogger(__name__)

"""Row filter & aggregator.

Walks the data rows of a sheet, drops rows that are not billable and groups
the rest by ISO date. A row is dropped (and counted as skipped) when:

1. its date cell does not classify as a date (blank rows, repeated headers,
   TOTAL / summary rows)
2. its description cell is empty or whitespace
3. its hours cell is not a number, or is <= 0

No row can make the aggregation fail.
"""

__all__ = [
    "SkipCollector",
    "aggregate_rows",
    "parse_hours",
]


class SkipCollector(Protocol):
    def append(self, record: SkipRecord) -> None: ...


def _cell(row: Sequence[Any], idx: int) -> Any:
    return row[idx] if idx < len(row) else None


def parse_hours(value: Any) -> float | None:
    """Parse an hours cell as float. None when unparseable, NaN or infinite."""
    if value is None or isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(hours):
        return None
    return hours


def _description(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def aggregate_rows(
    rows: Sequence[Sequence[Any]],
    date_col: int,
    hours_col: int,
    desc_col: int,
    start_row: int = 2,
    *,
    policy: DatePolicy = DEFAULT_POLICY,
    diagnostics: SkipCollector | None = None,
) -> AggregationResult:
    """Group billable rows by date.

    Args:
        rows: raw sheet rows (header included; see start_row)
        date_col / hours_col / desc_col: zero-based column indices
        start_row: 1-based number of the first data row
        policy: date heuristics passed to the date normalizer
        diagnostics: optional collector receiving one SkipRecord per dropped row

    Returns:
        AggregationResult with buckets in first-seen date order
    """
    buckets: dict[str, DateBucket] = {}
    total_hours = 0.0
    processed = 0
    skipped = 0

    def skip(row_number: int, reason: str, value: Any) -> None:
        nonlocal skipped
        skipped += 1
        if diagnostics is not None:
            diagnostics.append(SkipRecord.create(row_number, reason, value))

    for idx in range(max(start_row - 1, 0), len(rows)):
        row = rows[idx]
        row_number = idx + 1
        date_value = _cell(row, date_col)
        hours_value = _cell(row, hours_col)

        classified = classify_date(date_value, policy)
        if not classified.is_valid:
            skip(row_number, SkipReason.INVALID_DATE, date_value)
            continue

        description = _description(_cell(row, desc_col))
        if not description:
            skip(row_number, SkipReason.EMPTY_DESCRIPTION, _cell(row, desc_col))
            continue

        hours = parse_hours(hours_value)
        if hours is None:
            skip(row_number, SkipReason.INVALID_HOURS, hours_value)
            continue
        if hours <= 0:
            skip(row_number, SkipReason.NON_POSITIVE_HOURS, hours_value)
            continue

        entry = TimesheetRow(
            row_number=row_number,
            date=classified.iso,
            hours=hours,
            description=description,
        )
        bucket = buckets.get(entry.date)
        if bucket is None:
            bucket = buckets[entry.date] = DateBucket(date=entry.date)
        bucket.add(entry)
        total_hours += hours
        processed += 1

    logger.debug(f"aggregated rows processed={processed} skipped={skipped} dates={len(buckets)}")
    return AggregationResult(
        buckets=buckets,
        total_hours=total_hours,
        rows_processed=processed,
        rows_skipped=skipped,
    )
