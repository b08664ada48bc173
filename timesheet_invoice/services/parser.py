from __future__ import annotations

import logging
from datetime import date
from typing import Any

from ..excel.columns import resolve_column
from ..excel.dates import DEFAULT_POLICY, classify_date
from ..excel.reader import TimesheetSource, read_sheet
from ..models.config_models import DatePolicy, TimesheetConfig
from ..models.timesheet import ParseResult
from .aggregator import SkipCollector, aggregate_rows
from .line_items import build_line_items

logger = logging.getLogger(__name__)

"""Timesheet parser.

Reads one sheet of a workbook and turns it into invoice line items:

1. decode the workbook and pick the sheet (named, or the first one)
2. resolve date / hours / description columns against the header row
3. aggregate billable rows by date
4. build one line item per date

Structural problems (no sheets, unknown sheet, unknown column) raise a
TimesheetError subclass; row-level problems only show up in the skip counts.
"""

__all__ = [
    "parse_timesheet",
    "parse_timesheet_with_config",
]

DEBUG_SAMPLE_ROWS = 5


def parse_timesheet(
    source: TimesheetSource,
    hourly_rate: float,
    date_column: str = "A",
    hours_column: str = "B",
    description_column: str = "C",
    start_row: int = 2,
    sheet_name: str | None = None,
    *,
    header_row: int = 1,
    policy: DatePolicy = DEFAULT_POLICY,
    diagnostics: SkipCollector | None = None,
    today: date | None = None,
) -> ParseResult:
    """Parse a timesheet workbook into invoice items.

    Args:
        source: workbook path or bytes
        hourly_rate: price applied to every item
        date_column / hours_column / description_column: letter or header name
        start_row: 1-based first data row
        sheet_name: sheet to read (None / blank -> first sheet)
        header_row: 1-based row holding the column names
        policy: date heuristics
        diagnostics: collector for skipped rows
        today: reference date for the month fallback when nothing is billable

    Raises:
        TimesheetError subclasses for structural failures
    """
    # ブックは 1 度だけ開き、対象シートのみデコード
    target, rows = read_sheet(source, sheet_name)

    header_idx = max(header_row - 1, 0)
    header = rows[header_idx] if header_idx < len(rows) else []

    date_idx = resolve_column(date_column, header)
    hours_idx = resolve_column(hours_column, header)
    desc_idx = resolve_column(description_column, header)

    logger.debug(f"sheet={target} total_rows={len(rows)}")
    logger.debug(
        f'columns date="{date_column}" (index {date_idx}) hours="{hours_column}" (index {hours_idx}) '
        f'description="{description_column}" (index {desc_idx})'
    )
    logger.debug(f"header_row={header}")

    aggregated = aggregate_rows(
        rows,
        date_idx,
        hours_idx,
        desc_idx,
        start_row,
        policy=policy,
        diagnostics=diagnostics,
    )
    built = build_line_items(aggregated.buckets, hourly_rate, today=today)

    logger.info(
        f"timesheet parsed: {aggregated.rows_processed} rows processed, "
        f"{aggregated.rows_skipped} rows skipped, {len(built.items)} invoice items created"
    )
    if not built.items:
        _warn_no_items(rows, start_row, (date_idx, hours_idx, desc_idx),
                       (date_column, hours_column, description_column), policy)

    return ParseResult(
        items=built.items,
        total_hours=aggregated.total_hours,
        month=built.month,
        rows_processed=aggregated.rows_processed,
        rows_skipped=aggregated.rows_skipped,
        sheet_name=target,
    )


def _warn_no_items(
    rows: list[list[Any]],
    start_row: int,
    indices: tuple[int, int, int],
    specs: tuple[str, str, str],
    policy: DatePolicy,
) -> None:
    date_idx, hours_idx, desc_idx = indices
    date_spec, hours_spec, desc_spec = specs
    first = max(start_row - 1, 0)
    sample = rows[first:first + DEBUG_SAMPLE_ROWS]
    if not sample:
        logger.warning(f"no data rows at or after start row {start_row}")
        return
    logger.warning("no invoice items were created from the timesheet. sample rows:")
    for offset, row in enumerate(sample):
        def cell(i: int) -> Any:
            return row[i] if i < len(row) else None
        d, h = cell(date_idx), cell(hours_idx)
        logger.warning(
            f"  row {first + offset + 1}: date={d!r} ({type(d).__name__}) "
            f"hours={h!r} ({type(h).__name__}) description={cell(desc_idx)!r} "
            f"valid_date={classify_date(d, policy).is_valid}"
        )
    logger.warning(f"- date column ({date_spec}, index {date_idx}): use a date cell or e.g. 1/3/2026, 2026-01-03")
    logger.warning(f"- hours column ({hours_spec}, index {hours_idx}): hours must be positive numbers")
    logger.warning(f"- description column ({desc_spec}, index {desc_idx}): descriptions must not be empty")
    logger.warning(f"- start row: {start_row}")


def parse_timesheet_with_config(
    source: TimesheetSource,
    hourly_rate: float,
    timesheet: TimesheetConfig,
    *,
    policy: DatePolicy = DEFAULT_POLICY,
    diagnostics: SkipCollector | None = None,
    today: date | None = None,
) -> ParseResult:
    return parse_timesheet(
        source,
        hourly_rate,
        timesheet.date_column,
        timesheet.hours_column,
        timesheet.description_column,
        timesheet.start_row,
        timesheet.sheet_name,
        header_row=timesheet.header_row,
        policy=policy,
        diagnostics=diagnostics,
        today=today,
    )
