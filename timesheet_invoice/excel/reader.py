from __future__ import annotations

import io
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from .errors import EmptyInputError, NoSheetsError, SheetNotFoundError, TimesheetFileNotFoundError

"""Workbook reader.

Decodes an Excel workbook (path or raw bytes) with pandas and hands back
each sheet as a list of rows of plain cell values:
str / int / float / datetime (pd.Timestamp) / None.

No header handling happens here; every row, header included, is returned
as-is so that the caller can pick its own header and start rows.
"""

__all__ = [
    "TimesheetSource",
    "Workbook",
    "list_sheet_names",
    "load_source",
    "read_sheet",
    "read_workbook",
    "select_sheet",
]

TimesheetSource = Path | str | bytes


@dataclass(frozen=True)
class Workbook:
    sheet_names: list[str]  # all sheets, workbook order
    sheets: dict[str, list[list[Any]]]  # only the sheets that were read

    def rows(self, sheet_name: str) -> list[list[Any]]:
        if sheet_name not in self.sheets:
            raise SheetNotFoundError(sheet_name, self.sheet_names)
        return self.sheets[sheet_name]


def load_source(source: TimesheetSource) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        if len(source) == 0:
            raise EmptyInputError("Failed to read file or file is empty")
        return bytes(source)

    path = Path(source)
    if not path.exists():
        raise TimesheetFileNotFoundError(path)
    if path.stat().st_size == 0:
        raise EmptyInputError(f"Timesheet file is empty: {path}")
    return path.read_bytes()


def _frame_to_rows(df: pd.DataFrame) -> list[list[Any]]:
    # NaN / NaT -> None に統一
    cleaned = df.astype(object).where(df.notna(), None)
    return cleaned.values.tolist()


def _open_excel(data: bytes) -> pd.ExcelFile:
    try:
        return pd.ExcelFile(io.BytesIO(data))
    except Exception as e:
        raise EmptyInputError(f"Failed to decode Excel file: {e}") from e


def read_workbook(source: TimesheetSource, target_sheets: Iterable[str] | None = None) -> Workbook:
    """Read a workbook returning raw rows keyed by sheet name.

    Parameters
    ----------
    source: Excel file path or the file's bytes
    target_sheets: sheets to decode (None -> all sheets). Names that do not
        exist are ignored here; Workbook.rows() reports them.

    Raises
    ------
    TimesheetFileNotFoundError, EmptyInputError, NoSheetsError
    """
    xls = _open_excel(load_source(source))
    with xls:
        sheet_names = [str(name) for name in xls.sheet_names]
        if not sheet_names:
            raise NoSheetsError()
        wanted = set(target_sheets) if target_sheets is not None else None
        sheets: dict[str, list[list[Any]]] = {}
        for name in xls.sheet_names:
            if wanted is not None and str(name) not in wanted:
                continue
            # ヘッダなしで生読み (ヘッダ行は呼び出し側で決定)
            df = xls.parse(name, header=None)
            sheets[str(name)] = _frame_to_rows(df)
    return Workbook(sheet_names=sheet_names, sheets=sheets)


def list_sheet_names(source: TimesheetSource) -> list[str]:
    """Sheet names of a workbook without decoding any sheet data."""
    return read_workbook(source, target_sheets=()).sheet_names


def select_sheet(sheet_names: list[str], sheet_name: str | None) -> str:
    """Resolve the sheet to read: the requested one, or the first sheet.

    A blank requested name counts as "not requested".
    """
    if not sheet_names:
        raise NoSheetsError()
    if sheet_name and sheet_name.strip():
        if sheet_name not in sheet_names:
            raise SheetNotFoundError(sheet_name, sheet_names)
        return sheet_name
    return sheet_names[0]


def read_sheet(source: TimesheetSource, sheet_name: str | None = None) -> tuple[str, list[list[Any]]]:
    """Decode a single sheet (the requested one, or the first).

    The workbook is opened once; only the selected sheet is parsed.

    Returns
    -------
    (resolved sheet name, raw rows)
    """
    xls = _open_excel(load_source(source))
    with xls:
        target = select_sheet([str(name) for name in xls.sheet_names], sheet_name)
        df = xls.parse(target, header=None)
    return target, _frame_to_rows(df)
