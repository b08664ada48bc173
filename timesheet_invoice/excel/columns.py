from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .errors import ColumnNotFoundError

"""Column resolver.

A column is addressed either by a single letter (A-Z, case-insensitive),
which bypasses the header entirely, or by header text matched after
trimming and lower-casing.
"""

__all__ = [
    "ColumnNotFoundError",
    "header_text",
    "resolve_column",
]


def header_text(cell: Any) -> str:
    if cell is None:
        return ""
    return str(cell).strip()


def resolve_column(column: str, header_row: Sequence[Any]) -> int:
    """Return the zero-based index addressed by ``column``.

    Raises:
        ColumnNotFoundError: column is a name and no header cell matches it
    """
    if len(column) == 1 and "A" <= column.upper() <= "Z":
        return ord(column.upper()) - ord("A")

    wanted = column.strip().lower()
    for idx, cell in enumerate(header_row):
        if header_text(cell).lower() == wanted:
            return idx

    raise ColumnNotFoundError(column, [(i, header_text(c)) for i, c in enumerate(header_row)])
