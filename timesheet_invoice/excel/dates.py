from __future__ import annotations

import math
import re
import warnings
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd

from ..models.config_models import DatePolicy

"""Date normalizer for timesheet cells.

A cell is classified into one of four variants:

- NATIVE: a date/datetime value produced by the spreadsheet decoder
- SERIAL: a number interpreted as a spreadsheet (1900 system) day count
- TEXT:   a string in a recognised date format
- INVALID: anything else (empty cells, booleans, summary labels, ...)

classify_date() never raises; INVALID is the "not a date" sentinel that
lets the aggregator drop a row.
"""

__all__ = [
    "DEFAULT_POLICY",
    "DateClassification",
    "DateKind",
    "INVALID",
    "classify_date",
    "normalize_date",
]

DEFAULT_POLICY = DatePolicy()

# Serial 1 == 1900-01-01. Serial 60 is the non-existent 1900-02-29 kept by the
# spreadsheet format, so every serial above 59 is one day ahead of the calendar.
SERIAL_DAY_ZERO = date(1899, 12, 31)
LEAP_BUG_SERIAL = 59

# M/D/YYYY, M/D/YY, M-D-YYYY, M-D-YY (same separator on both sides)
_MDY_PATTERN = re.compile(r"^(\d{1,2})([/-])(\d{1,2})\2(\d{4}|\d{2})$")
# YYYY-M-D
_YMD_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_HAS_DIGIT = re.compile(r"\d")


class DateKind(Enum):
    NATIVE = "native"
    SERIAL = "serial"
    TEXT = "text"
    INVALID = "invalid"


@dataclass(frozen=True)
class DateClassification:
    kind: DateKind
    value: date | None = None

    @property
    def is_valid(self) -> bool:
        return self.kind is not DateKind.INVALID

    @property
    def iso(self) -> str | None:
        return self.value.isoformat() if self.value is not None else None


INVALID = DateClassification(DateKind.INVALID)


def _is_missing(value: Any) -> bool:
    if value is None or value is pd.NaT:
        return True
    if isinstance(value, (float, np.floating)):
        return math.isnan(value)
    if isinstance(value, np.datetime64):
        return bool(np.isnat(value))
    return False


def _from_native(value: Any) -> date | None:
    if isinstance(value, np.datetime64):
        value = pd.Timestamp(value)
    if isinstance(value, datetime):  # pd.Timestamp is a datetime subclass
        return value.date()
    if isinstance(value, date):
        return value
    return None


def _from_serial(value: float, policy: DatePolicy) -> date | None:
    if not 0 < value < policy.max_serial:
        return None
    days = math.floor(value)  # 小数部 (時刻) は捨てる
    if days > LEAP_BUG_SERIAL:
        days -= 1
    result = SERIAL_DAY_ZERO + timedelta(days=days)
    if not policy.year_in_range(result.year):
        return None
    return result


def _build_date(year: int, month: int, day: int, policy: DatePolicy) -> date | None:
    if not policy.year_in_range(year):
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _from_pattern(text: str, policy: DatePolicy) -> tuple[bool, date | None]:
    """Match the explicit formats. Returns (matched, date)."""
    m = _MDY_PATTERN.match(text)
    if m:
        month, day, raw_year = int(m.group(1)), int(m.group(3)), m.group(4)
        year = int(raw_year) if len(raw_year) == 4 else policy.expand_year(int(raw_year))
        return True, _build_date(year, month, day, policy)
    m = _YMD_PATTERN.match(text)
    if m:
        return True, _build_date(int(m.group(1)), int(m.group(2)), int(m.group(3)), policy)
    return False, None


def _from_generic(text: str, policy: DatePolicy) -> date | None:
    # "today" / "now" などの特殊文字列を日付扱いしないため数字必須
    if not _HAS_DIGIT.search(text):
        return None
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(text, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if parsed is pd.NaT or pd.isna(parsed):
        return None
    if not policy.year_in_range(parsed.year):
        return None
    return parsed.date()


def classify_date(value: Any, policy: DatePolicy = DEFAULT_POLICY) -> DateClassification:
    """Classify a raw cell value as a calendar date or INVALID.

    Decision order: native date -> numeric serial -> string. Strings in one of
    the explicit formats are built from their numeric parts (two-digit years
    pivot on ``policy.two_digit_year_pivot``); other strings go through the
    generic pandas parser and must land inside the policy's year range.
    """
    if _is_missing(value) or isinstance(value, (bool, np.bool_)):
        return INVALID

    native = _from_native(value)
    if native is not None:
        return DateClassification(DateKind.NATIVE, native)

    if isinstance(value, (int, float, np.integer, np.floating)):
        serial = _from_serial(float(value), policy)
        return DateClassification(DateKind.SERIAL, serial) if serial else INVALID

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return INVALID
        matched, result = _from_pattern(text, policy)
        if not matched:
            result = _from_generic(text, policy)
        return DateClassification(DateKind.TEXT, result) if result else INVALID

    return INVALID


def normalize_date(value: Any, policy: DatePolicy = DEFAULT_POLICY) -> str | None:
    """Return the ISO ``YYYY-MM-DD`` form of ``value`` or None if it is not a date."""
    return classify_date(value, policy).iso
