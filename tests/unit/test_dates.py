from __future__ import annotations

from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest

from timesheet_invoice.excel.dates import DateKind, classify_date, normalize_date
from timesheet_invoice.models.config_models import DatePolicy

"""Unit tests for the date normalizer (native / serial / text / invalid)."""


# --- native values ---

def test_native_date_and_datetime_drop_time_of_day():
    assert classify_date(date(2025, 1, 15)).kind is DateKind.NATIVE
    assert normalize_date(date(2025, 1, 15)) == "2025-01-15"
    assert normalize_date(datetime(2025, 1, 15, 23, 59)) == "2025-01-15"
    assert normalize_date(pd.Timestamp("2025-01-15 18:30")) == "2025-01-15"


def test_native_numpy_datetime64():
    assert normalize_date(np.datetime64("2025-01-15T10:00")) == "2025-01-15"


@pytest.mark.parametrize("value", [pd.NaT, np.datetime64("NaT"), None, float("nan")])
def test_missing_values_are_invalid(value):
    assert classify_date(value).kind is DateKind.INVALID
    assert normalize_date(value) is None


# --- numeric serials ---

def test_serial_2025_01_15():
    result = classify_date(45672)
    assert result.kind is DateKind.SERIAL
    assert result.iso == "2025-01-15"


def test_serial_fraction_is_time_of_day():
    assert normalize_date(45672.75) == "2025-01-15"


@pytest.mark.parametrize(
    "serial, expected",
    [
        (1, "1900-01-01"),
        (59, "1900-02-28"),
        (61, "1900-03-01"),  # after the non-existent 1900-02-29
        (36526, "2000-01-01"),
    ],
)
def test_serial_leap_year_bug_correction(serial, expected):
    assert normalize_date(serial) == expected


def test_numpy_numbers_are_serials():
    assert normalize_date(np.int64(45672)) == "2025-01-15"
    assert normalize_date(np.float64(45672.0)) == "2025-01-15"


@pytest.mark.parametrize("value", [0, -5, 0.5, 100000, 250000])
def test_serial_out_of_bounds(value):
    assert classify_date(value).kind is DateKind.INVALID


def test_serial_year_above_policy_max_is_invalid():
    # 99999 is below the serial bound but lands in the 2170s
    assert normalize_date(99999) is None


@pytest.mark.parametrize("value", [True, False, np.bool_(True)])
def test_booleans_are_not_dates(value):
    assert classify_date(value).kind is DateKind.INVALID


# --- strings ---

def test_iso_string_is_idempotent():
    result = classify_date("2025-01-15")
    assert result.kind is DateKind.TEXT
    assert result.iso == "2025-01-15"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1/3/2025", "2025-01-03"),
        ("01/03/2025", "2025-01-03"),
        ("1/3/25", "2025-01-03"),
        ("1-3-2025", "2025-01-03"),
        ("12-31-99", "1999-12-31"),
        ("2025-1-5", "2025-01-05"),
        ("  2025-01-15  ", "2025-01-15"),
    ],
)
def test_explicit_patterns(text, expected):
    assert normalize_date(text) == expected


def test_two_digit_year_pivot_is_policy():
    # 00-49 -> 20xx, 50-99 -> 19xx (policy, not a calendar rule)
    assert normalize_date("1/3/49") == "2049-01-03"
    assert normalize_date("1/3/50") == "1950-01-03"
    policy = DatePolicy(two_digit_year_pivot=30)
    assert normalize_date("1/3/45", policy) == "1945-01-03"


def test_generic_string_parse():
    assert normalize_date("Jan 15, 2025") == "2025-01-15"
    assert normalize_date("15 March 2025") == "2025-03-15"


def test_impossible_calendar_date_is_invalid():
    assert normalize_date("2/30/2025") is None
    assert normalize_date("13/01/2025") is None


def test_year_range_is_policy():
    assert normalize_date("1/3/1850") is None
    assert normalize_date("1/3/1850", DatePolicy(min_year=1800)) == "1850-01-03"


@pytest.mark.parametrize("text", ["", "   ", "Total", "Date", "not-a-date", "today", "now"])
def test_non_date_strings(text):
    assert classify_date(text).kind is DateKind.INVALID


def test_other_types_are_invalid():
    assert classify_date(["2025-01-15"]).kind is DateKind.INVALID
    assert classify_date(object()).kind is DateKind.INVALID
