from __future__ import annotations

import pytest

from timesheet_invoice.excel.columns import ColumnNotFoundError, resolve_column


def test_letter_spec_bypasses_header():
    assert resolve_column("A", []) == 0
    assert resolve_column("c", ["Date", "Hours"]) == 2
    assert resolve_column("Z", []) == 25


def test_name_spec_is_case_and_whitespace_insensitive():
    header = ["Date", " Hours ", "Task Name"]
    assert resolve_column("hours", header) == 1
    assert resolve_column("  TASK NAME ", header) == 2


def test_name_spec_returns_first_match():
    assert resolve_column("notes", ["Notes", "notes"]) == 0


def test_non_string_header_cells():
    header = [None, 2025, "Hours"]
    assert resolve_column("2025", header) == 1


def test_missing_column_lists_available_headers():
    header = ["Date", "Hours", "Task"]
    with pytest.raises(ColumnNotFoundError) as e:
        resolve_column("TaskName", header)
    err = e.value
    assert err.column == "TaskName"
    assert err.available == [(0, "Date"), (1, "Hours"), (2, "Task")]
    assert 'Column "TaskName" not found in header row' in str(err)
    assert '0: "Date", 1: "Hours", 2: "Task"' in str(err)


def test_multi_letter_spec_is_a_name():
    with pytest.raises(ColumnNotFoundError):
        resolve_column("AB", ["Date"])
