# Shared pytest fixtures
from __future__ import annotations
import os
import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from timesheet_invoice.config.loader import ENV_OVERRIDES
from timesheet_invoice.logging.init import reset_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # 開発者環境の HOURLY_RATE 等がテストに混入しないようにする
    for var in ENV_OVERRIDES:
        monkeypatch.delenv(var, raising=False)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """timesheet:
  path: data/timesheet.xlsx
  date_column: A
  hours_column: B
  description_column: C
  start_row: 2
invoice:
  hourly_rate: 100
  currency: USD
  prefix: INV
  tax_rate: 10
  discount: 50
  payment_terms: Net 15
company:
  name: Acme Consulting
  address: 1 Main St
  email: billing@acme.test
  phone: "+1-555-0100"
client:
  name: Globex
  address: 2 Side St
  email: ap@globex.test
  phone: "+1-555-0199"
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "invoice.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def write_workbook(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Write rows as-is (no header inference) to an xlsx workbook."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            df = pd.DataFrame(rows)
            df.to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def make_timesheet(temp_workdir: Path) -> Callable[..., Path]:
    def _make(sheets: dict[str, list[list[object]]], name: str = "timesheet.xlsx") -> Path:
        return write_workbook(temp_workdir / "data" / name, sheets)
    return _make


@pytest.fixture()
def scenario_a_rows() -> list[list[object]]:
    return [
        ["Date", "Hours", "Task"],
        ["1/3/2025", 4, "Design"],
        ["1/3/2025", 2, "Review"],
        ["not-a-date", 99, "Total"],
    ]
