from __future__ import annotations

import json
from pathlib import Path

from timesheet_invoice.cli import main as cli_main
from timesheet_invoice.cli.app import EXIT_FATAL, EXIT_NO_DATA, EXIT_SUCCESS


def test_cli_builds_invoice(write_config, make_timesheet, scenario_a_rows, capsys):
    make_timesheet({"Sheet1": scenario_a_rows})
    code = cli_main([])
    captured = capsys.readouterr()
    assert code == EXIT_SUCCESS
    # stdout は請求書 JSON のみ
    data = json.loads(captured.out)
    assert data["invoice_number"].startswith("INV")
    assert data["total"] == 610
    assert "INFO Processing timesheet: data/timesheet.xlsx" in captured.err
    assert (
        "SUMMARY items=1 hours=6.00 processed=2 skipped=1 "
        "subtotal=600.00 tax=60.00 discount=50.00 total=610.00"
    ) in captured.err
    assert "INFO" not in captured.out
    assert "SUMMARY" not in captured.out


def test_cli_writes_output_file(write_config, make_timesheet, scenario_a_rows, temp_workdir: Path, capsys):
    make_timesheet({"Sheet1": scenario_a_rows})
    out_path = temp_workdir / "out" / "invoice.json"
    code = cli_main(["--output", str(out_path), "--month", "Jan", "--year", "2025"])
    assert code == EXIT_SUCCESS
    data = json.loads(out_path.read_text(encoding="utf-8"))
    assert data["invoice_number"].endswith("-Jan")
    assert data["period"] == "Jan 2025"
    assert data["total"] == 610
    assert data["items"][0]["quantity"] == 6
    # JSON をファイルへ書く場合、ログは stdout
    out = capsys.readouterr().out
    assert "invoice written" in out
    assert "SUMMARY items=1" in out


def test_cli_explicit_timesheet_argument(write_config, make_timesheet, scenario_a_rows, capsys):
    path = make_timesheet({"Hours": scenario_a_rows}, name="other.xlsx")
    code = cli_main([str(path), "--sheet", "Hours"])
    assert code == EXIT_SUCCESS
    assert "SUMMARY items=1" in capsys.readouterr().err


def test_cli_list_sheets(write_config, make_timesheet, capsys):
    make_timesheet({"Summary": [["x"]], "Jan": [["y"]]})
    code = cli_main(["--list-sheets"])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert out == "Summary\nJan\n"


def test_cli_inspect_data(write_config, make_timesheet, scenario_a_rows, capsys):
    make_timesheet({"Sheet1": scenario_a_rows})
    code = cli_main(["--inspect-data"])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "SHEET: Sheet1 rows=4" in out
    assert "row 2:" in out


def test_cli_show_settings(write_config, capsys):
    code = cli_main(["--show-settings"])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    settings = json.loads(out)
    assert set(settings) == {"company", "client", "invoice"}
    assert settings["company"]["name"] == "Acme Consulting"
    assert settings["invoice"]["hourly_rate"] == 100
    assert "path" not in json.dumps(settings)


def test_cli_unknown_sheet_is_fatal(write_config, make_timesheet, scenario_a_rows, capsys):
    make_timesheet({"Sheet1": scenario_a_rows})
    code = cli_main(["--sheet", "Feb"])
    captured = capsys.readouterr()
    assert code == EXIT_FATAL
    assert 'ERROR timesheet: Sheet "Feb" not found in Excel file. Available sheets: Sheet1' in captured.err
    assert captured.out == ""


def test_cli_missing_timesheet_is_fatal(write_config, capsys):
    code = cli_main([])
    assert code == EXIT_FATAL
    assert "ERROR timesheet: Timesheet file not found" in capsys.readouterr().err


def test_cli_missing_config_is_fatal(temp_workdir: Path, capsys):
    code = cli_main(["--config", "config/nope.yml"])
    assert code == EXIT_FATAL
    assert "ERROR config: config file not found" in capsys.readouterr().err


def test_cli_no_billable_rows(write_config, make_timesheet, temp_workdir: Path, capsys):
    make_timesheet({"Sheet1": [["Date", "Hours", "Task"], ["2025-01-03", 0, "a"], ["Total", 0, "x"]]})
    skip_path = temp_workdir / "logs" / "skipped.jsonl"
    code = cli_main(["--skip-log", str(skip_path)])
    captured = capsys.readouterr()
    assert code == EXIT_NO_DATA
    assert json.loads(captured.out)["items"] == []
    assert "WARN no billable data found in timesheet" in captured.err
    assert "SUMMARY items=0" in captured.err
    reasons = [json.loads(line)["reason"] for line in skip_path.read_text(encoding="utf-8").splitlines()]
    assert reasons == ["NON_POSITIVE_HOURS", "INVALID_DATE"]


def test_cli_env_file_overrides_rate(write_config, make_timesheet, scenario_a_rows, temp_workdir: Path, capsys, monkeypatch):
    monkeypatch.setenv("HOURLY_RATE", "50")
    make_timesheet({"Sheet1": scenario_a_rows})
    (temp_workdir / ".env").write_text("HOURLY_RATE=200\n", encoding="utf-8")
    code = cli_main([])
    assert code == EXIT_SUCCESS
    assert "subtotal=1200.00" in capsys.readouterr().err
