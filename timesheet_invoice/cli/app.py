from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from timesheet_invoice.config.loader import ConfigError, load_config, public_settings
from timesheet_invoice.excel.columns import header_text
from timesheet_invoice.excel.errors import TimesheetError
from timesheet_invoice.excel.reader import list_sheet_names, read_sheet
from timesheet_invoice.logging.init import log_summary, setup_logging
from timesheet_invoice.logging.skip_log import SkipLog
from timesheet_invoice.models.config_models import AppConfig
from timesheet_invoice.services.assembler import assemble_invoice
from timesheet_invoice.services.parser import parse_timesheet_with_config
from timesheet_invoice.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (overrides the process environment) and the YAML config
- Log lines go to stderr while the invoice JSON is written to stdout
- Parse the timesheet sheet into line items
- Assemble a draft invoice and write it as JSON
- Emit one SUMMARY line

Exit codes: 0 invoice built, 1 fatal (config / structural error),
2 nothing billable found.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_NO_DATA = 2

DEFAULT_CONFIG_PATH = Path("config/invoice.yml")
INSPECT_ROWS = 5


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; .env values win over the environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Timesheet (Excel) -> invoice generator")
    p.add_argument("timesheet", nargs="?", help="Timesheet workbook (default: timesheet.path from config)")
    p.add_argument("--config", help=f"YAML config file (default: {DEFAULT_CONFIG_PATH} if present)")
    p.add_argument("--sheet", help="Sheet name to read (default: first sheet)")
    p.add_argument("--month", help="Billed month for the invoice number (default: previous month)")
    p.add_argument("--year", help="Billed year (default: year of the previous month)")
    p.add_argument("--output", help="Write invoice JSON to this file instead of stdout")
    p.add_argument("--skip-log", help="Append skipped-row records (JSON Lines) to this file")
    p.add_argument("--list-sheets", action="store_true", help="Print sheet names then exit")
    p.add_argument("--show-settings", action="store_true", help="Print company / client / invoice settings as JSON then exit")
    p.add_argument("--inspect-data", action="store_true", help="Print header & first rows then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_config_path(arg: str | None) -> Path | None:
    if arg:
        return Path(arg)
    return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None


def _inspect_data(source: Path, cfg: AppConfig) -> int:
    target, rows = read_sheet(source, cfg.timesheet.sheet_name)
    header_idx = cfg.timesheet.header_row - 1
    header = rows[header_idx] if header_idx < len(rows) else []
    print(f"SHEET: {target} rows={len(rows)}")
    print(f"  header={[f'{i}: {header_text(c)}' for i, c in enumerate(header)]}")
    first = cfg.timesheet.start_row - 1
    for n, row in enumerate(rows[first:first + INSPECT_ROWS], start=first + 1):
        # datetime 含む場合 repr で表示
        print(f"  row {n}: {[v.isoformat() if hasattr(v, 'isoformat') else v for v in row]}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    # NOTE: [] が渡された場合に sys.argv[1:] が混入しないよう None のときのみ読む
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    # JSON を stdout に出す場合、ログは stderr へ
    logger = setup_logging(debug=args.debug, stream=sys.stdout if args.output else sys.stderr)

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(_resolve_config_path(args.config))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.show_settings:
        print(json.dumps(public_settings(cfg), ensure_ascii=False, indent=2))
        return EXIT_SUCCESS

    if args.sheet:
        cfg = replace(cfg, timesheet=replace(cfg.timesheet, sheet_name=args.sheet))
    source = Path(args.timesheet or cfg.timesheet.path)
    logger.info(f"Processing timesheet: {source}")

    skip_log = SkipLog()
    try:
        if args.list_sheets:
            for name in list_sheet_names(source):
                print(name)
            return EXIT_SUCCESS
        if args.inspect_data:
            return _inspect_data(source, cfg)
        parsed = parse_timesheet_with_config(
            source,
            cfg.invoice.hourly_rate,
            cfg.timesheet,
            policy=cfg.date_policy,
            diagnostics=skip_log,
        )
    except TimesheetError as e:
        logger.error(f"timesheet: {e}")
        return EXIT_FATAL

    for reason, count in sorted(skip_log.counts_by_reason().items()):
        logger.debug(f"skipped reason={reason} rows={count}")
    if args.skip_log:
        skip_log.flush(Path(args.skip_log))

    invoice = assemble_invoice(parsed, cfg, month=args.month, year=args.year)
    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(invoice.to_json() + "\n", encoding="utf-8")
        logger.info(f"invoice written: {out}")
    else:
        print(invoice.to_json())

    # log_summary が "SUMMARY " を付与するので除去して渡す
    log_summary(render_summary_line(parsed, invoice)[len("SUMMARY "):])

    if not invoice.items:
        logger.warning("no billable data found in timesheet")
        return EXIT_NO_DATA
    return EXIT_SUCCESS
