from __future__ import annotations

import json
import os
from collections.abc import Callable, Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_CLIENT,
    DEFAULT_COMPANY,
    AppConfig,
    DatePolicy,
    InvoiceSettings,
    TimesheetConfig,
)

"""Config loader.

Responsibilities:
- Load YAML config (optional; every key has a default)
- Apply environment variable overrides (env wins over YAML)
- Validate the merged result against config_schema.json
- Build the typed AppConfig
"""

__all__ = [
    "ConfigError",
    "ENV_OVERRIDES",
    "SCHEMA_PATH",
    "load_config",
    "public_settings",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


def _int(raw: str) -> int:
    return int(raw, 10)


# env var -> (section, key, converter)
ENV_OVERRIDES: dict[str, tuple[str, str, Callable[[str], Any]]] = {
    "TIMESHEET_PATH": ("timesheet", "path", str),
    "TIMESHEET_DATE_COLUMN": ("timesheet", "date_column", str),
    "TIMESHEET_HOURS_COLUMN": ("timesheet", "hours_column", str),
    "TIMESHEET_DESCRIPTION_COLUMN": ("timesheet", "description_column", str),
    "TIMESHEET_START_ROW": ("timesheet", "start_row", _int),
    "TIMESHEET_HEADER_ROW": ("timesheet", "header_row", _int),
    "TIMESHEET_SHEET_NAME": ("timesheet", "sheet_name", str),
    "HOURLY_RATE": ("invoice", "hourly_rate", float),
    "CURRENCY": ("invoice", "currency", str),
    "INVOICE_PREFIX": ("invoice", "prefix", str),
    "TAX_RATE": ("invoice", "tax_rate", float),
    "DISCOUNT": ("invoice", "discount", float),
    "PAYMENT_TERMS": ("invoice", "payment_terms", str),
    "COMPANY_NAME": ("company", "name", str),
    "COMPANY_ADDRESS": ("company", "address", str),
    "COMPANY_EMAIL": ("company", "email", str),
    "COMPANY_PHONE": ("company", "phone", str),
    "COMPANY_FAX": ("company", "fax", str),
    "CLIENT_NAME": ("client", "name", str),
    "CLIENT_ADDRESS": ("client", "address", str),
    "CLIENT_EMAIL": ("client", "email", str),
    "CLIENT_PHONE": ("client", "phone", str),
}


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing / not JSON, or validation failure
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _apply_env_overrides(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    merged = {k: dict(v) if isinstance(v, dict) else v for k, v in data.items()}
    for var, (section, key, convert) in ENV_OVERRIDES.items():
        raw = environ.get(var)
        # 空文字は未設定扱い
        if raw is None or raw.strip() == "":
            continue
        try:
            value = convert(raw.strip())
        except ValueError as e:
            raise ConfigError(f"invalid value for {var}: {raw!r}") from e
        merged.setdefault(section, {})[key] = value
    return merged


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Load configuration from YAML (optional) plus environment overrides.

    Args:
        path: YAML file; None means defaults + environment only
        environ: environment mapping (default: os.environ)

    Raises:
        ConfigError: missing file, invalid YAML, invalid env value or schema violation
    """
    data: dict[str, Any] = {}
    if path is not None:
        if not path.exists():
            raise ConfigError(f"config file not found: {path}")
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"config root must be a mapping: {path}")

    data = _apply_env_overrides(data, os.environ if environ is None else environ)
    _validate_config_schema(data)

    invoice_raw = dict(data.get("invoice", {}))
    for key in ("hourly_rate", "tax_rate", "discount"):
        if key in invoice_raw:
            invoice_raw[key] = float(invoice_raw[key])

    policy = DatePolicy(**data.get("date_policy", {}))
    if policy.min_year > policy.max_year:
        raise ConfigError(f"config validation failed: min_year {policy.min_year} > max_year {policy.max_year}")

    return AppConfig(
        timesheet=TimesheetConfig(**data.get("timesheet", {})),
        invoice=InvoiceSettings(**invoice_raw),
        company=replace(DEFAULT_COMPANY, **data.get("company", {})),
        client=replace(DEFAULT_CLIENT, **data.get("client", {})),
        date_policy=policy,
    )


def public_settings(config: AppConfig) -> dict[str, Any]:
    """Settings safe to hand to a form (no filesystem paths)."""
    inv = config.invoice
    return {
        "company": vars(config.company).copy(),
        "client": vars(config.client).copy(),
        "invoice": {
            "prefix": inv.prefix,
            "tax_rate": inv.tax_rate,
            "discount": inv.discount,
            "payment_terms": inv.payment_terms,
            "currency": inv.currency,
            "hourly_rate": inv.hourly_rate,
        },
    }
