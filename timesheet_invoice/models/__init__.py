"""Domain models for the timesheet -> invoice tool.

Configuration values, timesheet aggregation units, invoice values and
row-level skip records.
"""

from .config_models import AppConfig, DatePolicy, InvoiceSettings, PartyConfig, TimesheetConfig
from .invoice import Invoice, InvoiceItem, InvoiceStatus, Party
from .skip_record import SkipReason, SkipRecord
from .timesheet import AggregationResult, DateBucket, LineItems, ParseResult, TimesheetRow

__all__ = [
    # Configuration models
    "AppConfig",
    "DatePolicy",
    "InvoiceSettings",
    "PartyConfig",
    "TimesheetConfig",
    # Invoice models
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "Party",
    # Timesheet processing models
    "AggregationResult",
    "DateBucket",
    "LineItems",
    "ParseResult",
    "SkipReason",
    "SkipRecord",
    "TimesheetRow",
]
