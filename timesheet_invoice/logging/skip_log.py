from __future__ import annotations

from collections import Counter
from pathlib import Path

from timesheet_invoice.models.skip_record import SkipRecord

"""Skip diagnostics collector.

The aggregator receives a collector instead of writing to a global sink.
SkipLog keeps records in memory; flush() appends them as JSON Lines.
Serial use only (one collector per parse call).
"""

__all__ = [
    "SkipLog",
    "SkipRecord",
]


class SkipLog:
    """In-memory buffer of skipped rows. Flush writes JSON Lines."""

    def __init__(self) -> None:
        self._records: list[SkipRecord] = []

    def append(self, record: SkipRecord) -> None:
        self._records.append(record)

    @property
    def records(self) -> list[SkipRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def counts_by_reason(self) -> dict[str, int]:
        return dict(Counter(r.reason for r in self._records))

    def flush(self, path: Path) -> Path:
        if not self._records:
            return path
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return path
