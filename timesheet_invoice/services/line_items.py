from __future__ import annotations

from collections.abc import Mapping
from datetime import date

from ..models.invoice import InvoiceItem
from ..models.timesheet import DateBucket, LineItems
from .periods import month_label

"""Line-item builder: one billable item per date bucket, oldest first."""

__all__ = [
    "build_line_items",
]


def build_line_items(
    buckets: Mapping[str, DateBucket], hourly_rate: float, today: date | None = None
) -> LineItems:
    """Convert date buckets into invoice items.

    The month label is taken from the latest bucket date; without any bucket
    it falls back to ``today`` (default: the current date).
    """
    items: list[InvoiceItem] = []
    for iso_date, bucket in buckets.items():
        joined = ", ".join(bucket.descriptions) if bucket.descriptions else f"Work on {iso_date}"
        items.append(
            InvoiceItem.create(
                id=iso_date,
                description=f"{iso_date} - {joined}",
                quantity=bucket.hours,
                price=hourly_rate,
            )
        )

    # ISO 文字列なので辞書順 = 日付順
    items.sort(key=lambda item: item.id)

    if items:
        month = month_label(date.fromisoformat(items[-1].id))
    else:
        month = month_label(today or date.today())
    return LineItems(items=items, month=month)
