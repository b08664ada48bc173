from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.invoice import InvoiceItem

"""Invoice totals calculator.

Pure functions. No rounding happens here: display rounding belongs to
whatever renders the numbers and is never written back into the model.
"""

__all__ = [
    "Totals",
    "calculate_subtotal",
    "calculate_tax",
    "calculate_total",
    "compute_totals",
    "item_total",
]


@dataclass(frozen=True)
class Totals:
    subtotal: float
    tax_amount: float
    total: float


def item_total(quantity: float, price: float) -> float:
    return quantity * price


def calculate_subtotal(items: Iterable[InvoiceItem]) -> float:
    """Sum of item totals, accumulated in listed order."""
    subtotal = 0.0
    for item in items:
        subtotal += item.total
    return subtotal


def calculate_tax(subtotal: float, tax_rate: float) -> float:
    """Tax for a percentage rate (10 means 10%)."""
    return (subtotal * tax_rate) / 100


def calculate_total(subtotal: float, tax_amount: float, discount: float) -> float:
    # 負の合計もそのまま返す (クランプしない)
    return subtotal + tax_amount - discount


def compute_totals(items: Iterable[InvoiceItem], tax_rate: float, discount: float) -> Totals:
    """Compute the three derived invoice amounts together."""
    subtotal = calculate_subtotal(items)
    tax_amount = calculate_tax(subtotal, tax_rate)
    return Totals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        total=calculate_total(subtotal, tax_amount, discount),
    )
