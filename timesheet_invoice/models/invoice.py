from __future__ import annotations

import json
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any

from ..services.calculator import compute_totals, item_total

"""Invoice domain models.

Invoice is an immutable value. subtotal / tax_amount / total are derived
from items, tax_rate and discount and are only ever recomputed together
(see the with_* methods).
"""

__all__ = [
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "Party",
]


class InvoiceStatus(Enum):
    """Invoice lifecycle: draft -> sent -> (paid | overdue)."""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class Party:
    name: str
    address: str
    email: str
    phone: str
    fax: str | None = None


@dataclass(frozen=True)
class InvoiceItem:
    id: str  # ISO date of the bucket
    description: str
    quantity: float  # hours
    price: float  # hourly rate
    total: float

    @staticmethod
    def create(id: str, description: str, quantity: float, price: float) -> InvoiceItem:
        return InvoiceItem(
            id=id,
            description=description,
            quantity=quantity,
            price=price,
            total=item_total(quantity, price),
        )

    def with_quantity(self, quantity: float) -> InvoiceItem:
        return replace(self, quantity=quantity, total=item_total(quantity, self.price))

    def with_price(self, price: float) -> InvoiceItem:
        return replace(self, price=price, total=item_total(self.quantity, price))


@dataclass(frozen=True)
class Invoice:
    invoice_number: str
    date: str  # ISO
    due_date: str  # ISO
    from_party: Party
    to_party: Party
    items: tuple[InvoiceItem, ...]
    subtotal: float
    tax_rate: float  # percent
    tax_amount: float
    discount: float
    total: float
    notes: str
    status: InvoiceStatus = InvoiceStatus.DRAFT
    period: str = ""  # "Sep 2026"

    def with_items(self, items: list[InvoiceItem] | tuple[InvoiceItem, ...]) -> Invoice:
        return self._recomputed(tuple(items), self.tax_rate, self.discount)

    def with_tax_rate(self, tax_rate: float) -> Invoice:
        return self._recomputed(self.items, tax_rate, self.discount)

    def with_discount(self, discount: float) -> Invoice:
        return self._recomputed(self.items, self.tax_rate, discount)

    def _recomputed(
        self, items: tuple[InvoiceItem, ...], tax_rate: float, discount: float
    ) -> Invoice:
        totals = compute_totals(items, tax_rate, discount)
        return replace(
            self,
            items=items,
            tax_rate=tax_rate,
            discount=discount,
            subtotal=totals.subtotal,
            tax_amount=totals.tax_amount,
            total=totals.total,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["from"] = data.pop("from_party")
        data["to"] = data.pop("to_party")
        data["items"] = [asdict(i) for i in self.items]
        data["status"] = self.status.value
        return data

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)
