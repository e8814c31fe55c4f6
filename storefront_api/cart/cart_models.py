from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any


@dataclass(slots=True)
class CartLine:
    id: str
    name: str
    unit_amount: int  # cents, list price
    quantity: int
    available_qty: int = 0
    currency: str = "usd"
    discount_percent: float | None = None
    sale_price: int | None = None  # cents
    stripe_price_id: str | None = None
    stripe_product_id: str | None = None
    image_url: str | None = None

    @property
    def has_discount(self) -> bool:
        return (self.discount_percent or 0) > 0 or (self.sale_price or 0) > 0

    @property
    def effective_unit_cents(self) -> int:
        if self.discount_percent and self.discount_percent > 0:
            return max(0, math.floor(self.unit_amount * (1 - self.discount_percent / 100) + 0.5))
        if self.sale_price and self.sale_price > 0:
            return self.sale_price
        return self.unit_amount

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> CartLine:
        return CartLine(
            id=str(raw["id"]),
            name=str(raw.get("name") or "Item"),
            unit_amount=int(raw.get("unit_amount") or 0),
            quantity=int(raw.get("quantity") or 0),
            available_qty=int(raw.get("available_qty") or 0),
            currency=str(raw.get("currency") or "usd").lower(),
            discount_percent=raw.get("discount_percent"),
            sale_price=raw.get("sale_price"),
            stripe_price_id=raw.get("stripe_price_id"),
            stripe_product_id=raw.get("stripe_product_id"),
            image_url=raw.get("image_url"),
        )


@dataclass(slots=True, frozen=True)
class CartTotals:
    total_units: int
    original_total_cents: int
    subtotal_cents: int  # what checkout charges, at effective unit prices

    @property
    def discount_cents(self) -> int:
        return max(0, self.original_total_cents - self.subtotal_cents)
