"""Reconcile requested cart lines against inventory before checkout.

Requested lines come in two pricing modes: a reference to a price hosted by
the payment provider (``price``) or an inline ``price_data`` block. Each line
is looked up in the inventory index, its quantity clamped to the stock on
hand, and rebuilt in the same mode it arrived in.
"""
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping

from storefront_api.store.inventory_models import InventoryItemEntity
from storefront_api.store.inventory_queries import price_key, product_key


@dataclass(slots=True)
class ProductData:
    name: str | None = None
    images: List[str] | None = None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class PriceData:
    currency: str | None = None
    unit_amount: int | None = None
    product_data: ProductData = field(default_factory=ProductData)


@dataclass(slots=True)
class RequestedLine:
    price: str | None = None
    price_data: PriceData | None = None
    quantity: int | None = None

    @property
    def metadata(self) -> dict[str, str]:
        if self.price_data is None:
            return {}
        return self.price_data.product_data.metadata

    @property
    def requested_quantity(self) -> int:
        return max(1, self.quantity or 1)

    @property
    def has_inline_price(self) -> bool:
        return (
            self.price_data is not None
            and bool(self.price_data.currency)
            and self.price_data.unit_amount is not None
        )


@dataclass(slots=True)
class CheckoutPlan:
    line_items: List[dict[str, Any]]
    subtotal_cents: int
    notes: List[str] = field(default_factory=list)


def collect_lookup_ids(lines: Iterable[RequestedLine]) -> tuple[List[str], List[str]]:
    price_ids: List[str] = []
    product_ids: List[str] = []
    for line in lines:
        if line.price:
            price_ids.append(str(line.price))
        md = line.metadata
        if md.get("stripe_price_id"):
            price_ids.append(str(md["stripe_price_id"]))
        if md.get("stripe_product_id"):
            product_ids.append(str(md["stripe_product_id"]))
    return price_ids, product_ids


def resolve_lookup_key(line: RequestedLine) -> str | None:
    if line.price:
        return price_key(str(line.price))
    md = line.metadata
    if md.get("stripe_price_id"):
        return price_key(str(md["stripe_price_id"]))
    if md.get("stripe_product_id"):
        return product_key(str(md["stripe_product_id"]))
    return None


def clamp_quantity(requested: int, stock: int | None) -> int:
    """Quantity that may be sold; 0 means the line must be dropped."""
    if stock is None:
        return requested
    if stock <= 0:
        return 0
    return min(requested, stock)


def _price_line(line: RequestedLine, quantity: int, stock: int | None) -> dict[str, Any]:
    adjustable: dict[str, Any] = {"enabled": True, "minimum": 1}
    if stock is not None:
        adjustable["maximum"] = stock
    return {
        "price": str(line.price),
        "quantity": quantity,
        "adjustable_quantity": adjustable,
    }


def _inline_line(line: RequestedLine, quantity: int, source: str) -> dict[str, Any]:
    pd = line.price_data
    product_data: dict[str, Any] = {
        "name": str(pd.product_data.name or "Item"),
        "metadata": {
            "stripe_price_id": str(line.metadata.get("stripe_price_id") or ""),
            "stripe_product_id": str(line.metadata.get("stripe_product_id") or ""),
            "source": source,
        },
    }
    if isinstance(pd.product_data.images, list):
        product_data["images"] = pd.product_data.images
    return {
        "price_data": {
            "currency": str(pd.currency).lower(),
            "unit_amount": int(pd.unit_amount),
            "product_data": product_data,
        },
        "quantity": quantity,
    }


def _line_subtotal_cents(
    line: RequestedLine,
    quantity: int,
    row: InventoryItemEntity | None,
) -> int:
    # list price for catalog-backed price lines, the submitted amount otherwise
    if line.price and row is not None:
        return row.info.unit_amount_cents * quantity
    if line.has_inline_price:
        return int(line.price_data.unit_amount) * quantity
    return 0


def build_line_items(
    lines: Iterable[RequestedLine],
    stock_index: Mapping[str, InventoryItemEntity],
    source: str,
) -> CheckoutPlan:
    plan = CheckoutPlan(line_items=[], subtotal_cents=0)
    # stock left per inventory row; several lines may resolve to the same row
    remaining: dict[int, int] = {}

    for line in lines:
        requested = line.requested_quantity
        key = resolve_lookup_key(line)
        row = stock_index.get(key) if key else None
        stock = row.info.quantity if row is not None else None
        if stock is not None:
            stock = remaining.setdefault(row.id, stock)

        quantity = clamp_quantity(requested, stock)
        label = row.info.name if row is not None else key
        if quantity == 0:
            plan.notes.append(f"OOS: {label}")
            continue
        if quantity < requested:
            plan.notes.append(f"Clamped {label} {requested} -> {quantity}")

        if line.price:
            plan.line_items.append(_price_line(line, quantity, stock))
        elif line.has_inline_price:
            plan.line_items.append(_inline_line(line, quantity, source))
        else:
            continue

        if stock is not None:
            remaining[row.id] = stock - quantity
        plan.subtotal_cents += _line_subtotal_cents(line, quantity, row)

    return plan
