from dataclasses import dataclass
from typing import Any

FREE_SHIPPING_THRESHOLD_CENTS = 4000
STANDARD_SHIPPING_CENTS = 499
SHIPPING_LABEL = "Standard Shipping"


@dataclass(slots=True, frozen=True)
class ShippingQuote:
    label: str
    amount_cents: int


def quote_shipping_cents(subtotal_cents: int) -> ShippingQuote:
    if subtotal_cents >= FREE_SHIPPING_THRESHOLD_CENTS:
        return ShippingQuote(label=SHIPPING_LABEL, amount_cents=0)
    return ShippingQuote(label=SHIPPING_LABEL, amount_cents=STANDARD_SHIPPING_CENTS)


def shipping_line_item(
    subtotal_cents: int,
    shipping_price_id: str | None = None,
) -> dict[str, Any] | None:
    """Line item charging shipping for the subtotal, or None when it ships free."""
    quote = quote_shipping_cents(subtotal_cents)
    if quote.amount_cents <= 0:
        return None
    if shipping_price_id:
        return {"price": shipping_price_id, "quantity": 1}
    return {
        "price_data": {
            "currency": "usd",
            "unit_amount": quote.amount_cents,
            "product_data": {"name": quote.label},
        },
        "quantity": 1,
    }
