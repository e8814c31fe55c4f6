from typing import Any, Iterable

from storefront_api.cart.cart_models import CartLine


def to_checkout_item(line: CartLine, source: str) -> dict[str, Any]:
    quantity = max(1, line.quantity)

    # undiscounted lines keep the hosted price so promotion codes apply
    if not line.has_discount and line.stripe_price_id:
        return {"price": line.stripe_price_id, "quantity": quantity}

    product_data: dict[str, Any] = {
        "name": line.name or "Item",
        "metadata": {
            "stripe_price_id": line.stripe_price_id or "",
            "stripe_product_id": line.stripe_product_id or "",
            "source": source,
        },
    }
    if line.image_url:
        product_data["images"] = [line.image_url]
    return {
        "price_data": {
            "currency": (line.currency or "usd").lower(),
            "unit_amount": line.effective_unit_cents,
            "product_data": product_data,
        },
        "quantity": quantity,
    }


def checkout_payload(
    lines: Iterable[CartLine],
    source: str = "storefront-cart",
    allow_promotion_codes: bool = True,
) -> dict[str, Any]:
    """Body for ``POST /checkout`` built from the lines of a cart."""
    return {
        "items": [to_checkout_item(line, source) for line in lines],
        "allowPromotionCodes": allow_promotion_codes,
    }
