import json
import logging
from typing import Any, List

from storefront_api.checkout.line_items import (
    RequestedLine,
    build_line_items,
    collect_lookup_ids,
)
from storefront_api.checkout.shipping import shipping_line_item
from storefront_api.config import settings
from storefront_api.errors import BadRequestError
from storefront_api.payments import stripe_client
from storefront_api.store import inventory_queries

logger = logging.getLogger(__name__)


def session_params(
    line_items: List[dict[str, Any]],
    allow_promotion_codes: bool,
    origin: str,
) -> dict[str, Any]:
    return {
        "mode": "payment",
        "line_items": line_items,
        "allow_promotion_codes": allow_promotion_codes,
        "success_url": f"{origin}/success?session_id={{CHECKOUT_SESSION_ID}}",
        "cancel_url": f"{origin}/cancel",
        "metadata": {"source": settings.checkout_source},
        "automatic_tax": {"enabled": settings.is_production},
        "shipping_address_collection": {"allowed_countries": ["US"]},
    }


def prepare_line_items(lines: List[RequestedLine]) -> List[dict[str, Any]]:
    """Clamp requested lines against stock and append the shipping line."""
    if not lines:
        raise BadRequestError("Cart is empty")

    price_ids, product_ids = collect_lookup_ids(lines)
    stock_index = inventory_queries.fetch_stock_index(price_ids, product_ids)

    plan = build_line_items(lines, stock_index, settings.checkout_source)
    if not plan.line_items:
        raise BadRequestError("No valid line items to process")
    if plan.notes:
        logger.warning("Oversell clamp: %s", plan.notes)

    shipping = shipping_line_item(plan.subtotal_cents, settings.shipping_price_id)
    if shipping is not None:
        plan.line_items.append(shipping)
    return plan.line_items


def start_checkout(
    lines: List[RequestedLine],
    allow_promotion_codes: bool,
    origin: str,
) -> str:
    line_items = prepare_line_items(lines)
    params = session_params(line_items, allow_promotion_codes, origin)
    logger.info("Creating checkout with line_items: %s", json.dumps(line_items))
    return stripe_client.create_checkout_session(params)
