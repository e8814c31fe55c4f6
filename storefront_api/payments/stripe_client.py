import logging
from typing import Any

import stripe

from storefront_api.config import settings
from storefront_api.errors import PaymentProviderError

logger = logging.getLogger(__name__)


def _request_options() -> dict[str, Any]:
    return {
        "api_key": settings.stripe_secret_key,
        "stripe_version": settings.stripe_api_version,
    }


def _provider_message(e: stripe.StripeError) -> str:
    return e.user_message or str(e) or "Unable to create checkout session"


def create_checkout_session(params: dict[str, Any]) -> str:
    """Create a hosted checkout session and return its redirect URL."""
    if not settings.stripe_configured:
        raise PaymentProviderError("Payment provider is not configured")

    try:
        session = stripe.checkout.Session.create(**params, **_request_options())
    except stripe.StripeError as e:
        logger.error("Checkout session error: %s", e)
        raise PaymentProviderError(_provider_message(e)) from e

    if not session.url:
        raise PaymentProviderError("Payment provider returned no session URL")
    return session.url


def retrieve_product(product_id: str) -> dict[str, Any] | None:
    """Fetch a product with its default price expanded, or None if unavailable."""
    if not settings.stripe_configured:
        logger.warning("Stripe key missing; skipping product lookup for %s", product_id)
        return None

    try:
        product = stripe.Product.retrieve(
            product_id, expand=["default_price"], **_request_options()
        )
    except stripe.StripeError as e:
        logger.warning("Stripe product lookup failed for %s: %s", product_id, e)
        return None
    return product.to_dict()
