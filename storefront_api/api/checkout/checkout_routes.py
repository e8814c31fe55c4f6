import re
from http import HTTPStatus

from fastapi import APIRouter, Request

from storefront_api.checkout import checkout_service
from storefront_api.config import settings

from .checkout_contracts import CheckoutRequest, CheckoutResponse

checkout_router = APIRouter(prefix="/checkout")

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)


def origin_from_request(request: Request) -> str:
    if settings.site_url and _ABSOLUTE_URL.match(settings.site_url):
        return settings.site_url.rstrip("/")
    proto = request.headers.get("x-forwarded-proto") or "http"
    host = request.headers.get("x-forwarded-host") or request.headers.get("host")
    return f"{proto}://{host}"


@checkout_router.post(
    "",
    responses={
        HTTPStatus.OK: {"description": "Checkout session created, redirect to url"},
        HTTPStatus.BAD_REQUEST: {"description": "Cart is empty or holds nothing purchasable"},
        HTTPStatus.INTERNAL_SERVER_ERROR: {"description": "Payment provider rejected the session"},
    },
)
async def post_checkout(request: Request, info: CheckoutRequest | None = None) -> CheckoutResponse:
    info = info or CheckoutRequest()
    url = checkout_service.start_checkout(
        info.as_requested_lines(),
        allow_promotion_codes=info.allow_promotion_codes,
        origin=origin_from_request(request),
    )
    return CheckoutResponse(url=url)
