import logging
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Query
from sqlalchemy.exc import SQLAlchemyError

from storefront_api.errors import BadRequestError, UpstreamError
from storefront_api.orders import history
from storefront_api.store import sale_queries

from .account_contracts import ClaimRequest, ClaimResponse, OrderResponse

logger = logging.getLogger(__name__)

account_router = APIRouter(prefix="/account")


@account_router.post(
    "/claim",
    responses={
        HTTPStatus.OK: {"description": "Guest orders for the email now belong to the account"},
        HTTPStatus.BAD_REQUEST: {"description": "Neither email nor user_id was given"},
    },
)
async def claim_orders(info: ClaimRequest) -> ClaimResponse:
    if not info.email and not info.user_id:
        raise BadRequestError("email or user_id required")

    # both are needed to move guest rows onto an account
    if not (info.email and info.user_id):
        return ClaimResponse(ok=True, claimed=0)

    try:
        claimed = sale_queries.claim_guest_sales(info.email, info.user_id)
    except SQLAlchemyError as e:
        logger.error("Account claim failed for %s: %s", info.email, e)
        raise UpstreamError("Account claim failed") from e

    logger.info("Claimed %d guest sales for user %s", claimed, info.user_id)
    return ClaimResponse(ok=True, claimed=claimed)


@account_router.get("/orders")
async def get_orders(
    email: Annotated[str | None, Query()] = None,
    user_id: Annotated[str | None, Query()] = None,
) -> list[OrderResponse]:
    try:
        orders = history.order_history(email=email, user_id=user_id)
    except SQLAlchemyError as e:
        logger.error("Order history lookup failed: %s", e)
        raise UpstreamError(str(e)) from e
    return [OrderResponse.from_order(o) for o in orders]
