from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import AliasChoices, BaseModel, Field

from storefront_api.orders.history import Order


class ClaimRequest(BaseModel):
    email: str | None = None
    user_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("user_id", "userId"),
    )


class ClaimResponse(BaseModel):
    ok: bool
    claimed: int


class OrderLineResponse(BaseModel):
    name: str
    qty: int


class OrderResponse(BaseModel):
    checkout_session_id: str
    reference: str
    created_at: datetime
    status: str
    total_cents: int
    lines: List[OrderLineResponse]

    @staticmethod
    def from_order(order: Order) -> OrderResponse:
        return OrderResponse(
            checkout_session_id=order.checkout_session_id,
            reference=order.reference,
            created_at=order.created_at,
            status=order.status,
            total_cents=order.total_cents,
            lines=[OrderLineResponse(name=line.name, qty=line.qty) for line in order.lines],
        )
