from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Mapping

from storefront_api.errors import BadRequestError
from storefront_api.store import inventory_queries, sale_queries
from storefront_api.store.sale_models import SaleEntity

HISTORY_WINDOW = timedelta(days=90)


@dataclass(slots=True)
class OrderLine:
    name: str
    qty: int


@dataclass(slots=True)
class Order:
    checkout_session_id: str
    created_at: datetime
    status: str
    total_cents: int = 0
    lines: List[OrderLine] = field(default_factory=list)

    @property
    def reference(self) -> str:
        return self.checkout_session_id[-8:].upper()


def group_sales(sales: Iterable[SaleEntity], names: Mapping[int, str]) -> List[Order]:
    """Fold sale rows into one order per checkout session, newest first."""
    by_session: dict[str, Order] = {}
    for sale in sales:
        info = sale.info
        order = by_session.get(info.checkout_session_id)
        if order is None:
            order = Order(
                checkout_session_id=info.checkout_session_id,
                created_at=info.created_at,
                status=info.status or "completed",
            )
            by_session[info.checkout_session_id] = order

        order.created_at = min(order.created_at, info.created_at)
        order.total_cents += info.total_cents
        order.lines.append(OrderLine(name=names.get(info.item_id, "Item"), qty=info.qty or 1))

    return sorted(by_session.values(), key=lambda o: o.created_at, reverse=True)


def order_history(
    email: str | None = None,
    user_id: str | None = None,
    now: datetime | None = None,
) -> List[Order]:
    if not email and not user_id:
        raise BadRequestError("email or user_id required")

    since = (now or datetime.now(timezone.utc)) - HISTORY_WINDOW
    sales = sale_queries.get_for_customer(since, email=email, user_id=user_id)
    names = inventory_queries.get_names(s.info.item_id for s in sales)
    return group_sales(sales, names)
