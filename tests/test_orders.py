from __future__ import annotations

from datetime import datetime, timedelta, timezone
from http import HTTPStatus

import pytest
from fastapi.testclient import TestClient

from storefront_api.errors import BadRequestError
from storefront_api.orders.history import group_sales, order_history
from storefront_api.store import sale_queries
from storefront_api.store.sale_models import SaleEntity, SaleInfo

from conftest import add_inventory


def now() -> datetime:
	return datetime.now(timezone.utc)


def sale(
	session_id: str,
	total: int,
	item_id: int | None = None,
	days_ago: float = 1,
	email: str | None = "ava@example.com",
	user_id: str | None = None,
	qty: int = 1,
	status: str | None = "completed",
) -> SaleInfo:
	return SaleInfo(
		checkout_session_id=session_id,
		created_at=now() - timedelta(days=days_ago),
		total_cents=total,
		item_id=item_id,
		qty=qty,
		status=status,
		email=email,
		user_id=user_id,
	)


def test_group_sales_sums_per_session() -> None:
	base = datetime(2026, 5, 1, 12, 0)
	sales = [
		SaleEntity(1, SaleInfo("cs_a", base + timedelta(minutes=1), 1500, 1, qty=1)),
		SaleEntity(2, SaleInfo("cs_b", base + timedelta(days=2), 499, 2, qty=2)),
		SaleEntity(3, SaleInfo("cs_a", base, 2500, 2, qty=3)),
	]
	orders = group_sales(sales, {1: "Bunny", 2: "Cat"})

	assert [o.checkout_session_id for o in orders] == ["cs_b", "cs_a"]
	cs_a = orders[1]
	assert cs_a.total_cents == 4000
	assert cs_a.created_at == base
	assert cs_a.status == "completed"
	assert [(line.name, line.qty) for line in cs_a.lines] == [("Bunny", 1), ("Cat", 3)]


def test_group_sales_every_session_once() -> None:
	base = datetime(2026, 5, 1)
	sales = [
		SaleEntity(i, SaleInfo(f"cs_{i % 3}", base + timedelta(hours=i), 100, None))
		for i in range(9)
	]
	orders = group_sales(sales, {})

	assert sorted(o.checkout_session_id for o in orders) == ["cs_0", "cs_1", "cs_2"]
	assert all(o.total_cents == 300 for o in orders)
	assert all(line.name == "Item" for o in orders for line in o.lines)


def test_order_reference_is_short_session_suffix() -> None:
	orders = group_sales([SaleEntity(1, SaleInfo("cs_test_a1b2c3d4e5", datetime(2026, 1, 1), 1, None))], {})
	assert orders[0].reference == "B2C3D4E5"


def test_order_history_requires_customer() -> None:
	with pytest.raises(BadRequestError):
		order_history()


def test_orders_endpoint_groups_recent_sales(client: TestClient) -> None:
	bunny = add_inventory("Bunny", quantity=5)
	cat = add_inventory("Cat", quantity=5)

	sale_queries.add(sale("cs_test_recent0001", 1500, bunny.id, days_ago=1))
	sale_queries.add(sale("cs_test_recent0001", 2000, cat.id, days_ago=1, qty=2))
	sale_queries.add(sale("cs_test_older00002", 499, cat.id, days_ago=10))
	sale_queries.add(sale("cs_test_expired003", 999, cat.id, days_ago=120))
	sale_queries.add(sale("cs_test_stranger04", 100, cat.id, email="someone@example.com"))

	r = client.get("/account/orders", params={"email": "ava@example.com"})
	assert r.status_code == HTTPStatus.OK
	data = r.json()

	assert [o["checkout_session_id"] for o in data] == ["cs_test_recent0001", "cs_test_older00002"]
	assert data[0]["total_cents"] == 3500
	assert data[0]["reference"] == "CENT0001"
	assert {(line["name"], line["qty"]) for line in data[0]["lines"]} == {("Bunny", 1), ("Cat", 2)}


def test_orders_match_account_or_email(client: TestClient) -> None:
	sale_queries.add(sale("cs_mail", 100, email="ava@example.com", user_id=None))
	sale_queries.add(sale("cs_user", 200, email="old@example.com", user_id="user-1"))
	sale_queries.add(sale("cs_other", 300, email="x@example.com", user_id="user-2"))

	r = client.get("/account/orders", params={"email": "ava@example.com", "user_id": "user-1"})
	assert r.status_code == HTTPStatus.OK
	assert {o["checkout_session_id"] for o in r.json()} == {"cs_mail", "cs_user"}


def test_orders_endpoint_requires_customer(client: TestClient) -> None:
	r = client.get("/account/orders")
	assert r.status_code == HTTPStatus.BAD_REQUEST
	assert r.json() == {"error": "email or user_id required"}


def test_claim_attaches_guest_sales(client: TestClient) -> None:
	sale_queries.add(sale("cs_guest_1", 100))
	sale_queries.add(sale("cs_guest_2", 200))
	sale_queries.add(sale("cs_owned", 300, user_id="user-9"))

	r = client.post("/account/claim", json={"email": "ava@example.com", "userId": "user-1"})
	assert r.status_code == HTTPStatus.OK
	assert r.json() == {"ok": True, "claimed": 2}

	r = client.get("/account/orders", params={"user_id": "user-1"})
	assert {o["checkout_session_id"] for o in r.json()} == {"cs_guest_1", "cs_guest_2"}

	r = client.post("/account/claim", json={"email": "ava@example.com", "user_id": "user-1"})
	assert r.json() == {"ok": True, "claimed": 0}


def test_claim_validation(client: TestClient) -> None:
	r = client.post("/account/claim", json={})
	assert r.status_code == HTTPStatus.BAD_REQUEST
	assert r.json() == {"error": "email or user_id required"}

	r = client.post("/account/claim", json={"email": "ava@example.com"})
	assert r.status_code == HTTPStatus.OK
	assert r.json() == {"ok": True, "claimed": 0}
