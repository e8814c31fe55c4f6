from __future__ import annotations

import os
from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient

if "DATABASE_URL" not in os.environ:
	os.environ["DATABASE_URL"] = "sqlite+pysqlite:///./test_storefront_api.db"

for _key in ("STRIPE_SECRET_KEY", "SHIPPING_PRICE_ID", "SITE_URL", "NEXT_PUBLIC_SITE_URL", "TENANT_ID"):
	os.environ[_key] = ""

from storefront_api import main as app_module  # noqa: E402
from storefront_api.payments import stripe_client  # noqa: E402
from storefront_api.store import inventory_queries  # noqa: E402
from storefront_api.store.db import Base, engine  # noqa: E402
from storefront_api.store.inventory_models import InventoryItemEntity, InventoryItemInfo  # noqa: E402

CHECKOUT_URL = "https://checkout.stripe.test/c/pay/cs_test_123"


@pytest.fixture(autouse=True)
def _clean_db():
	db_url = os.environ.get("DATABASE_URL", "")
	if db_url.startswith("sqlite"):
		Base.metadata.drop_all(bind=engine)
		Base.metadata.create_all(bind=engine)
	yield


@pytest.fixture()
def client() -> Iterator[TestClient]:
	with TestClient(app_module.app) as c:
		yield c


@pytest.fixture()
def created_sessions(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
	created: list[dict[str, Any]] = []

	def fake_create(params: dict[str, Any]) -> str:
		created.append(params)
		return CHECKOUT_URL

	monkeypatch.setattr(stripe_client, "create_checkout_session", fake_create)
	return created


def add_inventory(
	name: str,
	quantity: int | None,
	unit_amount: int = 1500,
	price_id: str | None = None,
	product_id: str | None = None,
	**extra: Any,
) -> InventoryItemEntity:
	return inventory_queries.add(
		InventoryItemInfo(
			name=name,
			unit_amount_cents=unit_amount,
			quantity=quantity,
			stripe_price_id=price_id,
			stripe_product_id=product_id,
			**extra,
		)
	)
