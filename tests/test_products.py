from __future__ import annotations

from http import HTTPStatus
from typing import Any

import pytest
from fastapi.testclient import TestClient

from storefront_api.payments import stripe_client

from conftest import add_inventory


@pytest.fixture()
def provider_products(monkeypatch: pytest.MonkeyPatch) -> dict[str, dict[str, Any]]:
	products: dict[str, dict[str, Any]] = {}
	monkeypatch.setattr(stripe_client, "retrieve_product", lambda product_id: products.get(product_id))
	return products


def test_product_list_shows_active_only(client: TestClient) -> None:
	add_inventory("Bunny", quantity=4, unit_amount=1200, product_id="prod_bunny")
	add_inventory("Retired", quantity=4, active=False)
	add_inventory("Cat", quantity=0, unit_amount=900, discount_percent=10.0)

	r = client.get("/products")
	assert r.status_code == HTTPStatus.OK
	data = r.json()
	assert [p["name"] for p in data] == ["Bunny", "Cat"]
	assert data[0]["unit_amount"] == 1200
	assert data[0]["stripe_product_id"] == "prod_bunny"
	assert data[1]["discount_percent"] == pytest.approx(10.0)

	r = client.get("/products", params={"offset": 1, "limit": 1})
	assert [p["name"] for p in r.json()] == ["Cat"]


def test_product_list_validation(client: TestClient) -> None:
	assert client.get("/products", params={"limit": 0}).status_code == HTTPStatus.UNPROCESSABLE_ENTITY
	assert client.get("/products", params={"limit": 500}).status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_product_detail_merges_provider_and_inventory(
	client: TestClient,
	provider_products: dict[str, dict[str, Any]],
) -> None:
	add_inventory(
		"Bunny (db)",
		quantity=6,
		unit_amount=1100,
		product_id="prod_bunny",
		price_id="price_db",
		image_urls=["https://cdn.example.com/bunny.png"],
		sale_price_cents=900,
	)
	provider_products["prod_bunny"] = {
		"id": "prod_bunny",
		"name": "Bunny",
		"description": "Very squishy",
		"images": ["https://files.stripe.test/bunny.png"],
		"default_price": {"id": "price_live", "unit_amount": 1200, "currency": "usd"},
	}

	r = client.get("/products/prod_bunny")
	assert r.status_code == HTTPStatus.OK
	data = r.json()

	assert data["product"]["name"] == "Bunny"
	assert data["product"]["description"] == "Very squishy"
	assert data["product"]["stripe_price_id"] == "price_live"
	assert data["product"]["sale_price"] == 900
	assert data["defaultPrice"] == {"id": "price_live", "unit_amount": 1200, "currency": "usd"}
	assert data["images"] == ["https://cdn.example.com/bunny.png"]
	assert data["inventory"] == {"available": 6}


def test_product_detail_falls_back_to_inventory(
	client: TestClient,
	provider_products: dict[str, dict[str, Any]],
) -> None:
	add_inventory("Frog", quantity=None, unit_amount=800, product_id="prod_frog", price_id="price_frog")

	r = client.get("/products/prod_frog")
	assert r.status_code == HTTPStatus.OK
	data = r.json()
	assert data["product"]["name"] == "Frog"
	assert data["product"]["description"] == ""
	assert data["defaultPrice"] == {"id": "price_frog", "unit_amount": 800, "currency": "usd"}
	assert data["images"] == []
	assert data["inventory"] == {"available": 0}


def test_product_detail_provider_only(
	client: TestClient,
	provider_products: dict[str, dict[str, Any]],
) -> None:
	provider_products["prod_ghost"] = {
		"id": "prod_ghost",
		"name": "Ghost",
		"images": ["https://files.stripe.test/ghost.png"],
		"default_price": None,
	}

	data = client.get("/products/prod_ghost").json()
	assert data["defaultPrice"] == {"id": None, "unit_amount": 0, "currency": "usd"}
	assert data["images"] == ["https://files.stripe.test/ghost.png"]
	assert data["inventory"] == {"available": 0}


def test_product_detail_not_found(
	client: TestClient,
	provider_products: dict[str, dict[str, Any]],
) -> None:
	r = client.get("/products/prod_missing")
	assert r.status_code == HTTPStatus.NOT_FOUND
	assert r.json() == {"error": "Request resource /products/prod_missing was not found"}
