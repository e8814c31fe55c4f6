from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import NonNegativeInt, PositiveInt

from storefront_api.errors import NotFoundError
from storefront_api.payments import stripe_client
from storefront_api.store import inventory_queries as store

from .product_contracts import ProductDetailResponse, ProductListItemResponse

product_router = APIRouter(prefix="/products")


@product_router.get("")
async def get_product_list(
    offset: Annotated[NonNegativeInt, Query()] = 0,
    limit: Annotated[PositiveInt, Query(le=100)] = 20,
) -> list[ProductListItemResponse]:
    return [
        ProductListItemResponse.from_entity(e)
        for e in store.get_many_active(offset=offset, limit=limit)
    ]


@product_router.get(
    "/{id}",
    responses={
        HTTPStatus.OK: {"description": "Successfully returned requested product"},
        HTTPStatus.NOT_FOUND: {"description": "Neither the catalog nor inventory knows the product"},
    },
)
async def get_product_by_id(id: str) -> ProductDetailResponse:
    provider_product = stripe_client.retrieve_product(id)
    row = store.get_by_product_id(id)

    if provider_product is None and row is None:
        raise NotFoundError(f"Request resource /products/{id} was not found")

    return ProductDetailResponse.merge(id, provider_product, row)
