from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field

from storefront_api.store.inventory_models import InventoryItemEntity


class ProductListItemResponse(BaseModel):
    id: int
    name: str
    description: str | None
    category: str | None
    collection: str | None
    image_urls: List[str]
    currency: str
    unit_amount: int
    quantity: int | None
    discount_percent: float | None
    sale_price: int | None
    stripe_price_id: str | None
    stripe_product_id: str | None

    @staticmethod
    def from_entity(entity: InventoryItemEntity) -> ProductListItemResponse:
        info = entity.info
        return ProductListItemResponse(
            id=entity.id,
            name=info.name,
            description=info.description,
            category=info.category,
            collection=info.collection,
            image_urls=info.image_urls,
            currency=info.currency,
            unit_amount=info.unit_amount_cents,
            quantity=info.quantity,
            discount_percent=info.discount_percent,
            sale_price=info.sale_price_cents,
            stripe_price_id=info.stripe_price_id,
            stripe_product_id=info.stripe_product_id,
        )


class ProductSummary(BaseModel):
    id: str
    name: str
    description: str
    discount_percent: float | None
    sale_price: int | None
    stripe_product_id: str
    stripe_price_id: str | None


class DefaultPrice(BaseModel):
    id: str | None
    unit_amount: int
    currency: str


class InventoryAvailability(BaseModel):
    available: int


class ProductDetailResponse(BaseModel):
    product: ProductSummary
    default_price: DefaultPrice = Field(serialization_alias="defaultPrice")
    images: List[str]
    inventory: InventoryAvailability

    model_config = ConfigDict(populate_by_name=True)

    @staticmethod
    def merge(
        product_id: str,
        provider_product: dict[str, Any] | None,
        row: InventoryItemEntity | None,
    ) -> ProductDetailResponse:
        """Combine the provider's product with the inventory row.

        The provider wins for name, description and price; the inventory row
        wins for images and is the only source of stock.
        """
        provider_product = provider_product or {}
        price = provider_product.get("default_price")
        if not isinstance(price, dict):
            price = {}
        info = row.info if row is not None else None

        price_id = price.get("id") or (info.stripe_price_id if info else None)
        unit_amount = price.get("unit_amount")
        if unit_amount is None:
            unit_amount = info.unit_amount_cents if info else 0

        if info and info.image_urls:
            images = info.image_urls
        else:
            images = list(provider_product.get("images") or [])

        return ProductDetailResponse(
            product=ProductSummary(
                id=product_id,
                name=provider_product.get("name") or (info.name if info else ""),
                description=provider_product.get("description")
                or (info.description if info and info.description else ""),
                discount_percent=info.discount_percent if info else None,
                sale_price=info.sale_price_cents if info else None,
                stripe_product_id=product_id,
                stripe_price_id=price_id,
            ),
            default_price=DefaultPrice(
                id=price_id,
                unit_amount=int(unit_amount),
                currency=price.get("currency") or (info.currency if info else "usd"),
            ),
            images=images,
            inventory=InventoryAvailability(
                available=info.quantity if info and info.quantity is not None else 0,
            ),
        )
