from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from storefront_api.checkout.line_items import (
    PriceData,
    ProductData,
    RequestedLine,
)


class ProductDataRequest(BaseModel):
    name: str | None = None
    images: List[str] | None = None
    metadata: dict[str, str | None] = Field(default_factory=dict)

    def as_product_data(self) -> ProductData:
        return ProductData(
            name=self.name,
            images=self.images,
            metadata={k: v for k, v in self.metadata.items() if v},
        )


class PriceDataRequest(BaseModel):
    currency: str | None = None
    unit_amount: int | None = None
    product_data: ProductDataRequest = Field(default_factory=ProductDataRequest)

    def as_price_data(self) -> PriceData:
        return PriceData(
            currency=self.currency,
            unit_amount=self.unit_amount,
            product_data=self.product_data.as_product_data(),
        )


class CheckoutItemRequest(BaseModel):
    price: str | None = None
    price_data: PriceDataRequest | None = None
    quantity: int | None = None

    def as_requested_line(self) -> RequestedLine:
        return RequestedLine(
            price=self.price,
            price_data=self.price_data.as_price_data() if self.price_data else None,
            quantity=self.quantity,
        )


class CheckoutRequest(BaseModel):
    items: List[CheckoutItemRequest] = Field(default_factory=list)
    allow_promotion_codes: bool = Field(default=False, alias="allowPromotionCodes")

    model_config = ConfigDict(populate_by_name=True)

    def as_requested_lines(self) -> List[RequestedLine]:
        return [item.as_requested_line() for item in self.items]


class CheckoutResponse(BaseModel):
    url: str
