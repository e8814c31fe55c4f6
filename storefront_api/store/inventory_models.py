from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from sqlalchemy import JSON, Boolean, Column, Integer, Numeric, String, Text

from storefront_api.store.db import Base


class InventoryItemOrm(Base):
    __tablename__ = "inventory_items"
    id = Column(Integer, primary_key=True)
    tenant_id = Column(String(64), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(128), nullable=True)
    collection = Column(String(128), nullable=True)
    image_urls = Column(JSON, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    currency = Column(String(3), nullable=False, default="usd")
    # amounts are stored in cents
    unit_amount = Column(Numeric(12, 2), nullable=False, default=0)
    sale_price = Column(Numeric(12, 2), nullable=True)
    discount_percent = Column(Numeric(5, 2), nullable=True)
    quantity = Column(Integer, nullable=True)
    restock_threshold = Column(Integer, nullable=True)
    stripe_price_id = Column(String(255), nullable=True, index=True)
    stripe_product_id = Column(String(255), nullable=True, index=True)


@dataclass(slots=True)
class InventoryItemInfo:
    name: str
    unit_amount_cents: int
    quantity: int | None = None
    currency: str = "usd"
    active: bool = True
    description: str | None = None
    category: str | None = None
    collection: str | None = None
    image_urls: List[str] = field(default_factory=list)
    sale_price_cents: int | None = None
    discount_percent: float | None = None
    restock_threshold: int | None = None
    stripe_price_id: str | None = None
    stripe_product_id: str | None = None
    tenant_id: str | None = None


@dataclass(slots=True)
class InventoryItemEntity:
    id: int
    info: InventoryItemInfo


def to_int_cents(value: Decimal | float | str | None) -> int:
    if value is None:
        return 0
    try:
        return int(round(float(value)))
    except (TypeError, ValueError):
        return 0
