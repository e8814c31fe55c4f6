import logging
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from storefront_api.config import settings
from storefront_api.store.db import SessionLocal
from storefront_api.store.inventory_models import (
    InventoryItemEntity,
    InventoryItemInfo,
    InventoryItemOrm,
    to_int_cents,
)

logger = logging.getLogger(__name__)


def price_key(price_id: str) -> str:
    return f"price:{price_id}"


def product_key(product_id: str) -> str:
    return f"prod:{product_id}"


def _to_entity(orm: InventoryItemOrm) -> InventoryItemEntity:
    return InventoryItemEntity(
        id=orm.id,
        info=InventoryItemInfo(
            name=orm.name,
            unit_amount_cents=to_int_cents(orm.unit_amount),
            quantity=orm.quantity,
            currency=(orm.currency or "usd").lower(),
            active=bool(orm.active),
            description=orm.description,
            category=orm.category,
            collection=orm.collection,
            image_urls=list(orm.image_urls or []),
            sale_price_cents=to_int_cents(orm.sale_price) if orm.sale_price is not None else None,
            discount_percent=float(orm.discount_percent) if orm.discount_percent is not None else None,
            restock_threshold=orm.restock_threshold,
            stripe_price_id=orm.stripe_price_id,
            stripe_product_id=orm.stripe_product_id,
            tenant_id=orm.tenant_id,
        ),
    )


def _tenant_scoped(stmt):
    if settings.tenant_id:
        stmt = stmt.where(InventoryItemOrm.tenant_id == settings.tenant_id)
    return stmt


def add(info: InventoryItemInfo) -> InventoryItemEntity:
    with SessionLocal.begin() as session:
        orm = InventoryItemOrm(
            tenant_id=info.tenant_id,
            name=info.name,
            description=info.description,
            category=info.category,
            collection=info.collection,
            image_urls=info.image_urls,
            active=info.active,
            currency=info.currency,
            unit_amount=info.unit_amount_cents,
            sale_price=info.sale_price_cents,
            discount_percent=info.discount_percent,
            quantity=info.quantity,
            restock_threshold=info.restock_threshold,
            stripe_price_id=info.stripe_price_id,
            stripe_product_id=info.stripe_product_id,
        )
        session.add(orm)
        session.flush()
        session.refresh(orm)
        return _to_entity(orm)


def fetch_stock_index(
    price_ids: Iterable[str],
    product_ids: Iterable[str],
) -> dict[str, InventoryItemEntity]:
    """Batch-load inventory rows for the given provider ids.

    Every row is indexed under both its ``price:<id>`` and ``prod:<id>`` keys.
    A failing query is logged and skipped, so callers just see fewer rows.
    """
    unique_price_ids = sorted({p for p in price_ids if p})
    unique_product_ids = sorted({p for p in product_ids if p})

    index: dict[str, InventoryItemEntity] = {}
    lookups = (
        ("price ids", InventoryItemOrm.stripe_price_id, unique_price_ids),
        ("product ids", InventoryItemOrm.stripe_product_id, unique_product_ids),
    )
    for label, column, ids in lookups:
        if not ids:
            continue
        try:
            with SessionLocal() as session:
                stmt = _tenant_scoped(select(InventoryItemOrm).where(column.in_(ids)))
                rows = session.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            logger.warning("Inventory lookup by %s failed: %s", label, e)
            continue

        for orm in rows:
            entity = _to_entity(orm)
            if entity.info.stripe_price_id:
                index[price_key(entity.info.stripe_price_id)] = entity
            if entity.info.stripe_product_id:
                index[product_key(entity.info.stripe_product_id)] = entity

    return index


def get_many_active(offset: int = 0, limit: int = 20) -> Iterable[InventoryItemEntity]:
    with SessionLocal() as session:
        stmt = _tenant_scoped(
            select(InventoryItemOrm).where(InventoryItemOrm.active.is_(True))
        )
        stmt = stmt.order_by(InventoryItemOrm.id).offset(offset).limit(limit)
        for orm in session.execute(stmt).scalars().all():
            yield _to_entity(orm)


def get_by_product_id(product_id: str) -> InventoryItemEntity | None:
    with SessionLocal() as session:
        stmt = _tenant_scoped(
            select(InventoryItemOrm).where(InventoryItemOrm.stripe_product_id == product_id)
        )
        orm = session.execute(stmt.limit(1)).scalars().first()
        if orm is None:
            return None
        return _to_entity(orm)


def get_names(ids: Iterable[int]) -> dict[int, str]:
    unique_ids = sorted({i for i in ids if i is not None})
    if not unique_ids:
        return {}
    with SessionLocal() as session:
        rows = session.execute(
            select(InventoryItemOrm.id, InventoryItemOrm.name).where(
                InventoryItemOrm.id.in_(unique_ids)
            )
        ).all()
    return {item_id: name or "Item" for item_id, name in rows}
