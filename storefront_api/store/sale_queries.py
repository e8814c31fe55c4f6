from datetime import datetime
from typing import List

from sqlalchemy import or_, select, update as sa_update

from storefront_api.store.db import SessionLocal
from storefront_api.store.inventory_models import to_int_cents
from storefront_api.store.sale_models import SaleEntity, SaleInfo, SaleOrm


def _to_entity(orm: SaleOrm) -> SaleEntity:
    return SaleEntity(
        id=orm.id,
        info=SaleInfo(
            checkout_session_id=orm.checkout_session_id,
            created_at=orm.created_at,
            total_cents=to_int_cents(orm.total),
            item_id=orm.item_id,
            qty=orm.qty or 1,
            status=orm.status,
            email=orm.email,
            user_id=orm.user_id,
        ),
    )


def add(info: SaleInfo) -> SaleEntity:
    with SessionLocal.begin() as session:
        orm = SaleOrm(
            checkout_session_id=info.checkout_session_id,
            created_at=info.created_at,
            total=info.total_cents,
            item_id=info.item_id,
            qty=info.qty,
            status=info.status,
            email=info.email,
            user_id=info.user_id,
        )
        session.add(orm)
        session.flush()
        session.refresh(orm)
        return _to_entity(orm)


def get_for_customer(
    since: datetime,
    email: str | None = None,
    user_id: str | None = None,
) -> List[SaleEntity]:
    conditions = []
    if user_id:
        conditions.append(SaleOrm.user_id == user_id)
    if email:
        conditions.append(SaleOrm.email == email)
    if not conditions:
        return []

    with SessionLocal() as session:
        stmt = (
            select(SaleOrm)
            .where(SaleOrm.created_at >= since)
            .where(or_(*conditions))
            .order_by(SaleOrm.created_at.desc())
        )
        return [_to_entity(orm) for orm in session.execute(stmt).scalars().all()]


def claim_guest_sales(email: str, user_id: str) -> int:
    """Attach sales recorded for ``email`` without an account to ``user_id``."""
    with SessionLocal.begin() as session:
        result = session.execute(
            sa_update(SaleOrm)
            .where(SaleOrm.email == email)
            .where(SaleOrm.user_id.is_(None))
            .values(user_id=user_id)
        )
        return result.rowcount or 0
