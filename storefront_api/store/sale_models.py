from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String

from storefront_api.store.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SaleOrm(Base):
    __tablename__ = "sales"
    id = Column(Integer, primary_key=True)
    checkout_session_id = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    # cents
    total = Column(Numeric(12, 2), nullable=False, default=0)
    item_id = Column(Integer, ForeignKey("inventory_items.id", ondelete="SET NULL"), nullable=True)
    qty = Column(Integer, nullable=False, default=1)
    status = Column(String(32), nullable=True)
    email = Column(String(320), nullable=True, index=True)
    user_id = Column(String(64), nullable=True, index=True)


@dataclass(slots=True)
class SaleInfo:
    checkout_session_id: str
    created_at: datetime
    total_cents: int
    item_id: int | None
    qty: int = 1
    status: str | None = None
    email: str | None = None
    user_id: str | None = None


@dataclass(slots=True)
class SaleEntity:
    id: int
    info: SaleInfo
