"""Order model"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, JSON, Text, Integer, Float, Index

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Order(Base):
    """Table orders (one open tab per table visit segment)"""
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    table_id = Column(String(50), nullable=False)
    # Empty for orders created by a table transfer
    session_id = Column(String(36), nullable=False, default="")

    # [{"id": "...", "name": "...", "price": 12.5, "quantity": 2}, ...]
    items = Column(JSON, nullable=False, default=list)
    total_price = Column(Float, nullable=False, default=0)

    # Status
    status = Column(String(20), nullable=False, default="new")  # new, preparing, ready, delivered
    payment_status = Column(String(20), nullable=False, default="pending")  # pending, paid

    order_note = Column(Text)

    # Last activity, refreshed on every write
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # Optimistic concurrency token, bumped by the store on every write
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        Index("ix_orders_table_payment", "table_id", "payment_status"),
        Index("ix_orders_timestamp", "timestamp"),
    )
