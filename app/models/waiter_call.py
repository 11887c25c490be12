"""Waiter call model"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Text, Integer, Index

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WaiterCall(Base):
    """Patron requests for a waiter at a table"""
    __tablename__ = "waiter_calls"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    table_id = Column(String(50), nullable=False)
    message = Column(Text)
    status = Column(String(20), nullable=False, default="pending")  # pending, acknowledged, resolved
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        Index("ix_waiter_calls_table_timestamp", "table_id", "timestamp"),
    )
