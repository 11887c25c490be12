"""
Record normalization.

Every persisted order or waiter call passes through here before the rest
of the engine sees it. Normalization never fails: each field falls back to
a safe default when the stored value is missing or has the wrong shape.
"""

import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, List, Optional

from app.config import settings
from app.schemas.order import LineItem, Order, ORDER_STATUSES
from app.schemas.waiter_call import WaiterCall, WAITER_CALL_STATUSES


def _finite(value: Any) -> Optional[float]:
    """Return value if it is a finite real number (bools excluded)"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value


def _text(value: Any) -> str:
    return value if isinstance(value, str) and value else ""


def _as_mapping(raw: Any) -> Mapping:
    if isinstance(raw, Mapping):
        return raw
    if hasattr(raw, "model_dump"):
        return raw.model_dump()
    return {}


def normalize_item_id(value: Any) -> str:
    """Item ids may arrive as numbers; 3 and 3.0 map to the same id"""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_item(raw: Mapping) -> LineItem:
    name = raw.get("name")
    if name is None or name == "":
        name = settings.unnamed_item_label

    price = _finite(raw.get("price"))
    quantity = _finite(raw.get("quantity"))

    return LineItem(
        id=normalize_item_id(raw.get("id")),
        name=str(name),
        price=max(float(price), 0.0) if price is not None else 0.0,
        quantity=max(int(quantity), 0) if quantity is not None else 0,
    )


def normalize_items(raw: Any) -> List[LineItem]:
    """Normalize a line item list, skipping entries that are not objects"""
    if not isinstance(raw, (list, tuple)):
        return []
    return [normalize_item(entry) for entry in raw if isinstance(entry, Mapping)]


def normalize_timestamp(raw: Any, now: Optional[datetime] = None) -> datetime:
    """Coerce to an aware UTC datetime, or fall back to now"""
    value = raw
    if isinstance(value, str):
        # fromisoformat only accepts a "Z" suffix from 3.11 on
        if value[-1:] in ("Z", "z"):
            value = value[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            value = None
    if not isinstance(value, datetime):
        return now or datetime.now(timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def compute_total(items: List[LineItem]) -> float:
    return sum(item.price * item.quantity for item in items)


def normalize_order(raw: Any, now: Optional[datetime] = None) -> Order:
    """Convert an arbitrary stored record into an Order"""
    data = _as_mapping(raw)
    items = normalize_items(data.get("items"))

    status = data.get("status")
    if status not in ORDER_STATUSES:
        status = "new"

    version = data.get("version")
    if isinstance(version, bool) or not isinstance(version, int) or version < 0:
        version = 0

    return Order(
        id=normalize_item_id(data.get("id")),
        table_id=_text(data.get("table_id")),
        session_id=_text(data.get("session_id")),
        items=items,
        status=status,
        payment_status="paid" if data.get("payment_status") == "paid" else "pending",
        # Derived, never trusted from storage
        total_price=compute_total(items),
        order_note=_text(data.get("order_note")) or None,
        timestamp=normalize_timestamp(data.get("timestamp"), now),
        version=version,
    )


def normalize_waiter_call(raw: Any, now: Optional[datetime] = None) -> WaiterCall:
    data = _as_mapping(raw)

    status = data.get("status")
    if status not in WAITER_CALL_STATUSES:
        status = "pending"

    return WaiterCall(
        id=normalize_item_id(data.get("id")),
        table_id=_text(data.get("table_id")),
        status=status,
        message=_text(data.get("message")) or None,
        timestamp=normalize_timestamp(data.get("timestamp"), now),
    )
