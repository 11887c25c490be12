"""Checkout merge resolution: new tab or merge into the table's open tab"""

import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

import structlog

from app.errors import InvalidRequestError
from app.reconciliation.aggregator import aggregate
from app.reconciliation.intents import ORDERS, WriteIntent
from app.reconciliation.normalizer import compute_total, normalize_items, normalize_order
from app.reconciliation.notes import combine_notes
from app.schemas.order import Order
from app.store.base import DocumentStore, Filter, OrderBy

logger = structlog.get_logger()

# Most recent open tab is canonical when a table has more than one
NEWEST_FIRST = OrderBy("timestamp", descending=True)
OLDEST_FIRST = OrderBy("timestamp", descending=False)


async def find_open_orders(
    store: DocumentStore,
    table_id: str,
    order_by: OrderBy = NEWEST_FIRST,
    limit: Optional[int] = None,
) -> List[Order]:
    """Pending orders for a table, normalized"""
    documents = await store.query(
        ORDERS,
        filters=[
            Filter("table_id", "==", table_id),
            Filter("payment_status", "==", "pending"),
        ],
        order_by=order_by,
        limit=limit,
    )
    return [normalize_order(doc) for doc in documents]


def plan_checkout(
    table_id: str,
    cart_items: Sequence[Any],
    note: Optional[str],
    open_orders: Sequence[Order],
    now: Optional[datetime] = None,
) -> WriteIntent:
    """Decide create vs. merge from already-fetched open orders"""
    table_id = table_id.strip() if isinstance(table_id, str) else ""
    if not table_id:
        raise InvalidRequestError("Table id is required")

    cart = aggregate([normalize_items(list(cart_items))])
    if not cart:
        raise InvalidRequestError("Cart is empty")

    now = now or datetime.now(timezone.utc)

    if not open_orders:
        return WriteIntent(
            kind="create",
            data={
                "table_id": table_id,
                "session_id": str(uuid.uuid4()),
                "items": [item.model_dump() for item in cart],
                "status": "new",
                "payment_status": "pending",
                "total_price": compute_total(cart),
                "order_note": combine_notes(note) or None,
                "timestamp": now,
            },
        )

    tab = open_orders[0]
    items = aggregate([tab.items, cart])

    # status and session_id stay as they are on the tab
    return WriteIntent(
        kind="update",
        order_id=tab.id,
        expected_version=tab.version,
        base=tab,
        data={
            "items": [item.model_dump() for item in items],
            "total_price": compute_total(items),
            "order_note": combine_notes(tab.order_note, note) or None,
            "timestamp": now,
        },
    )


async def resolve_checkout(
    store: DocumentStore,
    table_id: str,
    cart_items: Sequence[Any],
    note: Optional[str] = None,
    now: Optional[datetime] = None,
) -> WriteIntent:
    """Query the table's open tab and compute the checkout write"""
    if not isinstance(table_id, str) or not table_id.strip():
        raise InvalidRequestError("Table id is required")

    open_orders = await find_open_orders(store, table_id.strip())
    intent = plan_checkout(table_id, cart_items, note, open_orders, now)

    logger.info(
        "Checkout resolved",
        table_id=table_id,
        merged=not intent.is_create,
        order_id=intent.order_id,
        open_tabs=len(open_orders),
    )
    return intent
