"""Table transfer reconciliation: N open tabs at a source onto one target tab"""

from datetime import datetime, timezone
from typing import Optional, Sequence

import structlog

from app.errors import InvalidRequestError, NotFoundError
from app.reconciliation.aggregator import aggregate
from app.reconciliation.checkout import NEWEST_FIRST, OLDEST_FIRST, find_open_orders
from app.reconciliation.intents import BatchIntent, WriteIntent
from app.reconciliation.normalizer import compute_total
from app.reconciliation.notes import combine_notes, transfer_tag
from app.schemas.order import Order
from app.store.base import DocumentStore

logger = structlog.get_logger()


def validate_transfer(source_table_id: str, target_table_id: str) -> None:
    if not source_table_id or not target_table_id:
        raise InvalidRequestError("Source and target tables are required")
    if source_table_id == target_table_id:
        raise InvalidRequestError("Choose a different target table")


def plan_transfer(
    source_table_id: str,
    target_table_id: str,
    source_orders: Sequence[Order],
    target_order: Optional[Order],
    now: Optional[datetime] = None,
) -> BatchIntent:
    """Build the transfer batch from already-fetched orders"""
    validate_transfer(source_table_id, target_table_id)
    if not source_orders:
        raise NotFoundError(f"No open orders to transfer at table {source_table_id}")

    now = now or datetime.now(timezone.utc)
    tag = transfer_tag(source_table_id, target_table_id)

    source_items = aggregate(order.items for order in source_orders)
    source_notes = [order.order_note for order in source_orders if order.order_note]

    if target_order is not None:
        # Target's own prices win for shared items
        items = aggregate([target_order.items, source_items])
        target = WriteIntent(
            kind="update",
            order_id=target_order.id,
            expected_version=target_order.version,
            base=target_order,
            data={
                "items": [item.model_dump() for item in items],
                "total_price": compute_total(items),
                "order_note": combine_notes(target_order.order_note, *source_notes, tag),
                "timestamp": now,
            },
        )
    else:
        target = WriteIntent(
            kind="create",
            data={
                "table_id": target_table_id,
                "session_id": "",
                "items": [item.model_dump() for item in source_items],
                "status": "new",
                "payment_status": "pending",
                "total_price": compute_total(source_items),
                "order_note": combine_notes(*source_notes, tag),
                "timestamp": now,
            },
        )

    # Sources are closed through the paid flag, keeping their own note after the tag
    closes = [
        WriteIntent(
            kind="update",
            order_id=order.id,
            expected_version=order.version,
            base=order,
            data={
                "payment_status": "paid",
                "order_note": combine_notes(tag, order.order_note),
                "timestamp": now,
            },
        )
        for order in source_orders
    ]

    return BatchIntent(target=target, closes=closes)


async def resolve_transfer(
    store: DocumentStore,
    source_table_id: str,
    target_table_id: str,
    now: Optional[datetime] = None,
) -> BatchIntent:
    """Fetch both tables' open tabs and compute the transfer batch"""
    validate_transfer(source_table_id, target_table_id)

    source_orders = await find_open_orders(store, source_table_id, order_by=OLDEST_FIRST)
    if not source_orders:
        raise NotFoundError(f"No open orders to transfer at table {source_table_id}")

    target_orders = await find_open_orders(store, target_table_id, order_by=NEWEST_FIRST, limit=1)
    target_order = target_orders[0] if target_orders else None

    intent = plan_transfer(source_table_id, target_table_id, source_orders, target_order, now)

    logger.info(
        "Transfer resolved",
        source_table_id=source_table_id,
        target_table_id=target_table_id,
        sources=len(source_orders),
        target_order_id=target_order.id if target_order else None,
    )
    return intent
