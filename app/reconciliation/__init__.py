"""Order reconciliation engine"""

from app.reconciliation.aggregator import aggregate
from app.reconciliation.checkout import find_open_orders, plan_checkout, resolve_checkout
from app.reconciliation.intents import BatchIntent, WriteIntent
from app.reconciliation.normalizer import (
    compute_total,
    normalize_item,
    normalize_items,
    normalize_order,
    normalize_waiter_call,
)
from app.reconciliation.notes import combine_notes, transfer_tag
from app.reconciliation.transfer import plan_transfer, resolve_transfer

__all__ = [
    "aggregate",
    "find_open_orders",
    "plan_checkout",
    "resolve_checkout",
    "BatchIntent",
    "WriteIntent",
    "compute_total",
    "normalize_item",
    "normalize_items",
    "normalize_order",
    "normalize_waiter_call",
    "combine_notes",
    "transfer_tag",
    "plan_transfer",
    "resolve_transfer",
]
