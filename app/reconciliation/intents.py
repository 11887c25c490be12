"""Write intents produced by the resolvers"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.reconciliation.normalizer import normalize_order
from app.schemas.order import Order
from app.store.base import WriteBatch

ORDERS = "orders"


@dataclass(frozen=True)
class WriteIntent:
    """Create-or-update payload for one order, not yet applied"""
    kind: str  # "create" or "update"
    data: Dict[str, Any]
    order_id: Optional[str] = None
    # Version the decision was based on; the write fails if it moved
    expected_version: Optional[int] = None
    # Order an update was planned against
    base: Optional[Order] = None

    @property
    def is_create(self) -> bool:
        return self.kind == "create"

    def applied(self, order_id: str) -> Order:
        """The order as it reads once this write has been committed"""
        if self.is_create or self.base is None:
            return normalize_order({**self.data, "id": order_id, "version": 1})
        document = {
            **self.base.model_dump(),
            **self.data,
            "id": order_id,
            "version": self.base.version + 1,
        }
        return normalize_order(document)

    def stage(self, batch: WriteBatch) -> str:
        """Add this write to a batch and return the order id it targets"""
        if self.is_create:
            return batch.set(ORDERS, self.data)
        batch.update(ORDERS, self.order_id, self.data, self.expected_version)
        return self.order_id


@dataclass(frozen=True)
class BatchIntent:
    """All writes of one table transfer; applied as a single atomic batch"""
    target: WriteIntent
    closes: List[WriteIntent] = field(default_factory=list)

    @property
    def source_order_ids(self) -> List[str]:
        return [intent.order_id for intent in self.closes]

    def stage(self, batch: WriteBatch) -> str:
        target_id = self.target.stage(batch)
        for intent in self.closes:
            intent.stage(batch)
        return target_id
