"""Fan-out of queue updates and alerts to connected staff screens"""

import asyncio
from typing import Any, Dict, List, Set

import structlog

from app.feed.alerts import AlertSink
from app.schemas.order import Order
from app.schemas.waiter_call import WaiterCall

logger = structlog.get_logger()


class LiveHub(AlertSink):
    """
    One bounded queue per connected client.

    Publishing never blocks the feed callback: a client whose queue is full
    misses the event and is expected to resync from the next queue event.
    """

    def __init__(self, max_pending: int = 100):
        self.max_pending = max_pending
        self._clients: Set[asyncio.Queue] = set()

    @property
    def client_count(self) -> int:
        return len(self._clients)

    def connect(self) -> asyncio.Queue:
        client: asyncio.Queue = asyncio.Queue(maxsize=self.max_pending)
        self._clients.add(client)
        logger.info("Live client connected", clients=len(self._clients))
        return client

    def disconnect(self, client: asyncio.Queue) -> None:
        self._clients.discard(client)
        logger.info("Live client disconnected", clients=len(self._clients))

    def broadcast(self, event: Dict[str, Any]) -> None:
        for client in list(self._clients):
            try:
                client.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning("Live client lagging, event dropped", event_type=event.get("type"))

    def publish_queue(self, orders: List[Order]) -> None:
        self.broadcast({
            "type": "queue",
            "orders": [order.model_dump(mode="json") for order in orders],
        })

    def publish_waiter_calls(self, calls: List[WaiterCall]) -> None:
        self.broadcast({
            "type": "waiter_calls",
            "calls": [call.model_dump(mode="json") for call in calls],
        })

    def new_order(self) -> None:
        logger.info("New order arrived", clients=len(self._clients))
        self.broadcast({"type": "alert", "kind": "new_order"})

    def waiter_call(self, call: WaiterCall) -> None:
        logger.info("Waiter call pending", table_id=call.table_id or "unknown", call_id=call.id)
        self.broadcast({
            "type": "alert",
            "kind": "waiter_call",
            "table_id": call.table_id,
            "call_id": call.id,
            "message": call.message,
        })
