"""Live feed controllers for the admin queue and waiter call alerts"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Set, Tuple

import structlog

from app.feed.alerts import AlertSink
from app.feed.history import filter_by_period, summarize_history
from app.reconciliation.normalizer import normalize_order, normalize_waiter_call
from app.schemas.order import HistoryResponse, Order
from app.schemas.waiter_call import WaiterCall
from app.store.base import ChangeType, DocumentStore, OrderBy, Snapshot, Subscription

logger = structlog.get_logger()

FEED_ORDER = OrderBy("timestamp", descending=True)

QueueListener = Callable[[List[Order]], None]
CallListener = Callable[[List[WaiterCall]], None]


@dataclass(frozen=True)
class OrderFeedState:
    """Size of the last delivery; None until the first one arrives"""
    previous_count: Optional[int] = None

    def advance(self, count: int) -> Tuple["OrderFeedState", bool]:
        """Fold one delivery in; the flag says whether to alert"""
        grew = self.previous_count is not None and count > self.previous_count
        return OrderFeedState(previous_count=count), grew


class OrderFeedController:
    """
    Keeps the admin order queue in sync with the orders change feed.

    Every delivery is re-normalized in full. A delivery that grows the
    document count raises one "new order" alert, however many documents
    it added. The first delivery after (re)subscribing never alerts.
    """

    def __init__(self, store: DocumentStore, alerts: AlertSink):
        self.store = store
        self.alerts = alerts
        self.state = OrderFeedState()
        self.orders: List[Order] = []
        self._subscription: Optional[Subscription] = None
        self._listeners: List[QueueListener] = []

    @property
    def queue(self) -> List[Order]:
        """Orders still awaiting payment, newest first"""
        return [order for order in self.orders if order.payment_status != "paid"]

    def history(
        self,
        period: str = "today",
        payment_status: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[Order]:
        orders = self.orders
        if payment_status:
            orders = [order for order in orders if order.payment_status == payment_status]
        return filter_by_period(orders, period, now)

    def history_summary(
        self,
        period: str = "today",
        payment_status: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> HistoryResponse:
        return summarize_history(self.history(period, payment_status, now))

    def add_listener(self, listener: QueueListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: QueueListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def start(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
        self.state = OrderFeedState()
        self._subscription = await self.store.subscribe(
            "orders", self.on_snapshot, self.on_error, order_by=FEED_ORDER
        )
        logger.info("Order feed subscribed")

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def on_snapshot(self, snapshot: Snapshot) -> None:
        orders = [normalize_order(doc) for doc in snapshot.documents]
        self.state, grew = self.state.advance(len(orders))
        self.orders = orders

        if grew:
            self.alerts.new_order()

        queue = self.queue
        for listener in list(self._listeners):
            listener(queue)

    def on_error(self, exc: Exception) -> None:
        # Keep serving the last good snapshot
        logger.error("Order feed delivery failed", error=str(exc), orders=len(self.orders))


class WaiterCallFeedController:
    """
    Alerts on waiter calls added to the feed.

    Call ids already seen are remembered across re-subscriptions, so a
    fresh subscription's initial bulk delivery does not alert twice.
    """

    def __init__(self, store: DocumentStore, alerts: AlertSink):
        self.store = store
        self.alerts = alerts
        self.calls: List[WaiterCall] = []
        self.seen_ids: Set[str] = set()
        self._subscription: Optional[Subscription] = None
        self._listeners: List[CallListener] = []

    @property
    def pending(self) -> List[WaiterCall]:
        return [call for call in self.calls if call.status == "pending"]

    def add_listener(self, listener: CallListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: CallListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def start(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
        self._subscription = await self.store.subscribe(
            "waiter_calls", self.on_snapshot, self.on_error, order_by=FEED_ORDER
        )
        logger.info("Waiter call feed subscribed")

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def on_snapshot(self, snapshot: Snapshot) -> None:
        self.calls = [normalize_waiter_call(doc) for doc in snapshot.documents]

        for change in snapshot.changes:
            if change.type != ChangeType.ADDED or change.doc_id in self.seen_ids:
                continue
            self.seen_ids.add(change.doc_id)
            call = normalize_waiter_call(change.document)
            if call.status == "pending":
                self.alerts.waiter_call(call)

        pending = self.pending
        for listener in list(self._listeners):
            listener(pending)

    def on_error(self, exc: Exception) -> None:
        logger.error("Waiter call feed delivery failed", error=str(exc), calls=len(self.calls))
