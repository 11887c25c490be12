"""Long-lived engine objects shared by the API for one process"""

from dataclasses import dataclass
from typing import Optional

import structlog

from app.feed.alerts import AlertSink
from app.feed.controller import OrderFeedController, WaiterCallFeedController
from app.feed.hub import LiveHub
from app.services.order_service import OrderService
from app.services.waiter_call_service import WaiterCallService
from app.store.base import DocumentStore

logger = structlog.get_logger()


@dataclass
class Runtime:
    store: DocumentStore
    hub: LiveHub
    orders_feed: OrderFeedController
    calls_feed: WaiterCallFeedController
    orders: OrderService
    waiter_calls: WaiterCallService

    @classmethod
    def build(cls, store: DocumentStore, alerts: Optional[AlertSink] = None) -> "Runtime":
        """Wire feeds, services and the live hub around a store"""
        hub = LiveHub()
        alerts = alerts or hub

        orders_feed = OrderFeedController(store, alerts)
        orders_feed.add_listener(hub.publish_queue)
        calls_feed = WaiterCallFeedController(store, alerts)
        calls_feed.add_listener(hub.publish_waiter_calls)

        return cls(
            store=store,
            hub=hub,
            orders_feed=orders_feed,
            calls_feed=calls_feed,
            orders=OrderService(store),
            waiter_calls=WaiterCallService(store),
        )

    async def start(self) -> None:
        await self.orders_feed.start()
        await self.calls_feed.start()
        logger.info("Live feeds started")

    def stop(self) -> None:
        self.orders_feed.stop()
        self.calls_feed.stop()
        logger.info("Live feeds stopped")
