"""Live order feed"""

from app.feed.alerts import AlertSink, LoggingAlertSink
from app.feed.controller import OrderFeedController, OrderFeedState, WaiterCallFeedController
from app.feed.history import filter_by_period, period_range
from app.feed.hub import LiveHub

__all__ = [
    "AlertSink",
    "LoggingAlertSink",
    "OrderFeedController",
    "OrderFeedState",
    "WaiterCallFeedController",
    "filter_by_period",
    "period_range",
    "LiveHub",
]
