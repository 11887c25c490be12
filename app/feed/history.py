"""Client-side time filtering for the order history view"""

import math
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from app.config import settings
from app.schemas.order import HistoryDay, HistoryResponse, Order

PERIOD_DAYS = {
    "today": 0,
    "week": 7,
    "month": 30,
}


def _zone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def period_range(
    period: str,
    now: Optional[datetime] = None,
    tz: Optional[str] = None,
) -> Tuple[datetime, datetime]:
    """Start of the local day minus the period's days, up to now"""
    if period not in PERIOD_DAYS:
        raise ValueError(f"Unknown period: {period}")

    zone = _zone(tz or settings.timezone)
    now = (now or datetime.now(timezone.utc)).astimezone(zone)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start = midnight - timedelta(days=PERIOD_DAYS[period])
    return start, now


def filter_by_period(
    orders: Iterable[Order],
    period: str = "today",
    now: Optional[datetime] = None,
    tz: Optional[str] = None,
) -> List[Order]:
    start, end = period_range(period, now, tz)
    return [order for order in orders if start <= order.timestamp <= end]


def summarize_history(orders: Iterable[Order], tz: Optional[str] = None) -> HistoryResponse:
    """
    Revenue, average ticket and per-day groups for a list of orders.

    Days are local calendar days in the restaurant timezone and keep the
    order of the input, so a newest-first list gives newest days first.
    """
    zone = _zone(tz or settings.timezone)
    orders = list(orders)

    days = {}
    for order in orders:
        day = order.timestamp.astimezone(zone).date()
        group = days.setdefault(day, HistoryDay(day=day, count=0, revenue=0, order_ids=[]))
        group.count += 1
        group.revenue += order.total_price
        group.order_ids.append(order.id)

    for group in days.values():
        group.revenue = round(group.revenue, 2)

    revenue = round(sum(order.total_price for order in orders), 2)
    average = math.floor(revenue / len(orders) + 0.5) if orders else 0

    return HistoryResponse(
        items=orders,
        total=len(orders),
        revenue=revenue,
        average=average,
        days=list(days.values()),
    )
