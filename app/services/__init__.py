"""Application services"""

from app.services.order_service import OrderService
from app.services.waiter_call_service import WaiterCallService

__all__ = [
    "OrderService",
    "WaiterCallService",
]
