"""Database models"""

from app.models.order import Order
from app.models.waiter_call import WaiterCall
from app.models.user import User, UserRole

__all__ = [
    "Order",
    "WaiterCall",
    "User",
    "UserRole",
]
