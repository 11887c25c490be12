"""Pydantic schemas for request/response validation"""

from app.schemas.auth import (
    Token,
    RefreshRequest,
    StaffCreate,
    StaffResponse,
)
from app.schemas.order import (
    LineItem,
    Order,
    CheckoutRequest,
    CheckoutResponse,
    OrderStatusUpdate,
    PaymentStatusUpdate,
    TransferRequest,
    TransferResponse,
    OrderListResponse,
    TableResponse,
)
from app.schemas.waiter_call import (
    WaiterCall,
    WaiterCallCreate,
    WaiterCallStatusUpdate,
    WaiterCallListResponse,
)

__all__ = [
    "Token",
    "RefreshRequest",
    "StaffCreate",
    "StaffResponse",
    "LineItem",
    "Order",
    "CheckoutRequest",
    "CheckoutResponse",
    "OrderStatusUpdate",
    "PaymentStatusUpdate",
    "TransferRequest",
    "TransferResponse",
    "OrderListResponse",
    "TableResponse",
    "WaiterCall",
    "WaiterCallCreate",
    "WaiterCallStatusUpdate",
    "WaiterCallListResponse",
]
