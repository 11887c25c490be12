"""Order schemas"""

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

OrderStatus = Literal["new", "preparing", "ready", "delivered"]
PaymentStatus = Literal["pending", "paid"]
HistoryPeriod = Literal["today", "week", "month"]

ORDER_STATUSES = ("new", "preparing", "ready", "delivered")
PAYMENT_STATUSES = ("pending", "paid")


class LineItem(BaseModel):
    """One menu item on an order; ids are unique within an order"""
    id: str
    name: str
    price: float = 0
    quantity: int = 0

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class Order(BaseModel):
    """Normalized order value"""
    id: str
    table_id: str
    session_id: str = ""
    items: List[LineItem] = []
    status: OrderStatus = "new"
    payment_status: PaymentStatus = "pending"
    total_price: float = 0
    order_note: Optional[str] = None
    timestamp: datetime
    version: int = 0

    @property
    def is_open(self) -> bool:
        return self.payment_status == "pending"


class CheckoutRequest(BaseModel):
    """Cart submitted from a table"""
    # Raw cart entries; normalized by the engine
    items: List[Dict[str, Any]]
    note: Optional[str] = None


class CheckoutResponse(BaseModel):
    """Result of a checkout"""
    order_id: str
    merged: bool
    order: Order


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus


class TransferRequest(BaseModel):
    """Move every open tab of one table onto another"""
    source_table_id: str = Field(..., min_length=1)
    target_table_id: str = Field(..., min_length=1)


class TransferResponse(BaseModel):
    target_order_id: str
    created: bool
    closed_order_ids: List[str]


class OrderListResponse(BaseModel):
    """Orders as currently seen by the live feed"""
    items: List[Order]
    total: int


class HistoryDay(BaseModel):
    """Orders of one local calendar day"""
    day: date
    count: int
    revenue: float
    order_ids: List[str]


class HistoryResponse(OrderListResponse):
    """History period with revenue totals and a per-day breakdown"""
    revenue: float
    # Whole currency units, half rounded up
    average: int
    days: List[HistoryDay]


class TableResponse(BaseModel):
    id: str
    label: str
