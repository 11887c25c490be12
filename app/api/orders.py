"""Order management API endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.auth import get_current_active_user, require_role
from app.api.deps import get_order_service, get_orders_feed
from app.feed.controller import OrderFeedController
from app.models.user import User, UserRole
from app.schemas.order import (
    HistoryPeriod,
    HistoryResponse,
    Order,
    OrderListResponse,
    OrderStatusUpdate,
    PaymentStatus,
    PaymentStatusUpdate,
    TransferRequest,
    TransferResponse,
)
from app.services.order_service import OrderService

router = APIRouter()


@router.get("", response_model=OrderListResponse)
async def list_open_orders(
    feed: OrderFeedController = Depends(get_orders_feed),
    current_user: User = Depends(get_current_active_user),
):
    """Admin queue: unpaid orders as last delivered by the live feed"""
    queue = feed.queue
    return OrderListResponse(items=queue, total=len(queue))


@router.get("/history", response_model=HistoryResponse)
async def list_order_history(
    period: HistoryPeriod = Query("today"),
    payment_status: Optional[PaymentStatus] = None,
    feed: OrderFeedController = Depends(get_orders_feed),
    current_user: User = Depends(get_current_active_user),
):
    """Orders from the live feed within a time period, with revenue per day"""
    return feed.history_summary(period=period, payment_status=payment_status)


@router.post("/transfer", response_model=TransferResponse)
async def transfer_table(
    request: TransferRequest,
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
):
    """Move every open tab of the source table onto the target table"""
    return await service.transfer(request.source_table_id, request.target_table_id)


@router.get("/{order_id}", response_model=Order)
async def get_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_active_user),
):
    """Get order details"""
    return await service.get_order(order_id)


@router.put("/{order_id}/status", response_model=Order)
async def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(get_current_active_user),
):
    """Move an order through new / preparing / ready / delivered"""
    return await service.update_status(order_id, update.status)


@router.put("/{order_id}/payment", response_model=Order)
async def update_payment_status(
    order_id: str,
    update: PaymentStatusUpdate,
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
):
    """Mark an order paid, or reopen it"""
    return await service.set_payment_status(order_id, update.payment_status)
