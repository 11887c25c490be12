"""Patron-facing table endpoints: checkout and waiter calls"""

from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_order_service, get_waiter_call_service
from app.config import settings
from app.schemas.order import CheckoutRequest, CheckoutResponse, TableResponse
from app.schemas.waiter_call import WaiterCall, WaiterCallCreate
from app.services.order_service import OrderService
from app.services.waiter_call_service import WaiterCallService

router = APIRouter()


@router.get("", response_model=List[TableResponse])
async def list_tables():
    """Table roster"""
    return [TableResponse(id=table_id, label=label) for table_id, label in settings.tables.items()]


@router.post("/{table_id}/checkout", response_model=CheckoutResponse, status_code=201)
async def checkout(
    table_id: str,
    request: CheckoutRequest,
    service: OrderService = Depends(get_order_service),
):
    """Submit a cart; merges into the table's open tab when there is one"""
    order, merged = await service.checkout(table_id, request.items, request.note)
    return CheckoutResponse(order_id=order.id, merged=merged, order=order)


@router.post("/{table_id}/waiter-calls", response_model=WaiterCall, status_code=201)
async def call_waiter(
    table_id: str,
    request: WaiterCallCreate,
    service: WaiterCallService = Depends(get_waiter_call_service),
):
    """Ask for a waiter at this table"""
    return await service.create_call(table_id, request.message)
