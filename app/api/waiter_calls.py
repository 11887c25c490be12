"""Waiter call API endpoints for staff"""

from fastapi import APIRouter, Depends

from app.api.auth import get_current_active_user
from app.api.deps import get_calls_feed, get_waiter_call_service
from app.feed.controller import WaiterCallFeedController
from app.models.user import User
from app.schemas.waiter_call import WaiterCall, WaiterCallListResponse, WaiterCallStatusUpdate
from app.services.waiter_call_service import WaiterCallService

router = APIRouter()


@router.get("", response_model=WaiterCallListResponse)
async def list_waiter_calls(
    pending_only: bool = True,
    feed: WaiterCallFeedController = Depends(get_calls_feed),
    current_user: User = Depends(get_current_active_user),
):
    """Waiter calls from the live feed, newest first"""
    calls = feed.pending if pending_only else feed.calls
    return WaiterCallListResponse(items=calls, total=len(calls))


@router.put("/{call_id}", response_model=WaiterCall)
async def update_waiter_call(
    call_id: str,
    update: WaiterCallStatusUpdate,
    service: WaiterCallService = Depends(get_waiter_call_service),
    current_user: User = Depends(get_current_active_user),
):
    """Acknowledge or resolve a waiter call"""
    return await service.update_status(call_id, update.status)
