"""Waiter call schemas"""

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

WaiterCallStatus = Literal["pending", "acknowledged", "resolved"]

WAITER_CALL_STATUSES = ("pending", "acknowledged", "resolved")


class WaiterCall(BaseModel):
    """Normalized waiter call value"""
    id: str
    table_id: str
    status: WaiterCallStatus = "pending"
    message: Optional[str] = None
    timestamp: datetime


class WaiterCallCreate(BaseModel):
    message: Optional[str] = Field(None, max_length=500)


class WaiterCallStatusUpdate(BaseModel):
    status: WaiterCallStatus


class WaiterCallListResponse(BaseModel):
    items: List[WaiterCall]
    total: int
