"""Waiter call creation and status updates"""

import math
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from app.config import settings
from app.errors import CooldownError, InvalidRequestError, NotFoundError
from app.reconciliation.normalizer import normalize_waiter_call
from app.schemas.waiter_call import WAITER_CALL_STATUSES, WaiterCall
from app.store.base import DocumentNotFoundError, DocumentStore, Filter, OrderBy

logger = structlog.get_logger()

WAITER_CALLS = "waiter_calls"


class WaiterCallService:
    def __init__(self, store: DocumentStore, cooldown_seconds: Optional[int] = None):
        self.store = store
        self.cooldown_seconds = (
            settings.waiter_call_cooldown_seconds if cooldown_seconds is None else cooldown_seconds
        )

    async def get_call(self, call_id: str) -> WaiterCall:
        document = await self.store.get(WAITER_CALLS, call_id)
        if document is None:
            raise NotFoundError("Waiter call not found")
        return normalize_waiter_call(document)

    async def create_call(
        self,
        table_id: str,
        message: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> WaiterCall:
        """Record a waiter call; one per table per cooldown window"""
        table_id = table_id.strip() if isinstance(table_id, str) else ""
        if not table_id:
            raise InvalidRequestError("Table id is required")

        now = now or datetime.now(timezone.utc)

        if self.cooldown_seconds > 0:
            recent = await self.store.query(
                WAITER_CALLS,
                filters=[
                    Filter("table_id", "==", table_id),
                    Filter("timestamp", ">", now - timedelta(seconds=self.cooldown_seconds)),
                ],
                order_by=OrderBy("timestamp", descending=True),
                limit=1,
            )
            if recent:
                last = normalize_waiter_call(recent[0])
                elapsed = (now - last.timestamp).total_seconds()
                remaining = max(1, math.ceil(self.cooldown_seconds - elapsed))
                raise CooldownError(f"Try again in {remaining} seconds", retry_after=remaining)

        call_id = await self.store.add(WAITER_CALLS, {
            "table_id": table_id,
            "message": (message or "").strip() or None,
            "status": "pending",
            "timestamp": now,
        })
        logger.info("Waiter call created", table_id=table_id, call_id=call_id)
        return await self.get_call(call_id)

    async def update_status(self, call_id: str, status: str) -> WaiterCall:
        if status not in WAITER_CALL_STATUSES:
            raise InvalidRequestError(f"Invalid status: {status}")
        try:
            await self.store.update(WAITER_CALLS, call_id, {"status": status})
        except DocumentNotFoundError:
            raise NotFoundError("Waiter call not found")
        logger.info("Waiter call status updated", call_id=call_id, status=status)
        return await self.get_call(call_id)
