"""Applies reconciliation decisions and admin edits to the order store"""

from datetime import datetime, timezone
from typing import Any, Optional, Sequence, Tuple

import structlog

from app.config import settings
from app.errors import InvalidRequestError, NotFoundError
from app.reconciliation.checkout import resolve_checkout
from app.reconciliation.intents import ORDERS
from app.reconciliation.normalizer import normalize_order
from app.reconciliation.transfer import resolve_transfer
from app.schemas.order import ORDER_STATUSES, PAYMENT_STATUSES, Order, TransferResponse
from app.store.base import DocumentNotFoundError, DocumentStore, StoreConflictError

logger = structlog.get_logger()


class OrderService:
    """Checkout, transfer and admin updates against one document store"""

    def __init__(self, store: DocumentStore, max_attempts: Optional[int] = None):
        self.store = store
        self.max_attempts = max(1, max_attempts or settings.checkout_max_attempts)

    async def get_order(self, order_id: str) -> Order:
        document = await self.store.get(ORDERS, order_id)
        if document is None:
            raise NotFoundError("Order not found")
        return normalize_order(document)

    async def checkout(
        self,
        table_id: str,
        cart_items: Sequence[Any],
        note: Optional[str] = None,
    ) -> Tuple[Order, bool]:
        """
        Submit a cart for a table.

        Returns the resulting order and whether it was merged into an
        existing open tab. A merge is a conditional write; if the tab moved
        in between, the whole read-decide-write step is repeated.
        """
        attempt = 0
        while True:
            attempt += 1
            intent = await resolve_checkout(self.store, table_id, cart_items, note)
            batch = self.store.batch()
            order_id = intent.stage(batch)

            try:
                await self.store.commit(batch)
            except StoreConflictError:
                logger.warning(
                    "Open tab changed during checkout",
                    table_id=table_id,
                    order_id=order_id,
                    attempt=attempt,
                )
                if attempt >= self.max_attempts:
                    raise
                continue

            logger.info(
                "Checkout applied",
                table_id=table_id,
                order_id=order_id,
                merged=not intent.is_create,
            )
            # Built from the committed payload; a failed read-back must not
            # turn an applied checkout into an error the patron would retry
            return intent.applied(order_id), not intent.is_create

    async def transfer(self, source_table_id: str, target_table_id: str) -> TransferResponse:
        """Move every open tab at the source onto the target in one batch"""
        intent = await resolve_transfer(self.store, source_table_id, target_table_id)

        batch = self.store.batch()
        target_order_id = intent.stage(batch)
        await self.store.commit(batch)

        logger.info(
            "Transfer applied",
            source_table_id=source_table_id,
            target_table_id=target_table_id,
            target_order_id=target_order_id,
            closed=len(intent.closes),
        )
        return TransferResponse(
            target_order_id=target_order_id,
            created=intent.target.is_create,
            closed_order_ids=intent.source_order_ids,
        )

    async def _touch(self, order_id: str, data: dict) -> Order:
        data["timestamp"] = datetime.now(timezone.utc)
        try:
            await self.store.update(ORDERS, order_id, data)
        except DocumentNotFoundError:
            raise NotFoundError("Order not found")
        return await self.get_order(order_id)

    async def update_status(self, order_id: str, status: str) -> Order:
        if status not in ORDER_STATUSES:
            raise InvalidRequestError(f"Invalid status: {status}")
        order = await self._touch(order_id, {"status": status})
        logger.info("Order status updated", order_id=order_id, status=status)
        return order

    async def set_payment_status(self, order_id: str, payment_status: str) -> Order:
        if payment_status not in PAYMENT_STATUSES:
            raise InvalidRequestError(f"Invalid payment status: {payment_status}")
        order = await self._touch(order_id, {"payment_status": payment_status})
        logger.info("Order payment status updated", order_id=order_id, payment_status=payment_status)
        return order
