"""SQLAlchemy-backed document store with an in-process change feed"""

import asyncio
import operator
from typing import Any, Dict, List, Optional, Sequence, Set, Type

from sqlalchemy import inspect, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import structlog

from app.models.order import Order
from app.models.waiter_call import WaiterCall
from app.store.base import (
    ChangeType,
    DocumentChange,
    DocumentNotFoundError,
    DocumentStore,
    ErrorListener,
    Filter,
    OrderBy,
    Snapshot,
    SnapshotListener,
    StoreConflictError,
    StoreError,
    Subscription,
    WriteBatch,
    WriteOp,
)

logger = structlog.get_logger()

COLLECTIONS = {
    "orders": Order,
    "waiter_calls": WaiterCall,
}

_OPERATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


class _SQLSubscription(Subscription):
    """One listener on one collection; remembers what it last delivered"""

    def __init__(
        self,
        store: "SQLDocumentStore",
        collection: str,
        on_snapshot: SnapshotListener,
        on_error: Optional[ErrorListener],
        order_by: Optional[OrderBy],
    ):
        self.store = store
        self.collection = collection
        self.on_snapshot = on_snapshot
        self.on_error = on_error
        self.order_by = order_by
        self.active = True
        self._last: Dict[str, Dict[str, Any]] = {}
        self._delivered = False
        self._lock = asyncio.Lock()

    def unsubscribe(self) -> None:
        self.active = False
        self.store._subscriptions.discard(self)

    async def deliver(self) -> None:
        async with self._lock:
            if not self.active:
                return
            try:
                documents = await self.store.query(self.collection, order_by=self.order_by)
            except StoreError as exc:
                logger.warning(
                    "Change feed query failed",
                    collection=self.collection,
                    error=str(exc),
                )
                if self.on_error:
                    self.on_error(exc)
                return

            current = {doc["id"]: doc for doc in documents}
            changes = []
            for doc in documents:
                previous = self._last.get(doc["id"])
                if previous is None:
                    changes.append(DocumentChange(ChangeType.ADDED, doc["id"], doc))
                elif previous != doc:
                    changes.append(DocumentChange(ChangeType.MODIFIED, doc["id"], doc))
            for doc_id, doc in self._last.items():
                if doc_id not in current:
                    changes.append(DocumentChange(ChangeType.REMOVED, doc_id, doc))

            first_delivery = not self._delivered
            self._last = current
            self._delivered = True

            if not changes and not first_delivery:
                return

            try:
                self.on_snapshot(Snapshot(documents=documents, changes=changes))
            except Exception:
                logger.exception("Snapshot listener failed", collection=self.collection)


class SQLDocumentStore(DocumentStore):
    """
    Document store over SQLAlchemy models.

    Writes run in their own transaction; a committed write triggers a
    fresh delivery to every subscription on the touched collections.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory
        self._subscriptions: Set[_SQLSubscription] = set()

    def _model(self, collection: str) -> Type:
        model = COLLECTIONS.get(collection)
        if model is None:
            raise ValueError(f"Unknown collection: {collection}")
        return model

    @staticmethod
    def _to_document(row) -> Dict[str, Any]:
        return {attr.key: getattr(row, attr.key) for attr in inspect(type(row)).column_attrs}

    @staticmethod
    def _check_fields(model: Type, data: Dict[str, Any]) -> None:
        columns = {attr.key for attr in inspect(model).column_attrs}
        unknown = set(data) - columns
        if unknown:
            raise ValueError(f"Unknown fields for {model.__tablename__}: {sorted(unknown)}")
        if "version" in data:
            raise ValueError("version is managed by the store")

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        model = self._model(collection)
        try:
            async with self._session_factory() as session:
                row = await session.get(model, doc_id)
                return self._to_document(row) if row is not None else None
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        model = self._model(collection)
        stmt = select(model)
        for predicate in filters:
            compare = _OPERATORS.get(predicate.op)
            if compare is None:
                raise ValueError(f"Unsupported operator: {predicate.op}")
            stmt = stmt.where(compare(getattr(model, predicate.field), predicate.value))
        if order_by is not None:
            column = getattr(model, order_by.field)
            stmt = stmt.order_by(column.desc() if order_by.descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [self._to_document(row) for row in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        batch = self.batch()
        doc_id = batch.set(collection, data)
        await self.commit(batch)
        return doc_id

    async def update(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> None:
        batch = self.batch()
        batch.update(collection, doc_id, data, expected_version)
        await self.commit(batch)

    async def _apply(self, session: AsyncSession, op: WriteOp) -> None:
        """Apply one staged write inside the batch transaction"""
        model = self._model(op.collection)
        self._check_fields(model, op.data)

        if op.kind == "set":
            session.add(model(id=op.doc_id, version=1, **op.data))
            await session.flush()
            return

        stmt = update(model).where(model.id == op.doc_id)
        if op.expected_version is not None:
            stmt = stmt.where(model.version == op.expected_version)
        stmt = stmt.values(version=model.version + 1, **op.data)
        result = await session.execute(stmt)

        if result.rowcount == 0:
            exists = await session.get(model, op.doc_id)
            if exists is None:
                raise DocumentNotFoundError(f"{op.collection}/{op.doc_id} does not exist")
            raise StoreConflictError(
                f"{op.collection}/{op.doc_id} changed since version {op.expected_version}"
            )

    async def commit(self, batch: WriteBatch) -> List[str]:
        if not batch.ops:
            return []

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    for op in batch.ops:
                        await self._apply(session, op)
        except StoreError:
            logger.warning("Batch rejected", writes=len(batch))
            raise
        except SQLAlchemyError as exc:
            logger.warning("Batch failed", writes=len(batch), error=str(exc))
            raise StoreError(str(exc)) from exc

        await self._notify({op.collection for op in batch.ops})
        return [op.doc_id for op in batch.ops]

    async def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotListener,
        on_error: Optional[ErrorListener] = None,
        order_by: Optional[OrderBy] = OrderBy("timestamp"),
    ) -> Subscription:
        self._model(collection)
        subscription = _SQLSubscription(self, collection, on_snapshot, on_error, order_by)
        self._subscriptions.add(subscription)
        await subscription.deliver()
        return subscription

    async def _notify(self, collections: Set[str]) -> None:
        for subscription in list(self._subscriptions):
            if subscription.collection in collections:
                await subscription.deliver()
