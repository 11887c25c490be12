"""Document store boundary"""

from app.store.base import (
    ChangeType,
    DocumentChange,
    DocumentNotFoundError,
    DocumentStore,
    Filter,
    OrderBy,
    Snapshot,
    StoreConflictError,
    StoreError,
    Subscription,
    WriteBatch,
)
from app.store.sql import SQLDocumentStore

__all__ = [
    "ChangeType",
    "DocumentChange",
    "DocumentNotFoundError",
    "DocumentStore",
    "Filter",
    "OrderBy",
    "Snapshot",
    "StoreConflictError",
    "StoreError",
    "Subscription",
    "WriteBatch",
    "SQLDocumentStore",
]
