"""Document store interface used by the ordering engine"""

import enum
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence


class StoreError(Exception):
    """A read or write was rejected by the backing store"""


class StoreConflictError(StoreError):
    """A conditional write found the document at a different version"""


class DocumentNotFoundError(StoreError):
    """A write targeted a document that does not exist"""


class ChangeType(str, enum.Enum):
    """Per-document classification of a feed delivery"""
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


@dataclass(frozen=True)
class DocumentChange:
    type: ChangeType
    doc_id: str
    document: Dict[str, Any]


@dataclass(frozen=True)
class Snapshot:
    """Full current matching set plus what changed since the last delivery"""
    documents: List[Dict[str, Any]]
    changes: List[DocumentChange]

    def __len__(self) -> int:
        return len(self.documents)


@dataclass(frozen=True)
class Filter:
    """Query predicate: equality or range on one field"""
    field: str
    op: str
    value: Any


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = True


@dataclass
class WriteOp:
    kind: str  # "set" or "update"
    collection: str
    doc_id: str
    data: Dict[str, Any]
    expected_version: Optional[int] = None


@dataclass
class WriteBatch:
    """Writes staged for one all-or-nothing commit"""
    ops: List[WriteOp] = field(default_factory=list)

    def set(self, collection: str, data: Dict[str, Any]) -> str:
        """Stage creation of a new document and return its id"""
        doc_id = str(data.get("id") or uuid.uuid4())
        payload = {k: v for k, v in data.items() if k != "id"}
        self.ops.append(WriteOp("set", collection, doc_id, payload))
        return doc_id

    def update(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> None:
        """Stage a partial update, optionally conditional on a version"""
        self.ops.append(WriteOp("update", collection, doc_id, dict(data), expected_version))

    def __len__(self) -> int:
        return len(self.ops)


SnapshotListener = Callable[[Snapshot], None]
ErrorListener = Callable[[Exception], None]


class Subscription(ABC):
    """Handle returned by DocumentStore.subscribe"""

    @abstractmethod
    def unsubscribe(self) -> None:
        pass


class DocumentStore(ABC):
    """
    Abstract document store.

    Documents are plain dicts carrying their ``id``. Every write bumps the
    document ``version``; updates given an ``expected_version`` are applied
    only if the stored version still matches.
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Point read by id"""
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Filtered query with at most one sort key"""
        pass

    @abstractmethod
    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Create a document and return its id"""
        pass

    @abstractmethod
    async def update(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> None:
        """Partial update by id"""
        pass

    def batch(self) -> WriteBatch:
        return WriteBatch()

    @abstractmethod
    async def commit(self, batch: WriteBatch) -> List[str]:
        """Apply every staged write atomically; returns the written ids"""
        pass

    @abstractmethod
    async def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotListener,
        on_error: Optional[ErrorListener] = None,
        order_by: Optional[OrderBy] = OrderBy("timestamp"),
    ) -> Subscription:
        """Deliver the current set now and again after every committed change"""
        pass
