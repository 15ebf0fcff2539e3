"""
Document store with optimistic multi-document transactions.

Profiles, queue entries and matches are stored as JSON documents grouped
into collections. Every document carries a version that changes on each
write. A transaction records the version of every document it reads and
buffers its writes; commit applies all writes at once, and only if none
of the read versions changed in the meantime. Otherwise the commit fails
with TransactionConflictError and nothing is written.

Backends implement get(), query() and _apply(). The in-memory backend in
this module is used for tests and local development; the Supabase backend
lives in shared.supabase_store.
"""

import asyncio
import logging
import threading
from copy import deepcopy
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence, TypeVar, runtime_checkable

from pydantic import BaseModel, Field

from .exceptions import NotFoundError, TransactionConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DocumentKey = tuple[str, str]


class FilterOp(str, Enum):
    """Comparison operators supported by queries."""

    EQ = "eq"
    NEQ = "neq"


class QueryFilter(BaseModel):
    """A single field comparison applied to document data."""

    field: str
    op: FilterOp = FilterOp.EQ
    value: Any

    model_config = {"frozen": True}

    def matches(self, data: dict[str, Any]) -> bool:
        actual = data.get(self.field)
        if self.op == FilterOp.EQ:
            return actual == self.value
        # Documents without the field never match an inequality
        return actual is not None and actual != self.value


class DocumentSnapshot(BaseModel):
    """A document as read at one point in time."""

    collection: str
    id: str
    data: Optional[dict[str, Any]] = None
    version: int = Field(default=0, description="0 when the document does not exist")

    @property
    def exists(self) -> bool:
        return self.data is not None


class WriteOp(str, Enum):
    SET = "set"        # create or replace
    UPDATE = "update"  # merge fields into an existing document
    DELETE = "delete"  # remove if present


class DocumentWrite(BaseModel):
    """A buffered write, applied when the transaction commits."""

    op: WriteOp
    collection: str
    id: str
    data: Optional[dict[str, Any]] = None


class DocumentNotFoundError(NotFoundError):
    """Raised when a transaction updates a document that does not exist."""

    def __init__(self, collection: str, doc_id: str):
        super().__init__(
            f"Document not found: {collection}/{doc_id}",
            code="DOCUMENT_NOT_FOUND",
            details={"collection": collection, "id": doc_id},
        )


@runtime_checkable
class IDocumentStore(Protocol):
    """
    Interface for document storage.

    Repositories depend on this protocol, not on a concrete backend.
    """

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        """Read a single document. Missing documents have exists == False."""
        ...

    async def query(
        self,
        collection: str,
        filters: Sequence[QueryFilter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentSnapshot]:
        """
        Query documents in a collection.

        Results are ordered by the order_by field, ties broken by document id.
        """
        ...

    def transaction(self) -> "Transaction":
        """Start a new optimistic transaction."""
        ...

    async def run_transaction(
        self,
        fn: Callable[["Transaction"], Awaitable[T]],
        max_attempts: int = 3,
    ) -> T:
        """Run fn in a transaction, retrying on version conflicts."""
        ...


class Transaction:
    """
    Optimistic read-then-write transaction.

    All reads must happen before the first write. Writes are buffered
    and only become visible on commit(). Usable as an async context
    manager: leaving the block normally commits, leaving it with an
    exception discards the buffered writes.
    """

    def __init__(self, store: "BaseDocumentStore"):
        self._store = store
        self._reads: dict[DocumentKey, int] = {}
        self._writes: list[DocumentWrite] = []
        self._committed = False

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        if self._writes:
            raise RuntimeError("Transaction reads must happen before writes")

        snapshot = await self._store.get(collection, doc_id)
        key = (collection, doc_id)
        previous = self._reads.get(key)
        if previous is not None and previous != snapshot.version:
            # Re-read inside the same transaction saw a different version
            raise TransactionConflictError(details={"collection": collection, "id": doc_id})
        self._reads[key] = snapshot.version
        return snapshot

    def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        self._writes.append(
            DocumentWrite(op=WriteOp.SET, collection=collection, id=doc_id, data=data)
        )

    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        self._writes.append(
            DocumentWrite(op=WriteOp.UPDATE, collection=collection, id=doc_id, data=fields)
        )

    def delete(self, collection: str, doc_id: str) -> None:
        self._writes.append(
            DocumentWrite(op=WriteOp.DELETE, collection=collection, id=doc_id)
        )

    async def commit(self) -> None:
        if self._committed:
            raise RuntimeError("Transaction already committed")
        self._committed = True

        if not self._writes:
            return

        await self._store._apply(dict(self._reads), list(self._writes))

    async def __aenter__(self) -> "Transaction":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            await self.commit()


class BaseDocumentStore:
    """
    Shared transaction handling for document store backends.

    Subclasses implement get(), query() and _apply().
    """

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        raise NotImplementedError

    async def query(
        self,
        collection: str,
        filters: Sequence[QueryFilter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentSnapshot]:
        raise NotImplementedError

    async def _apply(self, reads: dict[DocumentKey, int], writes: list[DocumentWrite]) -> None:
        """
        Atomically verify read versions and apply writes.

        Raises:
            TransactionConflictError: If any read version is outdated
            DocumentNotFoundError: If an update targets a missing document
        """
        raise NotImplementedError

    def transaction(self) -> Transaction:
        return Transaction(self)

    async def run_transaction(
        self,
        fn: Callable[[Transaction], Awaitable[T]],
        max_attempts: int = 3,
    ) -> T:
        """
        Run fn inside a transaction and commit it.

        On a version conflict the whole function is re-run against fresh
        reads, up to max_attempts times in total. Any other exception
        aborts the transaction without writing anything.

        Raises:
            TransactionConflictError: When every attempt conflicted
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        attempt = 0
        while True:
            attempt += 1
            tx = self.transaction()
            try:
                result = await fn(tx)
                await tx.commit()
                return result
            except TransactionConflictError as e:
                if attempt >= max_attempts:
                    logger.warning(f"Transaction gave up after {attempt} conflicting attempts")
                    raise TransactionConflictError(attempts=attempt, details=e.details) from e
                logger.debug(f"Transaction conflict on attempt {attempt}/{max_attempts}, retrying")


def _sort_key(order_by: str):
    def key(snapshot: DocumentSnapshot):
        value = (snapshot.data or {}).get(order_by)
        return (value is None, "" if value is None else value, snapshot.id)

    return key


class InMemoryDocumentStore(BaseDocumentStore):
    """
    Process-local document store.

    Used for tests and local development (STORAGE_BACKEND=memory).
    Reads yield to the event loop so concurrent requests interleave
    between their reads and their commit, like they do against a
    remote database.
    """

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, tuple[int, dict[str, Any]]]] = {}
        self._sequence = 0
        self._lock = threading.Lock()

    def _version_of(self, collection: str, doc_id: str) -> int:
        entry = self._documents.get(collection, {}).get(doc_id)
        return entry[0] if entry else 0

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        await asyncio.sleep(0)
        with self._lock:
            entry = self._documents.get(collection, {}).get(doc_id)
            if entry is None:
                return DocumentSnapshot(collection=collection, id=doc_id)
            version, data = entry
            return DocumentSnapshot(
                collection=collection, id=doc_id, data=deepcopy(data), version=version
            )

    async def query(
        self,
        collection: str,
        filters: Sequence[QueryFilter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentSnapshot]:
        await asyncio.sleep(0)
        with self._lock:
            snapshots = [
                DocumentSnapshot(
                    collection=collection, id=doc_id, data=deepcopy(data), version=version
                )
                for doc_id, (version, data) in self._documents.get(collection, {}).items()
                if all(f.matches(data) for f in filters)
            ]

        if order_by:
            snapshots.sort(key=_sort_key(order_by), reverse=descending)
        else:
            snapshots.sort(key=lambda s: s.id, reverse=descending)

        if limit is not None:
            snapshots = snapshots[:limit]
        return snapshots

    async def _apply(self, reads: dict[DocumentKey, int], writes: list[DocumentWrite]) -> None:
        with self._lock:
            for (collection, doc_id), version in reads.items():
                if self._version_of(collection, doc_id) != version:
                    raise TransactionConflictError(
                        details={"collection": collection, "id": doc_id}
                    )

            # Stage every write first so a failing update leaves nothing applied
            staged: dict[DocumentKey, Optional[dict[str, Any]]] = {}
            for write in writes:
                key = (write.collection, write.id)
                if key in staged:
                    current = staged[key]
                else:
                    entry = self._documents.get(write.collection, {}).get(write.id)
                    current = deepcopy(entry[1]) if entry else None

                if write.op == WriteOp.DELETE:
                    staged[key] = None
                elif write.op == WriteOp.SET:
                    staged[key] = deepcopy(write.data or {})
                else:
                    if current is None:
                        raise DocumentNotFoundError(write.collection, write.id)
                    staged[key] = {**current, **deepcopy(write.data or {})}

            self._sequence += 1
            for (collection, doc_id), data in staged.items():
                documents = self._documents.setdefault(collection, {})
                if data is None:
                    documents.pop(doc_id, None)
                else:
                    documents[doc_id] = (self._sequence, data)
