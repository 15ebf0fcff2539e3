"""
Document store backed by Supabase.

Documents live in a single `documents` table keyed by (collection, id)
with a jsonb `data` column and a bigint `version`. Reads and queries go
through PostgREST. Commits call the `commit_documents` SQL function
(migrations/001_documents.sql), which locks every touched key, checks the
read versions and applies all writes inside one database transaction.
"""

from typing import Any, Optional, Sequence

from postgrest.exceptions import APIError
from supabase import Client

from .documents import (
    BaseDocumentStore,
    DocumentKey,
    DocumentNotFoundError,
    DocumentSnapshot,
    DocumentWrite,
    FilterOp,
    QueryFilter,
)
from .exceptions import ExternalServiceError, TransactionConflictError

# SQLSTATE codes raised by commit_documents
SERIALIZATION_FAILURE = "40001"
NO_DATA_FOUND = "P0002"


def _as_text(value: Any) -> str:
    """Render a filter value the way Postgres renders `data->>field`."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if hasattr(value, "value"):  # enums
        return str(value.value)
    return str(value)


class SupabaseDocumentStore(BaseDocumentStore):
    """
    Document store using the Supabase service-role client.

    Note: This store does NOT perform authorization checks.
    The service layer is responsible for verifying the caller.
    """

    TABLE = "documents"
    COMMIT_FUNCTION = "commit_documents"

    def __init__(self, db: Client) -> None:
        self._db = db

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        query = (
            self._db.table(self.TABLE)
            .select("id, data, version")
            .eq("collection", collection)
            .eq("id", doc_id)
        )
        result = self._execute(query)

        if not result.data:
            return DocumentSnapshot(collection=collection, id=doc_id)
        return self._map_to_snapshot(collection, result.data[0])

    async def query(
        self,
        collection: str,
        filters: Sequence[QueryFilter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentSnapshot]:
        query = self._db.table(self.TABLE).select("id, data, version").eq("collection", collection)

        for f in filters:
            column = f"data->>{f.field}"
            if f.op == FilterOp.EQ:
                query = query.eq(column, _as_text(f.value))
            else:
                query = query.neq(column, _as_text(f.value))

        if order_by:
            query = query.order(f"data->>{order_by}", desc=descending)
        query = query.order("id", desc=descending)

        if limit is not None:
            query = query.limit(limit)

        result = self._execute(query)
        return [self._map_to_snapshot(collection, row) for row in result.data]

    async def _apply(self, reads: dict[DocumentKey, int], writes: list[DocumentWrite]) -> None:
        params = {
            "p_reads": [
                {"collection": collection, "id": doc_id, "version": version}
                for (collection, doc_id), version in reads.items()
            ],
            "p_writes": [write.model_dump(mode="json") for write in writes],
        }

        try:
            self._db.rpc(self.COMMIT_FUNCTION, params).execute()
        except APIError as e:
            if e.code == SERIALIZATION_FAILURE:
                raise TransactionConflictError(details={"reason": e.message}) from e
            if e.code == NO_DATA_FOUND:
                collection, _, doc_id = (e.details or "").partition("/")
                raise DocumentNotFoundError(collection, doc_id) from e
            raise ExternalServiceError(
                f"Document commit failed: {e.message}",
                service="supabase",
                details={"code": e.code},
            ) from e

    def _execute(self, query: Any) -> Any:
        try:
            return query.execute()
        except APIError as e:
            raise ExternalServiceError(
                f"Document read failed: {e.message}",
                service="supabase",
                details={"code": e.code},
            ) from e

    def _map_to_snapshot(self, collection: str, row: dict[str, Any]) -> DocumentSnapshot:
        """Map database row to DocumentSnapshot."""
        return DocumentSnapshot(
            collection=collection,
            id=str(row["id"]),
            data=row.get("data") or {},
            version=int(row["version"]),
        )
