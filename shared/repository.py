"""
Base repository class for document access.

Provides a common abstraction layer for all repositories, encapsulating
document store access and the dict-to-model mapping for one collection.
"""

from typing import Any, ClassVar, Generic, Optional, TypeVar, Union

from .documents import DocumentSnapshot, IDocumentStore, Transaction


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for document operations:
    - Document store access via self._store
    - Reads either directly or inside a caller's transaction
    - Generic type parameter for model type hints

    Subclasses set `collection` and implement _map_to_model(). Writes are
    staged on a Transaction passed in by the service layer, so a service
    can combine writes from several repositories into one commit.

    Example:
        class ProfileRepository(BaseRepository[UserProfile]):
            collection = "profiles"

            def _map_to_model(self, snapshot: DocumentSnapshot) -> UserProfile:
                return UserProfile(id=snapshot.id, **snapshot.data)
    """

    collection: ClassVar[str]

    def __init__(self, store: IDocumentStore) -> None:
        """
        Initialize the repository with a document store.

        Args:
            store: Document store instance for data operations.
        """
        self._store = store

    async def get(self, doc_id: str, tx: Optional[Transaction] = None) -> Optional[T]:
        """
        Load one document as a model.

        Args:
            doc_id: Document ID.
            tx: Optional transaction; the read is then validated at commit.

        Returns:
            The mapped model, or None if the document does not exist.
        """
        snapshot = await self._reader(tx).get(self.collection, doc_id)
        if not snapshot.exists:
            return None
        return self._map_to_model(snapshot)

    def _reader(self, tx: Optional[Transaction]) -> Union[IDocumentStore, Transaction]:
        return tx if tx is not None else self._store

    def _map_to_model(self, snapshot: DocumentSnapshot) -> T:
        raise NotImplementedError

    @staticmethod
    def _document_data(model: Any, exclude: Optional[set[str]] = None) -> dict[str, Any]:
        """Serialize a pydantic model into JSON-compatible document data."""
        return model.model_dump(mode="json", exclude=exclude or {"id"})
