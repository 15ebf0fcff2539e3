"""
Chat message repository.

Messages live in the `messages` collection and carry their match_id,
so a match's history is a filtered, sent_at-ordered query.
"""

from shared.documents import DocumentSnapshot, QueryFilter, Transaction
from shared.repository import BaseRepository

from .models import ChatMessage


class MessageRepository(BaseRepository[ChatMessage]):
    """Repository for chat messages."""

    collection = "messages"

    def stage_create(self, tx: Transaction, message: ChatMessage) -> None:
        tx.set(self.collection, message.id, self._document_data(message))

    async def list_recent(self, match_id: str, limit: int) -> list[ChatMessage]:
        """
        Get the most recent messages of a match.

        Returns:
            Up to limit messages, oldest first.
        """
        snapshots = await self._store.query(
            self.collection,
            filters=[QueryFilter(field="match_id", value=match_id)],
            order_by="sent_at",
            descending=True,
            limit=limit,
        )
        return [self._map_to_model(s) for s in reversed(snapshots)]

    def _map_to_model(self, snapshot: DocumentSnapshot) -> ChatMessage:
        """Map document to ChatMessage model."""
        return ChatMessage.model_validate({**(snapshot.data or {}), "id": snapshot.id})
