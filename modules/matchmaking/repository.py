"""
Matchmaking repositories.

Encapsulates document mapping for the matchmaking collections:
- queue (document id = user id, so at most one entry per user)
- matches
"""

from datetime import datetime
from typing import Any, Optional

from shared.documents import DocumentSnapshot, FilterOp, QueryFilter, Transaction
from shared.repository import BaseRepository

from modules.profiles.models import ProficiencyLevel
from .models import Match, MatchStatus, MessagePreview, QueueEntry


class QueueRepository(BaseRepository[QueueEntry]):
    """Repository for queue entries."""

    collection = "queue"

    async def oldest_excluding(
        self,
        user_id: str,
        level: Optional[ProficiencyLevel] = None,
    ) -> Optional[QueueEntry]:
        """
        Get the longest-waiting entry that is not user_id's.

        Args:
            user_id: User to exclude.
            level: Only consider entries with this proficiency level.

        Returns:
            The oldest matching entry, or None if nobody else is waiting.
        """
        filters = [QueryFilter(field="user_id", op=FilterOp.NEQ, value=user_id)]
        if level is not None:
            filters.append(QueryFilter(field="proficiency_level", value=level.value))

        snapshots = await self._store.query(
            self.collection,
            filters=filters,
            order_by="enqueued_at",
            limit=1,
        )
        if not snapshots:
            return None
        return self._map_to_model(snapshots[0])

    def stage_put(self, tx: Transaction, entry: QueueEntry) -> None:
        tx.set(self.collection, entry.user_id, entry.model_dump(mode="json"))

    def stage_remove(self, tx: Transaction, user_id: str) -> None:
        tx.delete(self.collection, user_id)

    def _map_to_model(self, snapshot: DocumentSnapshot) -> QueueEntry:
        """Map document to QueueEntry model."""
        return QueueEntry.model_validate({**(snapshot.data or {}), "user_id": snapshot.id})


class MatchRepository(BaseRepository[Match]):
    """
    Repository for match records.

    Matches are never deleted; ending a match only changes its status.
    """

    collection = "matches"

    def stage_create(self, tx: Transaction, match: Match) -> None:
        tx.set(self.collection, match.id, self._document_data(match))

    def stage_end(self, tx: Transaction, match_id: str, now: datetime) -> None:
        tx.update(
            self.collection,
            match_id,
            {
                "status": MatchStatus.ENDED.value,
                "ended_at": now.isoformat(),
                "updated_at": now.isoformat(),
            },
        )

    def stage_last_message(
        self,
        tx: Transaction,
        match_id: str,
        preview: MessagePreview,
        now: datetime,
    ) -> None:
        fields: dict[str, Any] = {
            "last_message": preview.model_dump(mode="json"),
            "updated_at": now.isoformat(),
        }
        tx.update(self.collection, match_id, fields)

    def _map_to_model(self, snapshot: DocumentSnapshot) -> Match:
        """Map document to Match model."""
        return Match.model_validate({**(snapshot.data or {}), "id": snapshot.id})
