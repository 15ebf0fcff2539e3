"""
Matchmaking queue.

Tracks which users are waiting for a partner. A user's queue entry and
the is_looking_for_match flag on their profile are always written in the
same transaction, so no reader ever sees one without the other.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from shared.documents import IDocumentStore, Transaction
from shared.models import utc_now

from modules.profiles.exceptions import ProfileNotFoundError
from modules.profiles.models import ProficiencyLevel
from modules.profiles.repository import ProfileRepository
from .exceptions import AlreadyInMatchError
from .models import QueueEntry
from .repository import QueueRepository

logger = logging.getLogger(__name__)


class MatchmakingQueue:
    """
    FIFO waiting list keyed by user ID.

    Re-enqueueing a user who is already waiting keeps their original
    enqueued_at, so repeated "find partner" clicks never push a user
    to the back of the line.
    """

    def __init__(
        self,
        store: IDocumentStore,
        clock: Callable[[], datetime] = utc_now,
        max_attempts: int = 3,
    ):
        self._store = store
        self._entries = QueueRepository(store)
        self._profiles = ProfileRepository(store)
        self._clock = clock
        self._max_attempts = max_attempts

    async def enqueue(self, user_id: str) -> QueueEntry:
        """
        Add a user to the queue and mark them as looking for a match.

        Returns:
            The user's queue entry.

        Raises:
            ProfileNotFoundError: If the user has no profile
            AlreadyInMatchError: If the user is in an active match
            TransactionConflictError: If concurrent writes kept colliding
        """

        async def join(tx: Transaction) -> QueueEntry:
            profile = await self._profiles.get(user_id, tx)
            if profile is None:
                raise ProfileNotFoundError(user_id)
            if profile.current_match_id:
                raise AlreadyInMatchError(user_id, profile.current_match_id)

            existing = await self._entries.get(user_id, tx)
            now = self._clock()
            entry = QueueEntry(
                user_id=user_id,
                enqueued_at=existing.enqueued_at if existing else now,
                proficiency_level=profile.proficiency_level,
            )
            self._entries.stage_put(tx, entry)
            self._profiles.stage_match_state(tx, user_id, now, is_looking_for_match=True)
            return entry

        entry = await self._store.run_transaction(join, self._max_attempts)
        logger.debug(f"User {user_id} waiting since {entry.enqueued_at.isoformat()}")
        return entry

    async def dequeue(self, user_id: str) -> None:
        """
        Remove a user from the queue and clear their looking flag.

        Does nothing if the user is not queued.

        Raises:
            ProfileNotFoundError: If the user has no profile
            TransactionConflictError: If concurrent writes kept colliding
        """

        async def leave(tx: Transaction) -> bool:
            profile = await self._profiles.get(user_id, tx)
            if profile is None:
                raise ProfileNotFoundError(user_id)

            entry = await self._entries.get(user_id, tx)
            if entry is None and not profile.is_looking_for_match:
                return False

            self._entries.stage_remove(tx, user_id)
            self._profiles.stage_match_state(
                tx, user_id, self._clock(), is_looking_for_match=False
            )
            return True

        if await self._store.run_transaction(leave, self._max_attempts):
            logger.debug(f"User {user_id} left the queue")

    async def peek_oldest_excluding(
        self,
        user_id: str,
        level: Optional[ProficiencyLevel] = None,
    ) -> Optional[QueueEntry]:
        """
        Get the longest-waiting user other than user_id.

        The result is only a candidate: the matcher re-reads the entry
        inside its claim transaction, which fails if the entry changed.
        """
        return await self._entries.oldest_excluding(user_id, level)
