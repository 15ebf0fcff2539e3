"""
Partner matching.

Pairs a requester with the longest-waiting other user. Candidate
selection happens outside any transaction; the claim transaction then
re-reads both profiles and both queue entries, so two requests racing
for the same partner cannot both commit.
"""

import logging
from datetime import datetime
from functools import partial
from typing import Callable, Optional

from shared.documents import IDocumentStore, Transaction
from shared.models import utc_now

from modules.profiles.exceptions import ProfileNotFoundError
from modules.profiles.repository import ProfileRepository
from .exceptions import AlreadyInMatchError, StalePartnerError
from .lifecycle import MatchLifecycle
from .models import MatchRequestResult, MatchRequestStatus
from .queue import MatchmakingQueue
from .repository import QueueRepository

logger = logging.getLogger(__name__)


class Matcher:
    """
    Resolves match requests.

    A request ends in exactly one of: an existing match, a new match
    with the oldest eligible waiting user, or the requester waiting in
    the queue.
    """

    def __init__(
        self,
        store: IDocumentStore,
        queue: MatchmakingQueue,
        lifecycle: MatchLifecycle,
        clock: Callable[[], datetime] = utc_now,
        conflict_retries: int = 3,
        stale_partner_retries: int = 1,
        match_same_level: bool = False,
    ):
        self._store = store
        self._queue = queue
        self._lifecycle = lifecycle
        self._profiles = ProfileRepository(store)
        self._entries = QueueRepository(store)
        self._clock = clock
        self._conflict_retries = conflict_retries
        self._stale_partner_retries = stale_partner_retries
        self._match_same_level = match_same_level

    async def request_match(self, user_id: str) -> MatchRequestResult:
        """
        Find a partner for user_id.

        Returns:
            MATCHED with the match ID, or QUEUED when nobody else waits.

        Raises:
            ProfileNotFoundError: If the requester has no profile
            StalePartnerError: If every candidate tried was stale
            TransactionConflictError: If a claim kept colliding
        """
        requester = await self._profiles.get(user_id)
        if requester is None:
            raise ProfileNotFoundError(user_id)
        if requester.current_match_id:
            return self._matched(requester.current_match_id)

        level = requester.proficiency_level if self._match_same_level else None
        stale_attempts = 0

        while True:
            candidate = await self._queue.peek_oldest_excluding(user_id, level)
            if candidate is None:
                return await self._wait_in_queue(user_id)

            match_id = await self._store.run_transaction(
                partial(self._claim, user_id=user_id, partner_id=candidate.user_id),
                self._conflict_retries,
            )
            if match_id is not None:
                logger.info(f"Match request from {user_id} resolved to match {match_id}")
                return self._matched(match_id)

            stale_attempts += 1
            if stale_attempts > self._stale_partner_retries:
                raise StalePartnerError(user_id, stale_attempts)

    async def _claim(
        self,
        tx: Transaction,
        user_id: str,
        partner_id: str,
    ) -> Optional[str]:
        """
        Pair user_id with partner_id if both are still available.

        Returns the match ID, or None if the partner was stale.
        """
        requester = await self._profiles.get(user_id, tx)
        if requester is None:
            raise ProfileNotFoundError(user_id)
        if requester.current_match_id:
            # Paired by a concurrent request since the first read
            return requester.current_match_id

        partner_entry = await self._entries.get(partner_id, tx)
        partner = await self._profiles.get(partner_id, tx)
        own_entry = await self._entries.get(user_id, tx)

        if partner_entry is None:
            logger.debug(f"Queue entry for {partner_id} is gone, skipping")
            return None
        if partner is None or partner.current_match_id:
            logger.warning(f"Removing stale queue entry for user {partner_id}")
            self._entries.stage_remove(tx, partner_id)
            return None

        now = self._clock()
        match = self._lifecycle.stage_create(tx, requester, partner, now)
        self._entries.stage_remove(tx, partner_id)
        if own_entry is not None:
            self._entries.stage_remove(tx, user_id)

        return match.id

    async def _wait_in_queue(self, user_id: str) -> MatchRequestResult:
        try:
            await self._queue.enqueue(user_id)
        except AlreadyInMatchError as e:
            # Claimed by another requester after our last read
            return self._matched(e.details["match_id"])
        return MatchRequestResult(success=False, status=MatchRequestStatus.QUEUED)

    @staticmethod
    def _matched(match_id: str) -> MatchRequestResult:
        return MatchRequestResult(
            success=True,
            status=MatchRequestStatus.MATCHED,
            match_id=match_id,
        )
