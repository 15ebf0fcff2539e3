"""
Match lifecycle.

Creates match records and ends them, keeping every participant's
current_match_id in step with the match status.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, Optional

from shared.documents import IDocumentStore, Transaction
from shared.models import utc_now

from modules.profiles.models import UserProfile
from modules.profiles.repository import ProfileRepository
from .exceptions import MatchAccessDeniedError, MatchNotFoundError
from .models import Match, MatchStatus
from .repository import MatchRepository

logger = logging.getLogger(__name__)

ANONYMOUS_NAME = "Anonymous"


def new_match_id() -> str:
    """Random match ID, safe to use as a URL path segment."""
    return str(uuid.uuid4())


class MatchLifecycle:
    """
    Manages the active -> ended transition of matches.

    Ended matches are kept for history and are never reactivated.
    """

    def __init__(
        self,
        store: IDocumentStore,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_match_id,
        max_attempts: int = 3,
    ):
        self._store = store
        self._matches = MatchRepository(store)
        self._profiles = ProfileRepository(store)
        self._clock = clock
        self._id_factory = id_factory
        self._max_attempts = max_attempts

    def stage_create(
        self,
        tx: Transaction,
        first: UserProfile,
        second: UserProfile,
        now: datetime,
    ) -> Match:
        """
        Stage a new active match and point both profiles at it.

        Display names and photos are copied into the match as they are
        right now. Both users stop looking for a match.
        """
        match = Match(
            id=self._id_factory(),
            participants=[first.id, second.id],
            participant_names={
                p.id: p.display_name or ANONYMOUS_NAME for p in (first, second)
            },
            participant_photo_urls={p.id: p.photo_url for p in (first, second)},
            status=MatchStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )
        self._matches.stage_create(tx, match)
        for profile in (first, second):
            self._profiles.stage_match_state(
                tx,
                profile.id,
                now,
                current_match_id=match.id,
                is_looking_for_match=False,
            )
        return match

    async def end_match(self, user_id: str, match_id: str) -> Optional[Match]:
        """
        End a match on behalf of one of its participants.

        All participants' current_match_id references to the match are
        cleared in the same transaction that sets the status to ended.
        Ending an already ended or missing match only clears the
        requester's own dangling reference.

        Returns:
            The ended match, or None if it does not exist.

        Raises:
            MatchAccessDeniedError: If user_id is not a participant
            TransactionConflictError: If concurrent writes kept colliding
        """

        async def end(tx: Transaction) -> Optional[Match]:
            match = await self._matches.get(match_id, tx)
            requester = await self._profiles.get(user_id, tx)

            if match is None:
                if requester is not None and requester.current_match_id == match_id:
                    logger.warning(f"Clearing reference to missing match {match_id} for user {user_id}")
                    self._profiles.stage_match_state(tx, user_id, self._clock(), clear_match=True)
                return None

            if not match.has_participant(user_id):
                raise MatchAccessDeniedError(match_id, user_id)

            if match.status == MatchStatus.ENDED:
                if requester is not None and requester.current_match_id == match_id:
                    self._profiles.stage_match_state(tx, user_id, self._clock(), clear_match=True)
                return match

            partner = await self._profiles.get(match.partner_of(user_id), tx)
            now = self._clock()
            self._matches.stage_end(tx, match_id, now)
            for profile in (requester, partner):
                if profile is not None and profile.current_match_id == match_id:
                    self._profiles.stage_match_state(tx, profile.id, now, clear_match=True)

            return match.model_copy(
                update={"status": MatchStatus.ENDED, "ended_at": now, "updated_at": now}
            )

        match = await self._store.run_transaction(end, self._max_attempts)
        if match is not None and match.ended_at is not None:
            logger.info(f"User {user_id} ended match {match_id}")
        return match

    async def get_match(self, user_id: str, match_id: str) -> Match:
        """
        Get a match the user participates in.

        Raises:
            MatchNotFoundError: If the match does not exist
            MatchAccessDeniedError: If user_id is not a participant
        """
        match = await self._matches.get(match_id)
        if match is None:
            raise MatchNotFoundError(match_id)
        if not match.has_participant(user_id):
            raise MatchAccessDeniedError(match_id, user_id)
        return match
