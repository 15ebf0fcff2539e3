"""
Matchmaking module interface.

The API layer and the chat module depend on IMatchmakingService.
"""

from typing import AsyncIterator, Protocol, runtime_checkable

from .models import (
    LeaveMatchResult,
    Match,
    MatchRequestResult,
    ToggleQueueResult,
)


@runtime_checkable
class IMatchmakingService(Protocol):
    """
    Interface for matchmaking operations.

    toggle_queue, request_match and leave_match never raise: failures
    come back as result objects with error and error_code set.
    """

    async def toggle_queue(
        self,
        caller_id: str,
        user_id: str,
        want_match: bool,
    ) -> ToggleQueueResult:
        """
        Join (want_match=True) or leave (want_match=False) the queue.

        Joining twice keeps the original queue position. Leaving when
        not queued succeeds without changes.

        Error codes:
            UNAUTHORIZED: caller_id != user_id
            PROFILE_NOT_FOUND: user has no profile
            ALREADY_IN_MATCH: user is in an active match (join only)
        """
        ...

    async def request_match(
        self,
        caller_id: str,
        user_id: str,
    ) -> MatchRequestResult:
        """
        Pair the user with the longest-waiting other user.

        Returns the existing match if the user already has one. If
        nobody else is waiting the user is queued and the status is
        QUEUED; the user learns about a later match from their profile
        or from watch_match.

        Error codes:
            UNAUTHORIZED: caller_id != user_id
            PROFILE_NOT_FOUND: user has no profile
            STALE_PARTNER: candidates kept disappearing, retry later
            TRANSACTION_CONFLICT: contention did not settle, retry later
        """
        ...

    async def leave_match(
        self,
        caller_id: str,
        user_id: str,
        match_id: str,
    ) -> LeaveMatchResult:
        """
        End a match for both participants.

        Leaving a match that is already ended or no longer exists
        succeeds and clears the user's stale reference to it.

        Error codes:
            UNAUTHORIZED: caller_id != user_id
            MATCH_ACCESS_DENIED: user is not a participant
        """
        ...

    async def get_match(self, caller_id: str, match_id: str) -> Match:
        """
        Get a match the caller participates in.

        Raises:
            MatchNotFoundError: If the match does not exist
            MatchAccessDeniedError: If the caller is not a participant
        """
        ...

    def watch_match(self, caller_id: str, match_id: str) -> AsyncIterator[Match]:
        """
        Yield the match each time it changes, starting with its current
        state. Stops after yielding the ended match.

        Raises:
            MatchNotFoundError: If the match does not exist
            MatchAccessDeniedError: If the caller is not a participant
        """
        ...
