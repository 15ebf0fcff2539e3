"""
Matchmaking service implementation.

Wires the queue, matcher and match lifecycle together and converts
their exceptions into result objects for callers.
"""

import asyncio
import logging
from datetime import datetime
from typing import AsyncIterator, Callable, Optional, TypeVar

from shared.documents import IDocumentStore
from shared.exceptions import TandemError, ensure_same_user
from shared.models import utc_now

from .interfaces import IMatchmakingService
from .lifecycle import MatchLifecycle, new_match_id
from .matcher import Matcher
from .models import (
    LeaveMatchResult,
    Match,
    MatchRequestResult,
    MatchRequestStatus,
    MatchStatus,
    ToggleQueueResult,
)
from .queue import MatchmakingQueue

logger = logging.getLogger(__name__)

R = TypeVar("R", ToggleQueueResult, MatchRequestResult, LeaveMatchResult)

INTERNAL_ERROR_CODE = "INTERNAL_ERROR"


class MatchmakingService(IMatchmakingService):
    """
    Matchmaking service on top of the document store.

    Implements IMatchmakingService protocol.
    """

    def __init__(
        self,
        store: IDocumentStore,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_match_id,
        conflict_retries: int = 3,
        stale_partner_retries: int = 1,
        match_same_level: bool = False,
        status_poll_interval: float = 2.0,
    ):
        self._queue = MatchmakingQueue(store, clock, conflict_retries)
        self._lifecycle = MatchLifecycle(store, clock, id_factory, conflict_retries)
        self._matcher = Matcher(
            store,
            self._queue,
            self._lifecycle,
            clock,
            conflict_retries=conflict_retries,
            stale_partner_retries=stale_partner_retries,
            match_same_level=match_same_level,
        )
        self._status_poll_interval = status_poll_interval

    @property
    def queue(self) -> MatchmakingQueue:
        return self._queue

    @property
    def lifecycle(self) -> MatchLifecycle:
        return self._lifecycle

    async def toggle_queue(
        self,
        caller_id: str,
        user_id: str,
        want_match: bool,
    ) -> ToggleQueueResult:
        try:
            ensure_same_user(caller_id, user_id)
            if want_match:
                await self._queue.enqueue(user_id)
            else:
                await self._queue.dequeue(user_id)
            return ToggleQueueResult(success=True, is_looking_for_match=want_match)
        except Exception as e:
            return self._failure(e, ToggleQueueResult, "toggling matchmaking status", user_id)

    async def request_match(
        self,
        caller_id: str,
        user_id: str,
    ) -> MatchRequestResult:
        try:
            ensure_same_user(caller_id, user_id)
            return await self._matcher.request_match(user_id)
        except Exception as e:
            return self._failure(
                e,
                MatchRequestResult,
                "requesting a match",
                user_id,
                status=MatchRequestStatus.FAILED,
            )

    async def leave_match(
        self,
        caller_id: str,
        user_id: str,
        match_id: str,
    ) -> LeaveMatchResult:
        try:
            ensure_same_user(caller_id, user_id)
            await self._lifecycle.end_match(user_id, match_id)
            return LeaveMatchResult(success=True)
        except Exception as e:
            return self._failure(e, LeaveMatchResult, "leaving match", user_id)

    async def get_match(self, caller_id: str, match_id: str) -> Match:
        return await self._lifecycle.get_match(caller_id, match_id)

    async def watch_match(self, caller_id: str, match_id: str) -> AsyncIterator[Match]:
        last_seen: Optional[datetime] = None
        while True:
            match = await self._lifecycle.get_match(caller_id, match_id)
            if match.updated_at != last_seen:
                last_seen = match.updated_at
                yield match
            if match.status == MatchStatus.ENDED:
                return
            await asyncio.sleep(self._status_poll_interval)

    @staticmethod
    def _failure(
        error: Exception,
        result_type: type[R],
        operation: str,
        user_id: str,
        **fields,
    ) -> R:
        if isinstance(error, TandemError):
            logger.warning(f"Failed {operation} for user {user_id}: [{error.code}] {error.message}")
            return result_type(
                success=False,
                error=error.message,
                error_code=error.code,
                **fields,
            )

        logger.exception(f"Unexpected error {operation} for user {user_id}")
        return result_type(
            success=False,
            error="An unexpected error occurred",
            error_code=INTERNAL_ERROR_CODE,
            **fields,
        )
