"""
Matchmaking API endpoints.

Queue toggling, match requests, leaving a match, and an SSE stream
that reports match status changes to both participants.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sse_starlette.sse import EventSourceResponse

from api.middleware.auth import get_current_user
from api.dependencies import get_matchmaking_service
from shared.models import AuthenticatedUser

from .interfaces import IMatchmakingService
from .models import (
    LeaveMatchRequest,
    LeaveMatchResult,
    Match,
    MatchRequest,
    MatchRequestResult,
    ToggleQueueRequest,
    ToggleQueueResult,
)
from .exceptions import MatchAccessDeniedError, MatchNotFoundError

router = APIRouter()

# HTTP status for each failure code carried in a result object
ERROR_STATUS_CODES = {
    "UNAUTHORIZED": 403,
    "MATCH_ACCESS_DENIED": 403,
    "PROFILE_NOT_FOUND": 404,
    "ALREADY_IN_MATCH": 409,
    "STALE_PARTNER": 409,
    "TRANSACTION_CONFLICT": 409,
}


def status_for(error_code: Optional[str]) -> int:
    if error_code is None:
        return 200
    return ERROR_STATUS_CODES.get(error_code, 500)


@router.post("/matchmaking/queue", response_model=ToggleQueueResult)
async def toggle_queue(
    request: ToggleQueueRequest,
    response: Response,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IMatchmakingService = Depends(get_matchmaking_service),
) -> ToggleQueueResult:
    """
    Join or leave the matchmaking queue.
    """
    result = await service.toggle_queue(
        user.id,
        request.user_id or user.id,
        request.want_match,
    )
    response.status_code = status_for(result.error_code)
    return result


@router.post("/matchmaking/request", response_model=MatchRequestResult)
async def request_match(
    request: MatchRequest,
    response: Response,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IMatchmakingService = Depends(get_matchmaking_service),
) -> MatchRequestResult:
    """
    Find a chat partner.

    status is "matched" with a match_id, or "queued" when nobody else
    is waiting. Queued users should watch their profile or poll again.
    """
    result = await service.request_match(user.id, request.user_id or user.id)
    response.status_code = status_for(result.error_code)
    return result


@router.post("/matches/{match_id}/leave", response_model=LeaveMatchResult)
async def leave_match(
    match_id: str,
    request: LeaveMatchRequest,
    response: Response,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IMatchmakingService = Depends(get_matchmaking_service),
) -> LeaveMatchResult:
    """
    End a match for both participants.
    """
    result = await service.leave_match(user.id, request.user_id or user.id, match_id)
    response.status_code = status_for(result.error_code)
    return result


@router.get("/matches/{match_id}", response_model=Match)
async def get_match(
    match_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IMatchmakingService = Depends(get_matchmaking_service),
) -> Match:
    """
    Get a match the current user participates in.
    """
    try:
        return await service.get_match(user.id, match_id)
    except MatchNotFoundError:
        raise HTTPException(status_code=404, detail="Match not found")
    except MatchAccessDeniedError:
        raise HTTPException(status_code=404, detail="Match not found")


async def match_event_generator(
    match_id: str,
    user_id: str,
    service: IMatchmakingService,
):
    """
    Generate SSE events for a match.

    Yields events in the format:
        event: match_status
        data: <match json>
    """
    async for match in service.watch_match(user_id, match_id):
        yield {
            "event": "match_status",
            "data": match.model_dump_json(exclude_none=True),
        }


@router.get("/matches/{match_id}/events")
async def stream_match(
    match_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IMatchmakingService = Depends(get_matchmaking_service),
):
    """
    Stream match status changes via SSE.

    The first event carries the current state. The stream closes after
    the event that reports status "ended", so the client that did not
    leave learns its partner is gone.
    """
    # Fail with a plain HTTP error before the stream starts
    await get_match(match_id, user, service)

    return EventSourceResponse(
        match_event_generator(match_id, user.id, service),
        media_type="text/event-stream",
    )
