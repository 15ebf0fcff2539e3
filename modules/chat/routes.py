"""
Chat API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from api.middleware.auth import get_current_user
from api.dependencies import get_chat_service
from shared.models import AuthenticatedUser

from modules.matchmaking.exceptions import (
    MatchAccessDeniedError,
    MatchNotActiveError,
    MatchNotFoundError,
)
from .interfaces import IChatService
from .models import ChatMessage, MessageListResponse, SendMessageRequest
from .exceptions import InvalidMessageError

router = APIRouter()


@router.get("/{match_id}/messages", response_model=MessageListResponse)
async def list_messages(
    match_id: str,
    limit: int = Query(default=20, ge=1, le=100, description="Number of recent messages"),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IChatService = Depends(get_chat_service),
) -> MessageListResponse:
    """
    Get the most recent messages of a match, oldest first.
    """
    try:
        messages = await service.list_messages(user.id, match_id, limit)
        return MessageListResponse(messages=messages)
    except MatchNotFoundError:
        raise HTTPException(status_code=404, detail="Match not found")
    except MatchAccessDeniedError:
        raise HTTPException(status_code=404, detail="Match not found")


@router.post("/{match_id}/messages", response_model=ChatMessage, status_code=201)
async def send_message(
    match_id: str,
    request: SendMessageRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IChatService = Depends(get_chat_service),
) -> ChatMessage:
    """
    Send a message to an active match.
    """
    try:
        return await service.send_message(user.id, match_id, request.text)
    except (MatchNotFoundError, MatchAccessDeniedError):
        raise HTTPException(status_code=404, detail="Match not found")
    except MatchNotActiveError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except InvalidMessageError as e:
        raise HTTPException(status_code=422, detail=e.message)
