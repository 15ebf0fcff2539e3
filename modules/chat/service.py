"""
Chat service implementation.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, Optional, Sequence

from shared.documents import IDocumentStore, Transaction
from shared.models import utc_now

from modules.matchmaking.exceptions import (
    MatchAccessDeniedError,
    MatchNotActiveError,
    MatchNotFoundError,
)
from modules.matchmaking.models import MatchStatus, MessagePreview
from modules.matchmaking.repository import MatchRepository
from modules.profiles.repository import ProfileRepository
from .exceptions import InvalidMessageError
from .interfaces import IChatService
from .models import ChatMessage
from .repository import MessageRepository

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 1000
MODERATION_REASON = "Message contains potentially inappropriate language."


def preview_text(text: str, length: int) -> str:
    """Truncate text for the match preview, marking the cut with '...'."""
    if len(text) <= length:
        return text
    return text[:length] + "..."


class ChatService(IChatService):
    """
    Chat service on top of the document store.

    Implements IChatService protocol.
    """

    def __init__(
        self,
        store: IDocumentStore,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
        preview_length: int = 50,
        moderation_words: Sequence[str] = (),
        max_attempts: int = 3,
    ):
        self._store = store
        self._messages = MessageRepository(store)
        self._matches = MatchRepository(store)
        self._profiles = ProfileRepository(store)
        self._clock = clock
        self._id_factory = id_factory
        self._preview_length = preview_length
        self._moderation_words = [w.lower() for w in moderation_words]
        self._max_attempts = max_attempts

    def _moderation_reason(self, text: str) -> Optional[str]:
        lowered = text.lower()
        if any(word in lowered for word in self._moderation_words):
            return MODERATION_REASON
        return None

    async def send_message(
        self,
        caller_id: str,
        match_id: str,
        text: str,
    ) -> ChatMessage:
        if not text.strip():
            raise InvalidMessageError("message is empty")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise InvalidMessageError(f"message is longer than {MAX_MESSAGE_LENGTH} characters")

        reason = self._moderation_reason(text)

        async def send(tx: Transaction) -> ChatMessage:
            match = await self._matches.get(match_id, tx)
            if match is None:
                raise MatchNotFoundError(match_id)
            if not match.has_participant(caller_id):
                raise MatchAccessDeniedError(match_id, caller_id)
            if match.status != MatchStatus.ACTIVE:
                raise MatchNotActiveError(match_id, match.status.value)

            sender = await self._profiles.get(caller_id, tx)
            now = self._clock()
            message = ChatMessage(
                id=self._id_factory(),
                match_id=match_id,
                sender_id=caller_id,
                sender_display_name=(sender.display_name if sender else None) or "Anonymous",
                sender_photo_url=sender.photo_url if sender else None,
                text=text,
                sent_at=now,
                is_moderated=reason is not None,
                moderation_reason=reason,
            )
            self._messages.stage_create(tx, message)
            self._matches.stage_last_message(
                tx,
                match_id,
                MessagePreview(
                    text=preview_text(text, self._preview_length),
                    sent_at=now,
                    sender_id=caller_id,
                ),
                now,
            )
            return message

        message = await self._store.run_transaction(send, self._max_attempts)
        if message.is_moderated:
            logger.warning(f"Flagged message {message.id} from user {caller_id} in match {match_id}")
        return message

    async def list_messages(
        self,
        caller_id: str,
        match_id: str,
        limit: int = 20,
    ) -> list[ChatMessage]:
        match = await self._matches.get(match_id)
        if match is None:
            raise MatchNotFoundError(match_id)
        if not match.has_participant(caller_id):
            raise MatchAccessDeniedError(match_id, caller_id)

        return await self._messages.list_recent(match_id, limit)
