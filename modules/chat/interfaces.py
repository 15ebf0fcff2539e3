"""
Chat module interface.
"""

from typing import Protocol, runtime_checkable

from .models import ChatMessage


@runtime_checkable
class IChatService(Protocol):
    """Interface for sending and reading match messages."""

    async def send_message(
        self,
        caller_id: str,
        match_id: str,
        text: str,
    ) -> ChatMessage:
        """
        Send a message to an active match.

        The match's last_message preview is updated in the same
        transaction as the message write.

        Raises:
            InvalidMessageError: If text is empty or longer than 1000 chars
            MatchNotFoundError: If the match does not exist
            MatchAccessDeniedError: If the caller is not a participant
            MatchNotActiveError: If the match has ended
        """
        ...

    async def list_messages(
        self,
        caller_id: str,
        match_id: str,
        limit: int = 20,
    ) -> list[ChatMessage]:
        """
        Get the most recent messages of a match, oldest first.

        Raises:
            MatchNotFoundError: If the match does not exist
            MatchAccessDeniedError: If the caller is not a participant
        """
        ...
