"""
Chat module.

Messages exchanged inside an active match, with a simple word filter
and the match's last-message preview kept in step.

Public API:
- IChatService: Interface for chat operations
- ChatMessage, SendMessageRequest, MessageListResponse
- InvalidMessageError
"""

from .interfaces import IChatService
from .models import ChatMessage, SendMessageRequest, MessageListResponse
from .exceptions import InvalidMessageError

__all__ = [
    "IChatService",
    "ChatMessage",
    "SendMessageRequest",
    "MessageListResponse",
    "InvalidMessageError",
]
