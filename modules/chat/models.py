"""
Chat module data models.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_serializer

from shared.models import to_sortable_timestamp


class ChatMessage(BaseModel):
    """A message sent within a match."""

    id: str = Field(..., description="Message ID")
    match_id: str = Field(..., description="Match the message belongs to")
    sender_id: str = Field(..., description="Sender's user ID")
    sender_display_name: Optional[str] = Field(None, description="Sender's name when sent")
    sender_photo_url: Optional[str] = Field(None, description="Sender's photo when sent")
    text: str = Field(..., description="Message text")
    sent_at: datetime = Field(..., description="When the message was sent")
    is_moderated: bool = Field(default=False, description="Flagged by the word filter")
    moderation_reason: Optional[str] = Field(None, description="Why it was flagged")

    @field_serializer("sent_at")
    def _serialize_sent_at(self, value: datetime) -> str:
        return to_sortable_timestamp(value)


class SendMessageRequest(BaseModel):
    """Request body for sending a message."""

    text: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Message text",
    )


class MessageListResponse(BaseModel):
    """Recent messages of a match, oldest first."""

    messages: list[ChatMessage]
