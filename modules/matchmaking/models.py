"""
Matchmaking module data models.

These models define the queue, match and operation result structures
of the matchmaking protocol.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from shared.models import to_sortable_timestamp

from modules.profiles.models import ProficiencyLevel


class MatchStatus(str, Enum):
    """Match lifecycle status."""

    PENDING = "pending"  # Reserved for a future accept/decline step
    ACTIVE = "active"    # Participants are chatting
    ENDED = "ended"      # Terminal; the record is kept for history


class QueueEntry(BaseModel):
    """A user waiting for a partner."""

    user_id: str = Field(..., description="Waiting user's ID")
    enqueued_at: datetime = Field(..., description="When the user joined the queue")
    proficiency_level: Optional[ProficiencyLevel] = Field(
        None,
        description="Level copied from the profile at enqueue time",
    )

    @field_serializer("enqueued_at")
    def _serialize_enqueued_at(self, value: datetime) -> str:
        return to_sortable_timestamp(value)


class MessagePreview(BaseModel):
    """Denormalized preview of a match's latest message."""

    text: str = Field(..., description="Truncated message text")
    sent_at: datetime = Field(..., description="When the message was sent")
    sender_id: str = Field(..., description="Sender's user ID")


class Match(BaseModel):
    """
    A chat pairing between exactly two users.

    participant_names and participant_photo_urls are snapshots taken
    when the match was created; later profile edits do not change them.
    """

    id: str = Field(..., description="Match ID, also used as the chat route token")
    participants: list[str] = Field(
        ...,
        min_length=2,
        max_length=2,
        description="The two participants' user IDs",
    )
    participant_names: dict[str, Optional[str]] = Field(
        default_factory=dict,
        description="Display name per participant at match creation",
    )
    participant_photo_urls: dict[str, Optional[str]] = Field(
        default_factory=dict,
        description="Photo URL per participant at match creation",
    )
    status: MatchStatus = Field(default=MatchStatus.ACTIVE, description="Lifecycle status")
    created_at: datetime = Field(..., description="When the match was created")
    updated_at: datetime = Field(..., description="Last update time")
    ended_at: Optional[datetime] = Field(None, description="When the match ended")
    last_message: Optional[MessagePreview] = Field(
        None,
        description="Preview of the latest message",
    )

    @field_validator("participants")
    @classmethod
    def _participants_distinct(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("participants must be distinct")
        return value

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participants

    def partner_of(self, user_id: str) -> str:
        """Return the other participant's ID."""
        return next(p for p in self.participants if p != user_id)


class MatchRequestStatus(str, Enum):
    """Outcome of a match request."""

    MATCHED = "matched"  # match_id is set
    QUEUED = "queued"    # no partner yet, requester waits in the queue
    FAILED = "failed"    # see error / error_code


class ToggleQueueResult(BaseModel):
    """Result of joining or leaving the queue."""

    success: bool
    is_looking_for_match: Optional[bool] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


class MatchRequestResult(BaseModel):
    """
    Result of a match request.

    success is true only when a match exists (new or already active),
    and then match_id is always set.
    """

    success: bool
    status: MatchRequestStatus
    match_id: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


class LeaveMatchResult(BaseModel):
    """Result of leaving a match."""

    success: bool
    error: Optional[str] = None
    error_code: Optional[str] = None


class ToggleQueueRequest(BaseModel):
    """Request to join or leave the matchmaking queue."""

    user_id: Optional[str] = Field(None, description="Defaults to the caller")
    want_match: bool = Field(..., description="True to join, False to leave")


class MatchRequest(BaseModel):
    """Request to find a partner."""

    user_id: Optional[str] = Field(None, description="Defaults to the caller")


class LeaveMatchRequest(BaseModel):
    """Request to leave a match."""

    user_id: Optional[str] = Field(None, description="Defaults to the caller")
