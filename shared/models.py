"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


# Fixed-width UTC format: textual order equals time order
SORTABLE_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_sortable_timestamp(value: datetime) -> str:
    """
    Serialize a timestamp for fields that documents are ordered by.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(SORTABLE_TIMESTAMP_FORMAT)


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    This model is populated from JWT claims and made available
    to route handlers via dependency injection. Its id is the
    caller id every matchmaking operation is checked against.
    """

    id: str = Field(..., description="User ID (UUID from Supabase)")
    email: Optional[EmailStr] = Field(None, description="User's email address")
    email_verified: bool = Field(default=False, description="Whether email is verified")
    avatar_url: Optional[str] = Field(None, description="Avatar from the sign-in provider")

    last_sign_in: Optional[datetime] = Field(None, description="Last sign-in time")

    model_config = {
        "frozen": True,
        "extra": "ignore",  # Ignore extra fields from JWT
    }
