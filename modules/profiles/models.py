"""
Profiles module data models.

A profile holds the per-user state matchmaking depends on
(looking-for-match flag, current match) next to the display data
shown to chat partners.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, HttpUrl, field_validator


class ProficiencyLevel(str, Enum):
    """Self-reported German level, from lowest to highest."""

    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"
    NATIVE = "Native"


class UserProfile(BaseModel):
    """
    A user's profile record.

    Invariants maintained by the matchmaking module:
    - current_match_id is set iff the user is in an active match
    - is_looking_for_match and current_match_id are never both set
    """

    id: str = Field(..., description="User ID (same as the auth user ID)")
    email: Optional[str] = Field(None, description="Email address")
    display_name: Optional[str] = Field(None, description="Display name")
    photo_url: Optional[str] = Field(None, description="Profile photo URL")
    bio: Optional[str] = Field(None, description="Short bio")
    proficiency_level: Optional[ProficiencyLevel] = Field(
        None,
        description="German proficiency level, unset if not chosen",
    )
    is_looking_for_match: bool = Field(
        default=False,
        description="Whether the user is waiting in the matchmaking queue",
    )
    current_match_id: Optional[str] = Field(
        None,
        description="ID of the user's active match, if any",
    )
    created_at: datetime = Field(..., description="Registration time")
    updated_at: datetime = Field(..., description="Last update time")


class CreateProfileRequest(BaseModel):
    """Request to create the caller's profile at registration."""

    display_name: Optional[str] = Field(
        None,
        min_length=2,
        max_length=50,
        description="Display name",
    )
    photo_url: Optional[HttpUrl] = Field(
        None,
        description="Profile photo URL, defaults to the avatar from the sign-in provider",
    )


class ProfileUpdate(BaseModel):
    """
    Partial profile update.

    Only fields present in the request are changed; sending
    proficiency_level or photo_url as null clears it. display_name
    cannot be cleared.
    """

    display_name: Optional[str] = Field(None, min_length=2, max_length=50)
    bio: Optional[str] = Field(None, max_length=200)
    proficiency_level: Optional[ProficiencyLevel] = None
    photo_url: Optional[HttpUrl] = None

    @field_validator("display_name")
    @classmethod
    def display_name_not_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("display_name cannot be cleared")
        return value
