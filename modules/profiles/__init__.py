"""
Profiles module.

Holds per-user profile records: display data plus the matchmaking state
(looking-for-match flag and current match) the matchmaking module keeps
consistent.

Public API:
- IProfileService: Interface for profile operations
- ProfileRepository: Profile document mapping, shared with matchmaking
- UserProfile, ProficiencyLevel, ProfileUpdate
- Profile exceptions: ProfileNotFoundError, ProfileAlreadyExistsError
"""

from .interfaces import IProfileService
from .models import (
    UserProfile,
    ProficiencyLevel,
    ProfileUpdate,
    CreateProfileRequest,
)
from .repository import ProfileRepository
from .exceptions import (
    ProfileError,
    ProfileNotFoundError,
    ProfileAlreadyExistsError,
)

__all__ = [
    # Interface
    "IProfileService",
    # Models
    "UserProfile",
    "ProficiencyLevel",
    "ProfileUpdate",
    "CreateProfileRequest",
    # Repository
    "ProfileRepository",
    # Exceptions
    "ProfileError",
    "ProfileNotFoundError",
    "ProfileAlreadyExistsError",
]
