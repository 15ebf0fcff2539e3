"""
Profiles module interface.

The API layer depends on IProfileService for profile operations.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import ProfileUpdate, UserProfile


@runtime_checkable
class IProfileService(Protocol):
    """
    Interface for profile operations.

    Every method takes the authenticated caller's ID and rejects
    attempts to act on another user's profile.
    """

    async def create_profile(
        self,
        caller_id: str,
        user_id: str,
        email: Optional[str] = None,
        display_name: Optional[str] = None,
        photo_url: Optional[str] = None,
    ) -> UserProfile:
        """
        Create a profile at registration.

        Matchmaking fields start at their defaults (not looking, no match).

        Raises:
            UnauthorizedOperationError: If caller_id != user_id
            ProfileAlreadyExistsError: If the profile already exists
        """
        ...

    async def get_profile(self, caller_id: str, user_id: str) -> UserProfile:
        """
        Get a user's own profile.

        Raises:
            UnauthorizedOperationError: If caller_id != user_id
            ProfileNotFoundError: If no profile exists
        """
        ...

    async def update_profile(
        self,
        caller_id: str,
        user_id: str,
        update: ProfileUpdate,
    ) -> UserProfile:
        """
        Apply a partial update and return the updated profile.

        Matchmaking fields are never changed here, and existing match
        snapshots keep the name and photo they were created with.

        Raises:
            UnauthorizedOperationError: If caller_id != user_id
            ProfileNotFoundError: If no profile exists
        """
        ...
