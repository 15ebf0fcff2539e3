"""
Profiles module exceptions.
"""

from shared.exceptions import TandemError, NotFoundError, ValidationError


class ProfileError(TandemError):
    """Base exception for profile-related errors."""

    pass


class ProfileNotFoundError(NotFoundError):
    """Raised when a user has no profile record."""

    def __init__(self, user_id: str):
        super().__init__(
            "User profile not found",
            code="PROFILE_NOT_FOUND",
            details={"user_id": user_id},
        )


class ProfileAlreadyExistsError(ValidationError):
    """Raised when registering a user whose profile already exists."""

    def __init__(self, user_id: str):
        super().__init__(
            f"Profile already exists: {user_id}",
            code="PROFILE_ALREADY_EXISTS",
            details={"user_id": user_id},
        )
