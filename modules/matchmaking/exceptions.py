"""
Matchmaking module exceptions.

These are raised inside the module and converted to result objects
at the service boundary.
"""

from shared.exceptions import (
    NotFoundError,
    ValidationError,
    AuthorizationError,
    ConflictError,
)


class MatchNotFoundError(NotFoundError):
    """Raised when a match does not exist."""

    def __init__(self, match_id: str):
        super().__init__(
            f"Match not found: {match_id}",
            code="MATCH_NOT_FOUND",
            details={"match_id": match_id},
        )


class MatchAccessDeniedError(AuthorizationError):
    """Raised when a user acts on a match they are not part of."""

    def __init__(self, match_id: str, user_id: str):
        super().__init__(
            f"User is not part of match: {match_id}",
            code="MATCH_ACCESS_DENIED",
            details={"match_id": match_id, "user_id": user_id},
        )


class MatchNotActiveError(ValidationError):
    """Raised when an operation requires an active match."""

    def __init__(self, match_id: str, status: str):
        super().__init__(
            "This chat is not active",
            code="MATCH_NOT_ACTIVE",
            details={"match_id": match_id, "status": status},
        )


class AlreadyInMatchError(ValidationError):
    """Raised when a user in an active match tries to join the queue."""

    def __init__(self, user_id: str, match_id: str):
        super().__init__(
            "Leave your current chat before looking for a new partner",
            code="ALREADY_IN_MATCH",
            details={"user_id": user_id, "match_id": match_id},
        )


class StalePartnerError(ConflictError):
    """
    Raised when every queued candidate turned out to be stale.

    The stale queue entries have been removed; retrying the request
    is expected to succeed or queue the user.
    """

    def __init__(self, user_id: str, attempts: int):
        super().__init__(
            "Potential partner is no longer available, please try again",
            code="STALE_PARTNER",
            details={"user_id": user_id, "attempts": attempts},
        )
