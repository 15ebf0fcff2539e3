"""
Base exception classes for the Tandem backend.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.
"""

from typing import Optional, Any


class TandemError(Exception):
    """
    Base exception for all Tandem errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(TandemError):
    """Resource not found."""

    pass


class ValidationError(TandemError):
    """Input validation failed."""

    pass


class AuthorizationError(TandemError):
    """Authorization failed (insufficient permissions)."""

    pass


class UnauthorizedOperationError(AuthorizationError):
    """Raised when the authenticated caller acts on another user's behalf."""

    def __init__(self, caller_id: str, user_id: str):
        super().__init__(
            "Unauthorized",
            code="UNAUTHORIZED",
            details={"caller_id": caller_id, "user_id": user_id},
        )


def ensure_same_user(caller_id: str, user_id: str) -> None:
    """
    Check that the caller is the user being acted on.

    Raises:
        UnauthorizedOperationError: If the ids differ
    """
    if caller_id != user_id:
        raise UnauthorizedOperationError(caller_id, user_id)


class ConflictError(TandemError):
    """
    The operation collided with concurrent state changes.

    Conflicts are transient: the caller may retry the same request.
    """

    pass


class TransactionConflictError(ConflictError):
    """Raised when an optimistic transaction fails its version check."""

    def __init__(self, attempts: int = 1, details: Optional[dict[str, Any]] = None):
        super().__init__(
            "Concurrent update detected, please try again",
            code="TRANSACTION_CONFLICT",
            details={"attempts": attempts, **(details or {})},
        )
        self.attempts = attempts


class ExternalServiceError(TandemError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
