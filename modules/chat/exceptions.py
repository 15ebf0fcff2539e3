"""
Chat module exceptions.
"""

from shared.exceptions import ValidationError


class InvalidMessageError(ValidationError):
    """Raised when message text is empty or too long."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid message: {reason}",
            code="INVALID_MESSAGE",
            details={"reason": reason},
        )
