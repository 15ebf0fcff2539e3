"""
Matchmaking module.

Pairs users who want to practice a language with each other: a FIFO
waiting queue, race-safe claiming of the longest-waiting partner, and
the active -> ended lifecycle of the resulting matches.

Public API:
- IMatchmakingService: Interface for matchmaking operations
- MatchRepository: Match document mapping, shared with chat
- Match, QueueEntry, MatchStatus and the operation result models
- Matchmaking exceptions
"""

from .interfaces import IMatchmakingService
from .models import (
    Match,
    MatchStatus,
    MessagePreview,
    QueueEntry,
    MatchRequestStatus,
    ToggleQueueResult,
    MatchRequestResult,
    LeaveMatchResult,
)
from .repository import MatchRepository
from .exceptions import (
    MatchNotFoundError,
    MatchAccessDeniedError,
    MatchNotActiveError,
    AlreadyInMatchError,
    StalePartnerError,
)

__all__ = [
    # Interface
    "IMatchmakingService",
    # Models
    "Match",
    "MatchStatus",
    "MessagePreview",
    "QueueEntry",
    "MatchRequestStatus",
    "ToggleQueueResult",
    "MatchRequestResult",
    "LeaveMatchResult",
    # Repository
    "MatchRepository",
    # Exceptions
    "MatchNotFoundError",
    "MatchAccessDeniedError",
    "MatchNotActiveError",
    "AlreadyInMatchError",
    "StalePartnerError",
]
