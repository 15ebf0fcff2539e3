"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Every service shares one document store, so transactions from
different modules see and conflict with each other's writes.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from shared.documents import IDocumentStore
    from modules.profiles.interfaces import IProfileService
    from modules.matchmaking.interfaces import IMatchmakingService
    from modules.chat.interfaces import IChatService


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._document_store: "IDocumentStore | None" = None
        self._profile_service: "IProfileService | None" = None
        self._matchmaking_service: "IMatchmakingService | None" = None
        self._chat_service: "IChatService | None" = None

    @property
    def document_store(self) -> "IDocumentStore":
        """Get the document store instance."""
        if self._document_store is None:
            from shared.database import create_document_store
            self._document_store = create_document_store()
        return self._document_store

    @property
    def profiles(self) -> "IProfileService":
        """Get the profile service instance."""
        if self._profile_service is None:
            from modules.profiles.service import ProfileService
            self._profile_service = ProfileService(self.document_store)
        return self._profile_service

    @property
    def matchmaking(self) -> "IMatchmakingService":
        """Get the matchmaking service instance."""
        if self._matchmaking_service is None:
            from modules.matchmaking.service import MatchmakingService
            from shared.config import get_settings
            settings = get_settings()
            self._matchmaking_service = MatchmakingService(
                self.document_store,
                conflict_retries=settings.matchmaking_conflict_retries,
                stale_partner_retries=settings.matchmaking_stale_partner_retries,
                match_same_level=settings.matchmaking_match_same_level,
                status_poll_interval=settings.match_status_poll_interval,
            )
        return self._matchmaking_service

    @property
    def chat(self) -> "IChatService":
        """Get the chat service instance."""
        if self._chat_service is None:
            from modules.chat.service import ChatService
            from shared.config import get_settings
            settings = get_settings()
            self._chat_service = ChatService(
                self.document_store,
                preview_length=settings.chat_preview_length,
                moderation_words=settings.chat_moderation_words,
                max_attempts=settings.matchmaking_conflict_retries,
            )
        return self._chat_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._document_store = None
        self._profile_service = None
        self._matchmaking_service = None
        self._chat_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_document_store() -> "IDocumentStore":
    """FastAPI dependency for the document store."""
    return get_container().document_store


def get_profile_service() -> "IProfileService":
    """FastAPI dependency for profile service."""
    return get_container().profiles


def get_matchmaking_service() -> "IMatchmakingService":
    """FastAPI dependency for matchmaking service."""
    return get_container().matchmaking


def get_chat_service() -> "IChatService":
    """FastAPI dependency for chat service."""
    return get_container().chat
