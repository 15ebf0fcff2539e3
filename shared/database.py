"""
Storage factories.

Provides the Supabase service-role client and the document store the
services run against, chosen by the STORAGE_BACKEND setting.
"""

import logging
from typing import Optional
from supabase import create_client, Client

from .config import get_settings
from .documents import IDocumentStore, InMemoryDocumentStore

logger = logging.getLogger(__name__)

# Module-level client cache
_service_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    The backend verifies the caller itself (see api.middleware.auth) and
    then needs full access to the documents table.

    Returns:
        Supabase client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def create_document_store() -> IDocumentStore:
    """
    Create the document store for the configured backend.

    Returns:
        SupabaseDocumentStore for "supabase", InMemoryDocumentStore for "memory"
    """
    settings = get_settings()
    if settings.storage_backend == "memory":
        logger.warning("Using in-memory document store; data is lost on restart")
        return InMemoryDocumentStore()

    from .supabase_store import SupabaseDocumentStore
    return SupabaseDocumentStore(get_supabase_client())


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _service_client
    _service_client = None
