"""
Shared infrastructure for Tandem backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client and document store factory
- documents: Document store contract and optimistic transactions
- exceptions: Base exception classes

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, create_document_store, reset_client_cache
from .documents import (
    IDocumentStore,
    InMemoryDocumentStore,
    Transaction,
    DocumentSnapshot,
    QueryFilter,
    FilterOp,
)
from .exceptions import (
    TandemError,
    NotFoundError,
    ValidationError,
    AuthorizationError,
    UnauthorizedOperationError,
    ConflictError,
    TransactionConflictError,
    ExternalServiceError,
)
from .models import AuthenticatedUser

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "create_document_store",
    "reset_client_cache",
    "IDocumentStore",
    "InMemoryDocumentStore",
    "Transaction",
    "DocumentSnapshot",
    "QueryFilter",
    "FilterOp",
    "TandemError",
    "NotFoundError",
    "ValidationError",
    "AuthorizationError",
    "UnauthorizedOperationError",
    "ConflictError",
    "TransactionConflictError",
    "ExternalServiceError",
    "AuthenticatedUser",
]
