"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
from itertools import count
from typing import Optional
import jwt  # PyJWT

from api.dependencies import reset_container
from shared.config import get_settings
from shared.documents import InMemoryDocumentStore
from modules.profiles.models import ProficiencyLevel


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    email_verified: bool = True,
    avatar_url: Optional[str] = None,
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        email_verified: Whether the email should be marked as verified
        avatar_url: Avatar URL the sign-in provider put in user_metadata

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "email_confirmed_at": now.isoformat() if email_verified else None,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    if avatar_url:
        payload["user_metadata"] = {"avatar_url": avatar_url}
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


class FakeClock:
    """Deterministic clock: each call is one second after the previous."""

    def __init__(self, start: datetime = BASE_TIME):
        self._ticks = count()
        self._start = start

    def __call__(self) -> datetime:
        return self._start + timedelta(seconds=next(self._ticks))


def sequential_ids(prefix: str = "match"):
    """ID factory yielding prefix-1, prefix-2, ..."""
    counter = count(1)
    return lambda: f"{prefix}-{next(counter)}"


def profile_document(
    display_name: Optional[str] = None,
    level: Optional[ProficiencyLevel] = None,
    is_looking_for_match: bool = False,
    current_match_id: Optional[str] = None,
    photo_url: Optional[str] = None,
) -> dict:
    """Raw profile document data as stored in the profiles collection."""
    now = BASE_TIME.isoformat()
    return {
        "email": None,
        "display_name": display_name,
        "photo_url": photo_url,
        "bio": None,
        "proficiency_level": level.value if level else None,
        "is_looking_for_match": is_looking_for_match,
        "current_match_id": current_match_id,
        "created_at": now,
        "updated_at": now,
    }


async def seed(store: InMemoryDocumentStore, collection: str, doc_id: str, data: dict) -> None:
    """Write a document directly, bypassing the services."""
    async with store.transaction() as tx:
        tx.set(collection, doc_id, data)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the service container and settings cache around each test."""
    reset_container()
    get_settings.cache_clear()
    yield
    reset_container()
    get_settings.cache_clear()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Fresh in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
