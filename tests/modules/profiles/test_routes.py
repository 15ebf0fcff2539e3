"""
Tests for profile API endpoints.
"""

import pytest
from unittest.mock import patch, AsyncMock
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_profile_service
from modules.profiles.exceptions import ProfileAlreadyExistsError, ProfileNotFoundError
from modules.profiles.models import UserProfile

from tests.conftest import BASE_TIME, TEST_JWT_SECRET, create_test_token


@pytest.fixture
def app():
    """Create a fresh app for each test."""
    return create_app()


@pytest.fixture
def mock_profile() -> UserProfile:
    return UserProfile(
        id="test-user-123",
        email="test@example.com",
        display_name="Anna",
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    )


@pytest.fixture
def headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_test_token()}"}


@patch("api.middleware.auth.get_settings")
class TestProfileRoutes:
    def test_create_profile(self, mock_settings, app, mock_profile, headers):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        mock_service = AsyncMock()
        mock_service.create_profile.return_value = mock_profile
        app.dependency_overrides[get_profile_service] = lambda: mock_service

        client = TestClient(app)
        response = client.post("/api/profiles", json={"display_name": "Anna"}, headers=headers)

        assert response.status_code == 201
        assert response.json()["display_name"] == "Anna"
        mock_service.create_profile.assert_awaited_once_with(
            "test-user-123",
            "test-user-123",
            email="test@example.com",
            display_name="Anna",
            photo_url=None,
        )

        app.dependency_overrides.clear()

    def test_create_profile_conflict(self, mock_settings, app, headers):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        mock_service = AsyncMock()
        mock_service.create_profile.side_effect = ProfileAlreadyExistsError("test-user-123")
        app.dependency_overrides[get_profile_service] = lambda: mock_service

        client = TestClient(app)
        response = client.post("/api/profiles", json={}, headers=headers)

        assert response.status_code == 409

        app.dependency_overrides.clear()

    def test_create_profile_rejects_short_name(self, mock_settings, app, headers):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        app.dependency_overrides[get_profile_service] = lambda: AsyncMock()

        client = TestClient(app)
        response = client.post("/api/profiles", json={"display_name": "A"}, headers=headers)

        assert response.status_code == 422

        app.dependency_overrides.clear()

    def test_create_profile_uses_provider_avatar(self, mock_settings, app, mock_profile):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        mock_service = AsyncMock()
        mock_service.create_profile.return_value = mock_profile
        app.dependency_overrides[get_profile_service] = lambda: mock_service
        token = create_test_token(avatar_url="https://cdn.example.com/anna.png")

        client = TestClient(app)
        response = client.post(
            "/api/profiles", json={}, headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 201
        kwargs = mock_service.create_profile.call_args.kwargs
        assert kwargs["photo_url"] == "https://cdn.example.com/anna.png"

        app.dependency_overrides.clear()

    def test_create_profile_photo_from_request(self, mock_settings, app, mock_profile):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        mock_service = AsyncMock()
        mock_service.create_profile.return_value = mock_profile
        app.dependency_overrides[get_profile_service] = lambda: mock_service
        token = create_test_token(avatar_url="https://cdn.example.com/anna.png")

        client = TestClient(app)
        response = client.post(
            "/api/profiles",
            json={"photo_url": "https://img.example.com/me.jpg"},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 201
        kwargs = mock_service.create_profile.call_args.kwargs
        assert kwargs["photo_url"] == "https://img.example.com/me.jpg"

        app.dependency_overrides.clear()

    def test_get_my_profile(self, mock_settings, app, mock_profile, headers):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        mock_service = AsyncMock()
        mock_service.get_profile.return_value = mock_profile
        app.dependency_overrides[get_profile_service] = lambda: mock_service

        client = TestClient(app)
        response = client.get("/api/profiles/me", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["is_looking_for_match"] is False
        assert data["current_match_id"] is None

        app.dependency_overrides.clear()

    def test_get_my_profile_missing(self, mock_settings, app, headers):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        mock_service = AsyncMock()
        mock_service.get_profile.side_effect = ProfileNotFoundError("test-user-123")
        app.dependency_overrides[get_profile_service] = lambda: mock_service

        client = TestClient(app)
        response = client.get("/api/profiles/me", headers=headers)

        assert response.status_code == 404

        app.dependency_overrides.clear()

    def test_update_my_profile(self, mock_settings, app, mock_profile, headers):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        mock_service = AsyncMock()
        mock_service.update_profile.return_value = mock_profile.model_copy(update={"bio": "Hallo"})
        app.dependency_overrides[get_profile_service] = lambda: mock_service

        client = TestClient(app)
        response = client.patch("/api/profiles/me", json={"bio": "Hallo"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["bio"] == "Hallo"
        update = mock_service.update_profile.call_args[0][2]
        assert update.model_dump(exclude_unset=True) == {"bio": "Hallo"}

        app.dependency_overrides.clear()

    def test_update_rejects_invalid_photo_url(self, mock_settings, app, headers):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        app.dependency_overrides[get_profile_service] = lambda: AsyncMock()

        client = TestClient(app)
        response = client.patch("/api/profiles/me", json={"photo_url": "not a url"}, headers=headers)

        assert response.status_code == 422

        app.dependency_overrides.clear()

    def test_update_rejects_null_display_name(self, mock_settings, app, headers):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        mock_service = AsyncMock()
        app.dependency_overrides[get_profile_service] = lambda: mock_service

        client = TestClient(app)
        response = client.patch("/api/profiles/me", json={"display_name": None}, headers=headers)

        assert response.status_code == 422
        mock_service.update_profile.assert_not_awaited()

        app.dependency_overrides.clear()

    def test_requires_authentication(self, mock_settings, app):
        client = TestClient(app)
        response = client.get("/api/profiles/me")
        assert response.status_code == 401
