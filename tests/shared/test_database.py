"""Tests for shared/database.py."""

import pytest
from unittest.mock import patch, MagicMock

from shared.database import (
    create_document_store,
    get_supabase_client,
    reset_client_cache,
)
from shared.documents import InMemoryDocumentStore
from shared.supabase_store import SupabaseDocumentStore


class TestSupabaseClient:
    def setup_method(self):
        """Reset cache before each test."""
        reset_client_cache()

    def teardown_method(self):
        reset_client_cache()

    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_get_supabase_client_creates_client(self, mock_settings, mock_create):
        """Should create client with service role key."""
        mock_settings.return_value.supabase_url = "https://test.supabase.co"
        mock_settings.return_value.supabase_service_role_key = "test-key"
        mock_create.return_value = MagicMock()

        client = get_supabase_client()

        mock_create.assert_called_once_with(
            "https://test.supabase.co",
            "test-key",
        )
        assert client is not None

    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_get_supabase_client_caches_client(self, mock_settings, mock_create):
        """Should cache the client and not recreate it."""
        mock_settings.return_value.supabase_url = "https://test.supabase.co"
        mock_settings.return_value.supabase_service_role_key = "test-key"
        mock_create.return_value = MagicMock()

        client1 = get_supabase_client()
        client2 = get_supabase_client()

        mock_create.assert_called_once()
        assert client1 is client2

    @patch("shared.database.get_settings")
    def test_get_supabase_client_raises_without_config(self, mock_settings):
        """Should raise if configuration is missing."""
        mock_settings.return_value.supabase_url = ""
        mock_settings.return_value.supabase_service_role_key = ""

        with pytest.raises(RuntimeError) as exc_info:
            get_supabase_client()
        assert "Supabase configuration missing" in str(exc_info.value)


class TestCreateDocumentStore:
    def teardown_method(self):
        reset_client_cache()

    @patch("shared.database.get_settings")
    def test_memory_backend(self, mock_settings):
        mock_settings.return_value.storage_backend = "memory"

        store = create_document_store()

        assert isinstance(store, InMemoryDocumentStore)

    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_supabase_backend(self, mock_settings, mock_create):
        mock_settings.return_value.storage_backend = "supabase"
        mock_settings.return_value.supabase_url = "https://test.supabase.co"
        mock_settings.return_value.supabase_service_role_key = "test-key"
        mock_create.return_value = MagicMock()

        store = create_document_store()

        assert isinstance(store, SupabaseDocumentStore)
