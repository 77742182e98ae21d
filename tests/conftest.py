"""Shared test fixtures for typemate tests."""
import pytest
from unittest.mock import AsyncMock, MagicMock

SUPABASE_URL = "https://typemate-test.supabase.co"


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Mock environment variables for all tests."""
    monkeypatch.setenv("SUPABASE_URL", SUPABASE_URL)
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "test-service-key-12345")
    monkeypatch.setenv("OPENAI_API_KEY", "test-openai-key-12345")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-anthropic-key-12345")
    monkeypatch.delenv("TYPEMATE_DEV_MODE", raising=False)
    monkeypatch.delenv("TYPEMATE_API_KEY", raising=False)


@pytest.fixture
def mock_openai_client():
    """AsyncOpenAI stand-in returning a 1536-dim embedding."""

    def _create(dimension: int = 1536, side_effect=None):
        client = MagicMock()
        response = MagicMock()
        item = MagicMock()
        item.embedding = [0.1] * dimension
        response.data = [item]
        client.embeddings.create = AsyncMock(return_value=response, side_effect=side_effect)
        return client

    return _create


@pytest.fixture
def memory_row():
    """A typemate_memory row as returned by PostgREST."""
    return {
        "id": "mem-1",
        "user_id": "user-12345678",
        "archetype": "DRM",
        "relationship_level": 1,
        "user_name": None,
        "message_content": "I went hiking today",
        "message_role": "user",
        "conversation_id": "conv-1",
        "created_at": "2024-06-01T00:00:00+00:00",
    }


@pytest.fixture
def anyio_backend():
    """Run anyio-marked tests on asyncio, the only runtime the service targets."""
    return "asyncio"
