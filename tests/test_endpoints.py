"""
Endpoint tests for the TypeMate HTTP API.

Memory operations are replaced on the memory_manager singleton and the
chat flow on main.generate_reply, so no Supabase, OpenAI or Anthropic
calls leave the process.
"""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

import main
from processors.memory_manager import memory_manager

SAVED_MEMORY = {
    "id": "mem-1",
    "user_id": "user-1",
    "archetype": "DRM",
    "relationship_level": 1,
    "user_name": None,
    "message_content": "hello",
    "message_role": "user",
    "conversation_id": "conv-1",
    "created_at": "2024-06-01T00:00:00+00:00",
}


@pytest.fixture
def vector():
    service = MagicMock()
    service.get_service_status.return_value = {
        "initialized": True,
        "has_openai": True,
        "model": "text-embedding-3-small",
    }
    return service


@pytest.fixture
def client(monkeypatch, vector):
    """TestClient with the memory layer stubbed out."""
    monkeypatch.setattr(memory_manager, "_vector", vector)
    monkeypatch.setattr(memory_manager, "save_conversation_memory", AsyncMock(return_value=SAVED_MEMORY))
    monkeypatch.setattr(memory_manager, "update_user_name", AsyncMock(return_value=True))
    monkeypatch.setattr(memory_manager, "update_relationship_level", AsyncMock(return_value=True))
    monkeypatch.setattr(memory_manager, "enhanced_memory_search", AsyncMock(return_value=[]))
    monkeypatch.setattr(
        memory_manager,
        "improve_memory_system",
        AsyncMock(return_value={"success": 2, "failed": 1, "total": 3}),
    )
    monkeypatch.setattr(
        memory_manager,
        "get_short_term_memory",
        AsyncMock(return_value={"memories": [SAVED_MEMORY], "total_count": 1, "last_updated": "now"}),
    )
    monkeypatch.setattr(
        memory_manager,
        "get_memory_progress",
        AsyncMock(return_value={
            "has_user_name": False,
            "relationship_level": 1,
            "conversation_count": 0,
            "last_interaction": "now",
        }),
    )

    with TestClient(main.app, raise_server_exceptions=False) as c:
        yield c


def test_all_endpoints_registered():
    """Route inspection, no lifespan needed."""
    routes = {
        (r.path, method)
        for r in main.app.routes
        if hasattr(r, "methods")
        for method in r.methods
    }

    expected = {
        ("/health", "GET"),
        ("/status", "GET"),
        ("/chat", "POST"),
        ("/memory", "GET"),
        ("/memory", "POST"),
        ("/memory", "PUT"),
        ("/memory", "PATCH"),
        ("/memory/search", "POST"),
        ("/memory/vectorize/{user_id}", "POST"),
        ("/memory/status", "GET"),
    }

    for route in expected:
        assert route in routes, f"Route {route} not registered"


# ============================================================================
# health / status
# ============================================================================

def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "typemate"
    assert "timestamp" in data


def test_status_reports_configuration(client, monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY")
    monkeypatch.setenv("CLAUDE_API_KEY", "legacy-key")

    data = client.get("/status").json()

    assert data["supabase_configured"] is True
    assert data["openai_configured"] is True
    assert data["anthropic_configured"] is True
    assert data["dev_mode"] is False


# ============================================================================
# /chat
# ============================================================================

CHAT_BODY = {"message": "hi", "user_type": "ARC-AS", "ai_personality": "BAR"}


def test_chat_success(client, monkeypatch):
    reply = {
        "content": "Hello!",
        "emotion": "happy",
        "emotion_analysis": None,
        "tokens_used": 42,
        "fallback": False,
    }
    monkeypatch.setattr(main, "generate_reply", AsyncMock(return_value=reply))

    response = client.post("/chat", json=CHAT_BODY)

    assert response.status_code == 200
    assert response.json() == reply


@pytest.mark.parametrize("missing", ["message", "user_type", "ai_personality"])
def test_chat_required_fields(client, missing):
    body = {k: v for k, v in CHAT_BODY.items() if k != missing}

    response = client.post("/chat", json=body)

    assert response.status_code == 400
    assert response.json()["detail"] == "Required fields missing"


def test_chat_unknown_archetype(client):
    response = client.post("/chat", json={**CHAT_BODY, "ai_personality": "XYZ"})

    assert response.status_code == 400
    assert "Unknown archetype" in response.json()["detail"]


def test_chat_model_failure_uses_fallback(client, monkeypatch):
    from processors import chat_service

    def broken_client():
        raise Exception("no credits")

    monkeypatch.setattr(chat_service, "_get_client", broken_client)

    response = client.post("/chat", json=CHAT_BODY)

    assert response.status_code == 200
    data = response.json()
    assert data["fallback"] is True
    assert data["tokens_used"] == 0
    assert data["content"]


def test_chat_fallback_failure_is_500(client, monkeypatch):
    monkeypatch.setattr(main, "generate_reply", AsyncMock(side_effect=RuntimeError("templates broken")))

    response = client.post("/chat", json=CHAT_BODY)

    assert response.status_code == 500
    assert response.json()["detail"] == "AI service temporarily unavailable"


# ============================================================================
# /memory
# ============================================================================

def test_get_memory_short_term(client):
    response = client.get("/memory", params={"user_id": "user-1", "conversation_id": "conv-1"})

    assert response.status_code == 200
    assert response.json()["data"]["total_count"] == 1
    memory_manager.get_short_term_memory.assert_awaited_once_with("user-1", "conv-1")


def test_get_memory_progress(client):
    response = client.get("/memory", params={"type": "progress", "user_id": "user-1"})

    assert response.status_code == 200
    assert response.json()["data"]["relationship_level"] == 1


def test_get_memory_invalid_type(client):
    response = client.get("/memory", params={"type": "long-term"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid type parameter"


def test_save_memory(client):
    body = {
        "message_content": "hello",
        "message_role": "user",
        "archetype": "DRM",
        "conversation_id": "conv-1",
        "user_id": "user-1",
    }

    response = client.post("/memory", json=body)

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": SAVED_MEMORY}
    memory_manager.save_conversation_memory.assert_awaited_once_with(
        "hello", "user", "DRM", "conv-1", "user-1", None
    )


def test_save_memory_missing_fields(client):
    response = client.post("/memory", json={"message_content": "hello", "message_role": "user"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields"


def test_save_memory_invalid_role(client):
    body = {"message_content": "hello", "message_role": "system", "archetype": "DRM", "conversation_id": "c"}

    response = client.post("/memory", json=body)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid message role"


def test_save_memory_store_failure(client):
    memory_manager.save_conversation_memory.return_value = None
    body = {"message_content": "hello", "message_role": "ai", "archetype": "DRM", "conversation_id": "c"}

    response = client.post("/memory", json=body)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to save memory"


def test_update_user_name(client):
    response = client.put("/memory", json={"user_id": "user-1", "type": "user-name", "value": "Aki"})

    assert response.status_code == 200
    assert response.json()["message"] == "user-name updated successfully"
    memory_manager.update_user_name.assert_awaited_once_with("user-1", "Aki")


@pytest.mark.parametrize("value", ["", 5, None])
def test_update_user_name_invalid(client, value):
    response = client.put("/memory", json={"user_id": "user-1", "type": "user-name", "value": value})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid user name"


def test_update_relationship_level(client):
    response = client.put("/memory", json={"user_id": "user-1", "type": "relationship-level", "value": 4})

    assert response.status_code == 200
    memory_manager.update_relationship_level.assert_awaited_once_with("user-1", 4)


@pytest.mark.parametrize("value", [0, 7, "3", True, 2.5])
def test_update_relationship_level_invalid(client, value):
    response = client.put("/memory", json={"user_id": "user-1", "type": "relationship-level", "value": value})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid relationship level"


def test_update_invalid_type(client):
    response = client.put("/memory", json={"user_id": "user-1", "type": "mood", "value": "x"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid update type"


def test_update_store_failure(client):
    memory_manager.update_user_name.return_value = False

    response = client.put("/memory", json={"user_id": "user-1", "type": "user-name", "value": "Aki"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Update failed"


def test_batch_save_skips_invalid_messages(client):
    body = {
        "archetype": "DRM",
        "conversation_id": "conv-1",
        "user_id": "user-1",
        "messages": [
            {"content": "hello", "role": "user"},
            {"content": "", "role": "user"},
            {"content": "hi!", "role": "ai"},
            {"content": "bad role", "role": "system"},
        ],
    }

    response = client.patch("/memory", json=body)

    assert response.status_code == 200
    data = response.json()
    assert data["saved"] == 2
    assert data["total"] == 4
    assert memory_manager.save_conversation_memory.await_count == 2


def test_batch_save_skips_malformed_items(client):
    """Non-object items and non-string content are skipped, the rest is saved."""
    body = {
        "archetype": "DRM",
        "conversation_id": "conv-1",
        "messages": [
            {"content": "hello", "role": "user", "user_name": 7},
            {"content": 42, "role": "user"},
            "junk",
        ],
    }

    response = client.patch("/memory", json=body)

    assert response.status_code == 200
    data = response.json()
    assert data["saved"] == 1
    assert data["total"] == 3
    memory_manager.save_conversation_memory.assert_awaited_once_with(
        "hello", "user", "DRM", "conv-1", None, None
    )


def test_batch_save_invalid_data(client):
    response = client.patch("/memory", json={"archetype": "DRM", "conversation_id": "conv-1"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid batch data"


# ============================================================================
# vector memory endpoints
# ============================================================================

def test_memory_search(client):
    memory_manager.enhanced_memory_search.return_value = [{"id": "a", "similarity": 0.9}]

    response = client.post("/memory/search", json={"query": "hiking", "user_id": "user-1", "limit": 3})

    assert response.status_code == 200
    assert response.json()["total"] == 1
    memory_manager.enhanced_memory_search.assert_awaited_once_with(
        "hiking", "user-1", limit=3, special_only=False, min_similarity=0.7
    )


@pytest.mark.parametrize("body", [
    {"user_id": "user-1"},
    {"query": "hiking"},
    {"query": "   ", "user_id": "user-1"},
])
def test_memory_search_missing_fields(client, body):
    response = client.post("/memory/search", json=body)

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields"
    memory_manager.enhanced_memory_search.assert_not_called()


@pytest.mark.parametrize("limit", [0, 101])
def test_memory_search_limit_bounds(client, limit):
    response = client.post("/memory/search", json={"query": "hiking", "user_id": "user-1", "limit": limit})

    assert response.status_code == 400
    memory_manager.enhanced_memory_search.assert_not_called()


def test_vectorize(client):
    response = client.post("/memory/vectorize/user-1", params={"batch_size": 10})

    assert response.status_code == 200
    assert response.json()["data"] == {"success": 2, "failed": 1, "total": 3}
    memory_manager.improve_memory_system.assert_awaited_once_with("user-1", batch_size=10)


def test_vectorize_unexpected_error_is_500(client):
    memory_manager.improve_memory_system.side_effect = Exception("boom")

    response = client.post("/memory/vectorize/user-1")

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"


def test_vectorize_batch_size_bounds(client):
    response = client.post("/memory/vectorize/user-1", params={"batch_size": 0})
    assert response.status_code == 400


def test_memory_status_requires_api_key(client):
    response = client.get("/memory/status")

    assert response.status_code == 403
    assert response.json()["detail"] == "Security validation failed"


def test_memory_status_with_api_key(client, monkeypatch):
    monkeypatch.setenv("TYPEMATE_API_KEY", "secret")

    response = client.get("/memory/status", headers={"X-API-Key": "secret"})

    assert response.status_code == 200
    data = response.json()
    assert data["memory_layers"]["vector_search"]["status"] == "active"
    assert data["overall"] == {"healthy": True, "degraded": False}


def test_memory_status_non_ascii_api_key(client, monkeypatch):
    monkeypatch.setenv("TYPEMATE_API_KEY", "secret")

    response = client.get("/memory/status", headers={"X-API-Key": "sécret".encode("latin-1")})

    assert response.status_code == 403


def test_memory_status_wrong_api_key(client, monkeypatch):
    monkeypatch.setenv("TYPEMATE_API_KEY", "secret")

    response = client.get("/memory/status", headers={"X-API-Key": "wrong"})

    assert response.status_code == 403


def test_memory_status_dev_mode_degraded(client, monkeypatch, vector):
    monkeypatch.setenv("TYPEMATE_DEV_MODE", "true")
    vector.get_service_status.return_value = {
        "initialized": False,
        "has_openai": False,
        "model": "text-embedding-3-small",
    }

    response = client.get("/memory/status")

    assert response.status_code == 200
    data = response.json()
    assert data["memory_layers"]["vector_search"]["status"] == "inactive"
    assert data["overall"] == {"healthy": False, "degraded": True}
