"""
TypeMate Companion Service
Archetype-based AI companion chat with Supabase-backed conversation memory
+ OpenAI embeddings and pgvector similarity search over memories
+ Template personality fallback when the chat model is unavailable
"""
import os
import secrets
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Optional, List

from fastapi import FastAPI, HTTPException, Header
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()

from adapters import is_configured as supabase_configured
from processors.chat_service import generate_reply
from processors.memory_manager import MESSAGE_ROLES, memory_manager


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle with configuration report."""
    print("[Startup] TypeMate service starting")

    if not supabase_configured():
        print("[Startup] Warning: Supabase not configured - memory endpoints will fail")
    if not os.getenv("OPENAI_API_KEY"):
        print("[Startup] Warning: OPENAI_API_KEY not set - vector search disabled")
    if not (os.getenv("ANTHROPIC_API_KEY") or os.getenv("CLAUDE_API_KEY")):
        print("[Startup] Warning: No Anthropic key - chat will use the personality engine")

    yield  # Application runs here

    # Let in-flight embeddings finish before the loop closes
    await memory_manager.drain()
    print("[Shutdown] Cleanup complete")


app = FastAPI(title="TypeMate Companion Service", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def is_dev_mode() -> bool:
    return os.getenv("TYPEMATE_DEV_MODE", "").lower() == "true"


def internal_error(label: str, e: Exception) -> HTTPException:
    print(f"[TypeMate] {label} error: {e}")
    return HTTPException(status_code=500, detail="Internal server error")


# ============================================================================
# REQUEST MODELS
# ============================================================================

class ChatRequest(BaseModel):
    message: Optional[str] = None
    user_type: Optional[str] = None
    ai_personality: Optional[str] = None
    user_id: Optional[str] = None
    relationship_type: str = "friend"
    message_history: List[str] = []
    conversation_turn: int = 0
    relationship_level: int = 1
    chat_count: int = 0
    personal_info: dict = {}
    important_memories: List[dict] = []
    related_memories: List[dict] = []


class SaveMemoryRequest(BaseModel):
    message_content: Optional[str] = None
    message_role: Optional[str] = None
    archetype: Optional[str] = None
    conversation_id: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None


class UpdateMemoryRequest(BaseModel):
    user_id: Optional[str] = None
    type: Optional[str] = None
    value: Any = None


class BatchSaveRequest(BaseModel):
    # Items are checked one by one in batch_save_memory
    messages: Optional[List[Any]] = None
    user_id: Optional[str] = None
    archetype: Optional[str] = None
    conversation_id: Optional[str] = None


class MemorySearchRequest(BaseModel):
    query: Optional[str] = None
    user_id: Optional[str] = None
    limit: int = 5
    special_only: bool = False
    min_similarity: float = 0.7


# ============================================================================
# HEALTH / STATUS
# ============================================================================

@app.get("/health")
async def health():
    return {
        "status": "ok",
        "service": "typemate",
        "timestamp": datetime.utcnow().isoformat(),
    }


@app.get("/status")
async def status():
    """Configuration flags for monitoring"""
    return {
        "service": "typemate",
        "supabase_configured": supabase_configured(),
        "openai_configured": bool(os.getenv("OPENAI_API_KEY")),
        "anthropic_configured": bool(os.getenv("ANTHROPIC_API_KEY") or os.getenv("CLAUDE_API_KEY")),
        "dev_mode": is_dev_mode(),
        "timestamp": datetime.utcnow().isoformat(),
    }


# ============================================================================
# CHAT
# ============================================================================

@app.post("/chat")
async def chat(request: ChatRequest):
    """
    Companion chat reply.

    Flow:
    1. Validate archetype codes
    2. Pull related memories by vector search (when user_id is given)
    3. Build the persona prompt and call Claude
    4. On model failure, answer from the personality engine (fallback=true)
    """
    if not request.message or not request.user_type or not request.ai_personality:
        raise HTTPException(status_code=400, detail="Required fields missing")

    try:
        return await generate_reply(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        print(f"[Chat] Fallback error: {e}")
        raise HTTPException(status_code=500, detail="AI service temporarily unavailable")


# ============================================================================
# MEMORY CRUD
# ============================================================================

@app.get("/memory")
async def get_memory(
    type: str = "short-term",
    user_id: Optional[str] = None,
    conversation_id: Optional[str] = None,
):
    if type not in ("short-term", "progress"):
        raise HTTPException(status_code=400, detail="Invalid type parameter")

    try:
        if type == "short-term":
            data = await memory_manager.get_short_term_memory(user_id, conversation_id)
        else:
            data = await memory_manager.get_memory_progress(user_id)
    except Exception as e:
        raise internal_error("Memory fetch", e)

    return {"success": True, "data": data}


@app.post("/memory")
async def save_memory(request: SaveMemoryRequest):
    if not (request.message_content and request.message_role and request.archetype and request.conversation_id):
        raise HTTPException(status_code=400, detail="Missing required fields")

    if request.message_role not in MESSAGE_ROLES:
        raise HTTPException(status_code=400, detail="Invalid message role")

    try:
        memory = await memory_manager.save_conversation_memory(
            request.message_content,
            request.message_role,
            request.archetype,
            request.conversation_id,
            request.user_id,
            request.user_name,
        )
    except Exception as e:
        raise internal_error("Memory save", e)

    if not memory:
        raise HTTPException(status_code=500, detail="Failed to save memory")

    return {"success": True, "data": memory}


@app.put("/memory")
async def update_memory(request: UpdateMemoryRequest):
    if not request.user_id or not request.type:
        raise HTTPException(status_code=400, detail="Missing required fields")

    if request.type == "user-name":
        if not request.value or not isinstance(request.value, str):
            raise HTTPException(status_code=400, detail="Invalid user name")
        update = memory_manager.update_user_name

    elif request.type == "relationship-level":
        level = request.value
        if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= 6:
            raise HTTPException(status_code=400, detail="Invalid relationship level")
        update = memory_manager.update_relationship_level

    else:
        raise HTTPException(status_code=400, detail="Invalid update type")

    try:
        success = await update(request.user_id, request.value)
    except Exception as e:
        raise internal_error("Memory update", e)

    if not success:
        raise HTTPException(status_code=500, detail="Update failed")

    return {"success": True, "message": f"{request.type} updated successfully"}


def is_valid_batch_message(msg: Any) -> bool:
    if not isinstance(msg, dict):
        return False
    content = msg.get("content")
    return isinstance(content, str) and bool(content.strip()) and msg.get("role") in MESSAGE_ROLES


@app.patch("/memory")
async def batch_save_memory(request: BatchSaveRequest):
    """Save several messages at once; invalid messages are skipped."""
    if request.messages is None or not request.archetype or not request.conversation_id:
        raise HTTPException(status_code=400, detail="Invalid batch data")

    results = []
    try:
        for msg in request.messages:
            if not is_valid_batch_message(msg):
                continue

            user_name = msg.get("user_name")
            memory = await memory_manager.save_conversation_memory(
                msg["content"],
                msg["role"],
                request.archetype,
                request.conversation_id,
                request.user_id,
                user_name if isinstance(user_name, str) else None,
            )
            if memory:
                results.append(memory)
    except Exception as e:
        raise internal_error("Batch save", e)

    return {
        "success": True,
        "data": results,
        "saved": len(results),
        "total": len(request.messages),
    }


# ============================================================================
# VECTOR MEMORY
# ============================================================================

@app.post("/memory/search")
async def search_memory(request: MemorySearchRequest):
    if not request.query or not request.query.strip() or not request.user_id:
        raise HTTPException(status_code=400, detail="Missing required fields")
    if request.limit < 1 or request.limit > 100:
        raise HTTPException(status_code=400, detail="limit must be between 1 and 100")

    try:
        results = await memory_manager.enhanced_memory_search(
            request.query,
            request.user_id,
            limit=request.limit,
            special_only=request.special_only,
            min_similarity=request.min_similarity,
        )
    except Exception as e:
        raise internal_error("Memory search", e)

    return {"success": True, "data": results, "total": len(results)}


@app.post("/memory/vectorize/{user_id}")
async def vectorize_memory(user_id: str, batch_size: int = 5):
    """Embed one batch of the user's memories that have no embedding yet."""
    if batch_size < 1 or batch_size > 100:
        raise HTTPException(status_code=400, detail="batch_size must be between 1 and 100")

    try:
        stats = await memory_manager.improve_memory_system(user_id, batch_size=batch_size)
    except Exception as e:
        raise internal_error("Vectorization", e)

    return {"success": True, "data": stats}


@app.get("/memory/status")
async def memory_status(x_api_key: Optional[str] = Header(default=None)):
    """Memory layer status. Requires X-API-Key outside dev mode."""
    if not is_dev_mode():
        expected = os.getenv("TYPEMATE_API_KEY")
        if not expected or not secrets.compare_digest((x_api_key or "").encode(), expected.encode()):
            raise HTTPException(status_code=403, detail="Security validation failed")

    try:
        vector_status = memory_manager.vector.get_service_status()
        store_ready = supabase_configured()

        response = {
            "status": "ok",
            "timestamp": datetime.utcnow().isoformat(),
            "memory_layers": {
                "short_term": {
                    "status": "active" if store_ready else "inactive",
                    "description": "Latest 10 messages per conversation",
                },
                "medium_term": {
                    "status": "active" if store_ready else "inactive",
                    "description": "Persistent conversation records in Supabase",
                },
                "vector_search": {
                    "status": "active" if vector_status["has_openai"] else "inactive",
                    "details": vector_status,
                    "description": "Semantic similarity search over memories",
                },
            },
            "overall": {
                "healthy": store_ready and vector_status["has_openai"],
                "degraded": not (store_ready and vector_status["has_openai"]),
            },
        }
        print(f"[TypeMate] Memory status healthy={response['overall']['healthy']}")
        return response

    except Exception as e:
        print(f"[TypeMate] Memory status check failed: {e}")
        raise HTTPException(status_code=500, detail="Memory system status unavailable")
