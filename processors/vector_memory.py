"""
Vector Memory Enhancement
Attaches OpenAI embeddings to typemate_memory rows and searches them
through the search_memories pgvector RPC.

Every method reports failure as a sentinel (None / False / [] / zero stats).
Saving a memory must never fail because vectorization did.
"""
import asyncio
import os
from datetime import datetime, timezone
from typing import List, Optional

from openai import AsyncOpenAI

from adapters import call_rpc, select_rows, update_rows

MEMORY_TABLE = "typemate_memory"
SEARCH_RPC = "search_memories"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"  # 1536 dimensions
MAX_EMBEDDING_CHARS = 8000
BACKFILL_DELAY_SECONDS = 0.1


def to_pgvector(embedding: List[float]) -> str:
    """Serialize an embedding to pgvector's text input form."""
    return "[" + ",".join(str(value) for value in embedding) + "]"


def _short_id(value: str) -> str:
    return f"{value[:8]}..." if value else "anonymous"


class VectorMemoryEnhancement:
    """Embedding, similarity search and backfill for conversation memories."""

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: Optional[str] = None):
        self.model = model or os.getenv("EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL)
        self.client = client
        if self.client is None:
            api_key = os.getenv("OPENAI_API_KEY")
            if api_key:
                self.client = AsyncOpenAI(api_key=api_key)
            else:
                print("[VectorMemory] WARN: OPENAI_API_KEY not set - vector search disabled")

    async def generate_embedding(self, text: str) -> Optional[List[float]]:
        """
        Embed text with the configured OpenAI model.

        Input is truncated to MAX_EMBEDDING_CHARS. Returns None for empty
        input, a missing client, or any API failure.
        """
        if not text or not text.strip():
            print("[VectorMemory] WARN: Empty text provided for embedding")
            return None

        if self.client is None:
            return None

        truncated = text[:MAX_EMBEDDING_CHARS]
        print(f"[VectorMemory] Generating embedding original_length={len(text)} truncated_length={len(truncated)} preview={truncated[:50]!r}")

        try:
            response = await self.client.embeddings.create(
                model=self.model,
                input=truncated,
            )
            if not response.data:
                print("[VectorMemory] No embedding returned from OpenAI")
                return None

            embedding = response.data[0].embedding
            print(f"[VectorMemory] Embedding generated dimensions={len(embedding)}")
            return embedding

        except Exception as e:
            print(f"[VectorMemory] Embedding generation failed: {e}")
            return None

    async def add_embedding_to_memory(self, memory_id: str, message_content: str) -> bool:
        """Embed message_content and store it on the memory row with the given id."""
        if not memory_id or not message_content:
            print("[VectorMemory] WARN: Invalid parameters for add_embedding_to_memory")
            return False

        try:
            embedding = await self.generate_embedding(message_content)
            if not embedding:
                print(f"[VectorMemory] Skipping vector update for memory {memory_id}")
                return False

            await update_rows(
                MEMORY_TABLE,
                {"id": f"eq.{memory_id}"},
                {
                    "embedding": to_pgvector(embedding),
                    "embedding_model": self.model,
                    "embedding_created_at": datetime.now(timezone.utc).isoformat(),
                },
            )

            print(f"[VectorMemory] Embedding saved for memory {memory_id}")
            return True

        except Exception as e:
            print(f"[VectorMemory] Failed to save embedding for memory {memory_id}: {e}")
            return False

    async def search_similar_memories(
        self,
        query_text: str,
        user_id: str,
        limit: int = 5,
        special_only: bool = False,
        min_similarity: float = 0.7,
    ) -> List[dict]:
        """
        Cosine-similarity search over a user's memories.

        The RPC returns up to `limit` rows; rows below min_similarity are
        dropped here, after the call returns, keeping the RPC order.
        """
        if not query_text or not user_id:
            print("[VectorMemory] WARN: Invalid parameters for search_similar_memories")
            return []

        print(f"[VectorMemory] Searching similar memories user={_short_id(user_id)} limit={limit} special_only={special_only} query={query_text[:50]!r}")

        try:
            query_embedding = await self.generate_embedding(query_text)
            if not query_embedding:
                print("[VectorMemory] WARN: Failed to generate query embedding")
                return []

            rows = await call_rpc(
                SEARCH_RPC,
                {
                    "query_embedding": to_pgvector(query_embedding),
                    "target_user_id": user_id,
                    "match_count": limit,
                    "special_only": special_only,
                },
            )

            results = [
                row for row in rows
                if row.get("similarity") is not None and row["similarity"] >= min_similarity
            ]

            top = results[0]["similarity"] if results else 0
            print(f"[VectorMemory] Vector search completed total={len(rows)} filtered={len(results)} top_similarity={top}")
            return results

        except Exception as e:
            print(f"[VectorMemory] Vector search failed: {e}")
            return []

    async def vectorize_existing_memories(self, user_id: str, batch_size: int = 5) -> dict:
        """
        Embed one capped batch of the user's memories that have no embedding.

        Rows are processed one at a time with a fixed delay between calls.
        A failed row is counted and the loop moves on.
        """
        stats = {"success": 0, "failed": 0, "total": 0}

        if not user_id:
            print("[VectorMemory] user_id required for vectorize_existing_memories")
            return stats

        try:
            memories = await select_rows(
                MEMORY_TABLE,
                filters={
                    "user_id": f"eq.{user_id}",
                    "embedding": "is.null",
                    "message_content": "not.is.null",
                },
                select="id,message_content",
                limit=batch_size,
            )
        except Exception as e:
            print(f"[VectorMemory] Failed to fetch memories for vectorization: {e}")
            return stats

        if not memories:
            print(f"[VectorMemory] No memories to vectorize for user {_short_id(user_id)}")
            return stats

        print(f"[VectorMemory] Found {len(memories)} memories to vectorize")

        for memory in memories:
            try:
                if await self.add_embedding_to_memory(memory["id"], memory.get("message_content") or ""):
                    stats["success"] += 1
                else:
                    stats["failed"] += 1
            except Exception as e:
                print(f"[VectorMemory] Failed to vectorize memory {memory.get('id')}: {e}")
                stats["failed"] += 1

            await asyncio.sleep(BACKFILL_DELAY_SECONDS)  # Rate limit

        stats["total"] = len(memories)
        print(f"[VectorMemory] Vectorization batch completed success={stats['success']} failed={stats['failed']} total={stats['total']}")
        return stats

    def get_service_status(self) -> dict:
        return {
            "initialized": self.client is not None,
            "has_openai": self.client is not None,
            "model": self.model,
        }
