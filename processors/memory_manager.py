"""
Memory Manager
Basic conversation memory persistence on the typemate_memory table,
with embeddings attached in the background after each save.
"""
import asyncio
from datetime import datetime, timezone
from typing import Optional

from adapters import insert_row, select_rows, update_rows
from processors.vector_memory import MEMORY_TABLE, VectorMemoryEnhancement

SHORT_TERM_LIMIT = 10
MESSAGE_ROLES = ("user", "ai")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def row_to_memory(row: dict) -> dict:
    """Project a typemate_memory row onto the public memory shape."""
    return {
        "id": row["id"],
        "user_id": row.get("user_id"),
        "archetype": row.get("archetype"),
        "relationship_level": row.get("relationship_level") or 1,
        "user_name": row.get("user_name"),
        "message_content": row.get("message_content"),
        "message_role": row.get("message_role"),
        "conversation_id": row.get("conversation_id"),
        "created_at": row.get("created_at"),
    }


class MemoryManager:
    def __init__(self, vector: Optional[VectorMemoryEnhancement] = None):
        self._vector = vector
        self._pending = set()

    @property
    def vector(self) -> VectorMemoryEnhancement:
        # Created lazily so importing the module never needs OPENAI_API_KEY
        if self._vector is None:
            self._vector = VectorMemoryEnhancement()
        return self._vector

    async def save_memory(self, fields: dict, user_id: Optional[str] = None) -> Optional[dict]:
        """Insert one memory row. Returns None on failure."""
        try:
            row = await insert_row(MEMORY_TABLE, {**fields, "user_id": user_id or None})
            return row_to_memory(row)
        except Exception as e:
            print(f"[MemoryManager] Memory save error: {e}")
            return None

    async def get_short_term_memory(
        self,
        user_id: Optional[str] = None,
        conversation_id: Optional[str] = None,
    ) -> dict:
        """The ten most recent memories, optionally scoped to a user and conversation."""
        filters = {}
        if user_id:
            filters["user_id"] = f"eq.{user_id}"
        if conversation_id:
            filters["conversation_id"] = f"eq.{conversation_id}"

        try:
            rows = await select_rows(
                MEMORY_TABLE,
                filters=filters,
                order="created_at.desc",
                limit=SHORT_TERM_LIMIT,
            )
        except Exception as e:
            print(f"[MemoryManager] Short-term memory fetch error: {e}")
            rows = []

        memories = [row_to_memory(row) for row in rows]
        return {
            "memories": memories,
            "total_count": len(memories),
            "last_updated": _now_iso(),
        }

    async def get_memory_progress(self, user_id: Optional[str] = None) -> dict:
        """Summarize what has been learned about a user so far."""
        try:
            rows = await select_rows(
                MEMORY_TABLE,
                filters={"user_id": f"eq.{user_id or 'anonymous'}"},
                select="user_name,relationship_level,created_at",
                order="created_at.desc",
            )
        except Exception as e:
            print(f"[MemoryManager] Memory progress fetch error: {e}")
            return {
                "has_user_name": False,
                "relationship_level": 1,
                "conversation_count": 0,
                "last_interaction": _now_iso(),
            }

        return {
            "has_user_name": any(row.get("user_name") for row in rows),
            "relationship_level": max([row.get("relationship_level") or 1 for row in rows] + [1]),
            "conversation_count": len(rows),
            "last_interaction": rows[0].get("created_at") if rows else _now_iso(),
        }

    async def _update_user_rows(self, user_id: str, updates: dict, label: str) -> bool:
        try:
            await update_rows(MEMORY_TABLE, {"user_id": f"eq.{user_id}"}, updates)
            return True
        except Exception as e:
            print(f"[MemoryManager] {label} update error: {e}")
            return False

    async def update_user_name(self, user_id: str, user_name: str) -> bool:
        return await self._update_user_rows(user_id, {"user_name": user_name}, "User name")

    async def update_relationship_level(self, user_id: str, level: int) -> bool:
        return await self._update_user_rows(user_id, {"relationship_level": level}, "Relationship level")

    async def save_conversation_memory(
        self,
        message_content: str,
        message_role: str,
        archetype: str,
        conversation_id: str,
        user_id: Optional[str] = None,
        user_name: Optional[str] = None,
    ) -> Optional[dict]:
        """
        Save one chat message as a memory, then vectorize it in the background.

        The save result does not depend on the embedding succeeding.
        """
        memory = await self.save_memory(
            {
                "archetype": archetype,
                "relationship_level": 1,
                "user_name": user_name,
                "message_content": message_content,
                "message_role": message_role,
                "conversation_id": conversation_id,
            },
            user_id,
        )

        if memory and message_content:
            task = asyncio.create_task(self._embed_in_background(memory["id"], message_content))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        return memory

    async def _embed_in_background(self, memory_id: str, message_content: str) -> None:
        try:
            if not await self.vector.add_embedding_to_memory(memory_id, message_content):
                print(f"[MemoryManager] WARN: Vector enhancement skipped for memory {memory_id}")
        except Exception as e:
            print(f"[MemoryManager] WARN: Vector enhancement failed for memory {memory_id}: {e}")

    async def enhanced_memory_search(self, query: str, user_id: str, **options) -> list:
        return await self.vector.search_similar_memories(query, user_id, **options)

    async def improve_memory_system(self, user_id: str, batch_size: int = 5) -> dict:
        return await self.vector.vectorize_existing_memories(user_id, batch_size=batch_size)

    async def drain(self) -> None:
        """Wait for in-flight background embeddings (used on shutdown)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


memory_manager = MemoryManager()
