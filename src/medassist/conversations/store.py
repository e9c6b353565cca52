"""
Conversation history stores.

Pattern: Protocol → Production impl → Test double → Factory

- PgConversationStore: medical_conversations / medical_messages tables
- InMemoryConversationStore: dict-backed double for tests and local runs

Deleting a conversation deletes its messages. Unknown ids raise
NotFoundError for updates and deletes.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from psycopg import AsyncConnection, sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from medassist.core.errors import NotFoundError
from medassist.schemas.conversation import (
    MAX_MESSAGE_LENGTH,
    Conversation,
    ConversationMessage,
    normalize_title,
)

if TYPE_CHECKING:
    from medassist.config import Settings

logger = logging.getLogger(__name__)

_ROLES = ("user", "assistant")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _check_role(role: str) -> None:
    if role not in _ROLES:
        raise ValueError(f"Invalid message role: {role!r}")


# ---------------------------------------------------------------------------
# CONFIGURATION
# ---------------------------------------------------------------------------


@dataclass
class ConversationStoreConfig:
    """Configuration for the conversation store."""

    connection_string: str = "postgresql://localhost/medassist"
    conversations_table: str = "medical_conversations"
    messages_table: str = "medical_messages"
    connect_timeout: int = 10


# ---------------------------------------------------------------------------
# POSTGRES STORE (Production)
# ---------------------------------------------------------------------------


class PgConversationStore:
    """PostgreSQL conversation history using psycopg 3 (async)."""

    def __init__(self, config: ConversationStoreConfig):
        self.config = config
        self._conn: AsyncConnection | None = None
        self._connect_lock = asyncio.Lock()

    async def connect(self) -> None:
        async with self._connect_lock:
            if self._conn is not None:
                return
            self._conn = await AsyncConnection.connect(
                self.config.connection_string,
                autocommit=True,
                connect_timeout=self.config.connect_timeout,
                row_factory=dict_row,
            )

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def _execute(self, query: sql.Composable, params: dict[str, Any]) -> list[dict]:
        if self._conn is None:
            await self.connect()
        async with self._conn.cursor() as cur:
            await cur.execute(query, params)
            if cur.description is None:
                return []
            return await cur.fetchall()

    def _sql(self, template: str) -> sql.Composed:
        return sql.SQL(template).format(
            conversations=sql.Identifier(self.config.conversations_table),
            messages=sql.Identifier(self.config.messages_table),
        )

    async def create_schema(self) -> None:
        """Create both history tables."""
        await self._execute(
            self._sql(
                """
                CREATE TABLE IF NOT EXISTS {conversations} (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
                )
                """
            ),
            {},
        )
        await self._execute(
            self._sql(
                """
                CREATE TABLE IF NOT EXISTS {messages} (
                    id TEXT PRIMARY KEY,
                    conversation_id TEXT NOT NULL REFERENCES {conversations} (id) ON DELETE CASCADE,
                    role TEXT NOT NULL CHECK (role IN ('user', 'assistant')),
                    content TEXT NOT NULL,
                    metadata JSONB NOT NULL DEFAULT '{{}}',
                    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
                )
                """
            ),
            {},
        )

    async def list_conversations(self, user_id: str) -> list[Conversation]:
        rows = await self._execute(
            self._sql(
                "SELECT * FROM {conversations} WHERE user_id = %(user_id)s "
                "ORDER BY updated_at DESC"
            ),
            {"user_id": user_id},
        )
        return [Conversation.model_validate(row) for row in rows]

    async def create_conversation(self, user_id: str, title: str) -> Conversation:
        rows = await self._execute(
            self._sql(
                "INSERT INTO {conversations} (id, user_id, title) "
                "VALUES (%(id)s, %(user_id)s, %(title)s) RETURNING *"
            ),
            {"id": str(uuid.uuid4()), "user_id": user_id, "title": normalize_title(title)},
        )
        return Conversation.model_validate(rows[0])

    async def update_conversation(self, conversation_id: str, title: str) -> Conversation:
        rows = await self._execute(
            self._sql(
                "UPDATE {conversations} SET title = %(title)s, updated_at = now() "
                "WHERE id = %(id)s RETURNING *"
            ),
            {"id": conversation_id, "title": normalize_title(title)},
        )
        if not rows:
            raise NotFoundError(f"Conversation not found: {conversation_id}")
        return Conversation.model_validate(rows[0])

    async def delete_conversation(self, conversation_id: str) -> None:
        rows = await self._execute(
            self._sql("DELETE FROM {conversations} WHERE id = %(id)s RETURNING id"),
            {"id": conversation_id},
        )
        if not rows:
            raise NotFoundError(f"Conversation not found: {conversation_id}")

    async def list_messages(self, conversation_id: str) -> list[ConversationMessage]:
        rows = await self._execute(
            self._sql(
                "SELECT * FROM {messages} WHERE conversation_id = %(conversation_id)s "
                "ORDER BY created_at ASC"
            ),
            {"conversation_id": conversation_id},
        )
        return [ConversationMessage.model_validate(row) for row in rows]

    async def save_message(
        self,
        conversation_id: str,
        role: str,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> ConversationMessage:
        _check_role(role)
        rows = await self._execute(
            self._sql(
                "INSERT INTO {messages} (id, conversation_id, role, content, metadata) "
                "VALUES (%(id)s, %(conversation_id)s, %(role)s, %(content)s, %(metadata)s) "
                "RETURNING *"
            ),
            {
                "id": str(uuid.uuid4()),
                "conversation_id": conversation_id,
                "role": role,
                "content": content[:MAX_MESSAGE_LENGTH],
                "metadata": Jsonb(metadata or {}),
            },
        )
        return ConversationMessage.model_validate(rows[0])

    async def delete_message(self, message_id: str) -> None:
        rows = await self._execute(
            self._sql("DELETE FROM {messages} WHERE id = %(id)s RETURNING id"),
            {"id": message_id},
        )
        if not rows:
            raise NotFoundError(f"Message not found: {message_id}")


# ---------------------------------------------------------------------------
# IN-MEMORY STORE (Testing/Development)
# ---------------------------------------------------------------------------


class InMemoryConversationStore:
    """Dict-backed conversation history with the same contract."""

    def __init__(self):
        self._conversations: dict[str, Conversation] = {}
        self._messages: dict[str, ConversationMessage] = {}

    async def connect(self) -> None:
        """No-op for in-memory store."""
        pass

    async def close(self) -> None:
        """No-op for in-memory store."""
        pass

    async def list_conversations(self, user_id: str) -> list[Conversation]:
        owned = [c for c in self._conversations.values() if c.user_id == user_id]
        return sorted(owned, key=lambda c: c.updated_at, reverse=True)

    async def create_conversation(self, user_id: str, title: str) -> Conversation:
        now = _now()
        conversation = Conversation(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=normalize_title(title),
            created_at=now,
            updated_at=now,
        )
        self._conversations[conversation.id] = conversation
        return conversation

    async def update_conversation(self, conversation_id: str, title: str) -> Conversation:
        existing = self._conversations.get(conversation_id)
        if existing is None:
            raise NotFoundError(f"Conversation not found: {conversation_id}")
        updated = existing.model_copy(
            update={"title": normalize_title(title), "updated_at": _now()}
        )
        self._conversations[conversation_id] = updated
        return updated

    async def delete_conversation(self, conversation_id: str) -> None:
        if self._conversations.pop(conversation_id, None) is None:
            raise NotFoundError(f"Conversation not found: {conversation_id}")
        self._messages = {
            mid: m for mid, m in self._messages.items()
            if m.conversation_id != conversation_id
        }

    async def list_messages(self, conversation_id: str) -> list[ConversationMessage]:
        # dict preserves insertion order, which is creation order
        return [m for m in self._messages.values() if m.conversation_id == conversation_id]

    async def save_message(
        self,
        conversation_id: str,
        role: str,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> ConversationMessage:
        _check_role(role)
        if conversation_id not in self._conversations:
            raise NotFoundError(f"Conversation not found: {conversation_id}")
        message = ConversationMessage(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            role=role,
            content=content[:MAX_MESSAGE_LENGTH],
            metadata=metadata or {},
            created_at=_now(),
        )
        self._messages[message.id] = message
        return message

    async def delete_message(self, message_id: str) -> None:
        if self._messages.pop(message_id, None) is None:
            raise NotFoundError(f"Message not found: {message_id}")


# ---------------------------------------------------------------------------
# FACTORY FUNCTION
# ---------------------------------------------------------------------------


def get_conversation_store(
    settings: Settings | None = None,
) -> PgConversationStore | InMemoryConversationStore:
    """Postgres history when configured, in-memory otherwise."""
    if settings is None:
        from medassist.config import get_settings

        settings = get_settings()

    if settings.use_postgres and settings.knowledge_enabled:
        return PgConversationStore(
            ConversationStoreConfig(
                connection_string=settings.database_url,
                connect_timeout=settings.connect_timeout,
            )
        )

    logger.debug("Using in-memory conversation history")
    return InMemoryConversationStore()
