"""
Unit Tests for Conversation History Stores
"""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from medassist.config import Settings
from medassist.conversations import (
    ConversationStoreConfig,
    InMemoryConversationStore,
    PgConversationStore,
    get_conversation_store,
)
from medassist.core.errors import NotFoundError
from medassist.schemas.conversation import (
    DEFAULT_CONVERSATION_TITLE,
    MAX_MESSAGE_LENGTH,
    normalize_title,
)


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def store():
    return InMemoryConversationStore()


@pytest.fixture
def clock():
    """Strictly increasing timestamps for _now()."""
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ticks = (start + timedelta(seconds=i) for i in range(1000))
    with patch("medassist.conversations.store._now", side_effect=lambda: next(ticks)):
        yield


# ---------------------------------------------------------------------------
# TITLES
# ---------------------------------------------------------------------------


class TestNormalizeTitle:
    def test_truncates(self):
        assert normalize_title("x" * 150) == "x" * 100

    def test_empty_uses_default(self):
        assert normalize_title("") == DEFAULT_CONVERSATION_TITLE


# ---------------------------------------------------------------------------
# IN-MEMORY STORE
# ---------------------------------------------------------------------------


class TestInMemoryConversations:
    """Test conversation CRUD."""

    def test_create_and_list(self, store):
        created = asyncio.run(store.create_conversation("u1", "Fever questions"))

        listed = asyncio.run(store.list_conversations("u1"))

        assert listed == [created]
        assert created.title == "Fever questions"

    def test_list_only_own_conversations(self, store):
        asyncio.run(store.create_conversation("u1", "Mine"))
        asyncio.run(store.create_conversation("u2", "Theirs"))

        assert [c.title for c in asyncio.run(store.list_conversations("u1"))] == ["Mine"]

    def test_most_recently_updated_first(self, store, clock):
        first = asyncio.run(store.create_conversation("u1", "First"))
        asyncio.run(store.create_conversation("u1", "Second"))

        asyncio.run(store.update_conversation(first.id, "First, renamed"))

        titles = [c.title for c in asyncio.run(store.list_conversations("u1"))]
        assert titles == ["First, renamed", "Second"]

    def test_update_unknown_raises(self, store):
        with pytest.raises(NotFoundError):
            asyncio.run(store.update_conversation("missing", "title"))

    def test_delete_removes_messages(self, store):
        conversation = asyncio.run(store.create_conversation("u1", "Rash"))
        asyncio.run(store.save_message(conversation.id, "user", "Is this rash serious?"))

        asyncio.run(store.delete_conversation(conversation.id))

        assert asyncio.run(store.list_conversations("u1")) == []
        assert asyncio.run(store.list_messages(conversation.id)) == []

    def test_delete_unknown_raises(self, store):
        with pytest.raises(NotFoundError):
            asyncio.run(store.delete_conversation("missing"))


class TestInMemoryMessages:
    """Test message persistence."""

    def test_messages_in_creation_order(self, store):
        conversation = asyncio.run(store.create_conversation("u1", "Cough"))
        asyncio.run(store.save_message(conversation.id, "user", "question"))
        asyncio.run(store.save_message(conversation.id, "assistant", "answer", {"query_type": "symptoms"}))

        messages = asyncio.run(store.list_messages(conversation.id))

        assert [m.role for m in messages] == ["user", "assistant"]
        assert messages[1].metadata == {"query_type": "symptoms"}

    def test_content_truncated(self, store):
        conversation = asyncio.run(store.create_conversation("u1", "Long"))

        message = asyncio.run(store.save_message(conversation.id, "user", "a" * 20000))

        assert len(message.content) == MAX_MESSAGE_LENGTH

    def test_invalid_role(self, store):
        conversation = asyncio.run(store.create_conversation("u1", "Roles"))

        with pytest.raises(ValueError, match="Invalid message role"):
            asyncio.run(store.save_message(conversation.id, "system", "hi"))

    def test_unknown_conversation(self, store):
        with pytest.raises(NotFoundError):
            asyncio.run(store.save_message("missing", "user", "hi"))

    def test_delete_message(self, store):
        conversation = asyncio.run(store.create_conversation("u1", "Delete"))
        message = asyncio.run(store.save_message(conversation.id, "user", "hi"))

        asyncio.run(store.delete_message(message.id))

        assert asyncio.run(store.list_messages(conversation.id)) == []
        with pytest.raises(NotFoundError):
            asyncio.run(store.delete_message(message.id))


# ---------------------------------------------------------------------------
# POSTGRES STORE (MOCKED)
# ---------------------------------------------------------------------------


def make_connection(rows=None, description=("id",)):
    conn = MagicMock()
    conn.close = AsyncMock()
    cursor = MagicMock()
    cursor.execute = AsyncMock()
    cursor.fetchall = AsyncMock(return_value=rows or [])
    cursor.description = description
    conn.cursor.return_value.__aenter__.return_value = cursor
    return conn, cursor


class TestPgConversationStore:
    """Test PgConversationStore with a mocked connection."""

    def test_create_conversation(self):
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        row = {"id": "c1", "user_id": "u1", "title": DEFAULT_CONVERSATION_TITLE, "created_at": now, "updated_at": now}
        conn, cursor = make_connection([row])
        store = PgConversationStore(ConversationStoreConfig())
        store._conn = conn

        conversation = asyncio.run(store.create_conversation("u1", ""))

        _, params = cursor.execute.call_args[0]
        assert params["title"] == DEFAULT_CONVERSATION_TITLE
        assert params["user_id"] == "u1"
        assert conversation.id == "c1"

    def test_update_missing_raises(self):
        conn, _ = make_connection([])
        store = PgConversationStore(ConversationStoreConfig())
        store._conn = conn

        with pytest.raises(NotFoundError):
            asyncio.run(store.update_conversation("missing", "title"))

    def test_delete_missing_raises(self):
        conn, _ = make_connection([])
        store = PgConversationStore(ConversationStoreConfig())
        store._conn = conn

        with pytest.raises(NotFoundError):
            asyncio.run(store.delete_conversation("missing"))

    def test_save_message_rejects_role_before_query(self):
        conn, cursor = make_connection()
        store = PgConversationStore(ConversationStoreConfig())
        store._conn = conn

        with pytest.raises(ValueError):
            asyncio.run(store.save_message("c1", "system", "hi"))

        cursor.execute.assert_not_awaited()

    def test_save_message_truncates_content(self):
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        row = {"id": "m1", "conversation_id": "c1", "role": "user", "content": "a", "metadata": {}, "created_at": now}
        conn, cursor = make_connection([row])
        store = PgConversationStore(ConversationStoreConfig())
        store._conn = conn

        asyncio.run(store.save_message("c1", "user", "a" * 20000))

        _, params = cursor.execute.call_args[0]
        assert len(params["content"]) == MAX_MESSAGE_LENGTH

    def test_create_schema_without_result_rows(self):
        conn, cursor = make_connection(description=None)
        store = PgConversationStore(ConversationStoreConfig())
        store._conn = conn

        asyncio.run(store.create_schema())

        assert cursor.execute.await_count == 2
        cursor.fetchall.assert_not_awaited()


class TestGetConversationStore:
    def test_in_memory_by_default(self):
        assert isinstance(get_conversation_store(Settings()), InMemoryConversationStore)

    def test_postgres_when_configured(self):
        settings = Settings(use_postgres=True, database_url="postgresql://db/medassist")

        store = get_conversation_store(settings)

        assert isinstance(store, PgConversationStore)
        assert store.config.connection_string == "postgresql://db/medassist"


class TestPgConversationStoreConcurrentConnect:
    def test_concurrent_calls_open_single_connection(self):
        opened = []

        async def slow_connect(*args, **kwargs):
            await asyncio.sleep(0.01)
            conn, _ = make_connection([])
            opened.append(conn)
            return conn

        store = PgConversationStore(ConversationStoreConfig())

        async def run():
            await asyncio.gather(
                store.list_conversations("u1"),
                store.list_messages("c1"),
                store.list_conversations("u2"),
            )
            await store.close()

        with patch("medassist.conversations.store.AsyncConnection") as mock_cls:
            mock_cls.connect = slow_connect
            asyncio.run(run())

        assert len(opened) == 1
        opened[0].close.assert_awaited_once()
