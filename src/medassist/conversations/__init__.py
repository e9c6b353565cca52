"""
Conversations module - chat history persistence.
"""

from medassist.conversations.store import (
    ConversationStoreConfig,
    PgConversationStore,
    InMemoryConversationStore,
    get_conversation_store,
)

__all__ = [
    "ConversationStoreConfig",
    "PgConversationStore",
    "InMemoryConversationStore",
    "get_conversation_store",
]
