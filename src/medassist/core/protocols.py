"""
Core protocols defining contracts for the entire system.

All infrastructure components implement these protocols,
enabling dependency injection and easy testing.

PATTERN:
- Protocol defines the contract
- Production implementation (Postgres)
- Test double (in-memory / mock)
- Factory function for instantiation
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from medassist.schemas.conversation import Conversation, ConversationMessage
from medassist.schemas.knowledge import (
    ContentType,
    PediatricCondition,
    PediatricDrug,
    PediatricTopic,
    SearchFilters,
)


# ---------------------------------------------------------------------------
# KNOWLEDGE STORE PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class KnowledgeStore(Protocol):
    """
    Contract for the read-only pediatric knowledge base.

    Implementations:
    - PgKnowledgeStore (production with PostgreSQL)
    - InMemoryKnowledgeStore (testing/development)

    Every search method matches `query` as a case-insensitive substring of
    the record's text columns or as an exact element of its array column,
    applies the relevant `filters`, and returns at most `limit` rows.
    """

    async def connect(self) -> None:
        """Establish connection to the store."""
        ...

    async def close(self) -> None:
        """Close connection to the store."""
        ...

    async def search_conditions(
        self, query: str, filters: SearchFilters, limit: int
    ) -> list[PediatricCondition]:
        ...

    async def search_drugs(
        self, query: str, filters: SearchFilters, limit: int
    ) -> list[PediatricDrug]:
        ...

    async def search_topics(
        self, query: str, filters: SearchFilters, limit: int
    ) -> list[PediatricTopic]:
        ...

    async def get_condition(self, condition_id: str) -> PediatricCondition | None:
        ...

    async def get_drug(self, drug_id: str) -> PediatricDrug | None:
        ...

    async def list_conditions_by_category(
        self, category: str, limit: int
    ) -> list[PediatricCondition]:
        """Conditions of one category ordered by title."""
        ...

    async def list_categories(self, kind: ContentType) -> list[str]:
        """Distinct categories for one record kind."""
        ...


# ---------------------------------------------------------------------------
# CONVERSATION STORE PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class ConversationStore(Protocol):
    """
    Contract for chat history persistence.

    Implementations:
    - PgConversationStore (production)
    - InMemoryConversationStore (testing)
    """

    async def list_conversations(self, user_id: str) -> list[Conversation]:
        """Conversations of a user, most recently updated first."""
        ...

    async def create_conversation(self, user_id: str, title: str) -> Conversation:
        ...

    async def update_conversation(self, conversation_id: str, title: str) -> Conversation:
        ...

    async def delete_conversation(self, conversation_id: str) -> None:
        ...

    async def list_messages(self, conversation_id: str) -> list[ConversationMessage]:
        """Messages of a conversation, oldest first."""
        ...

    async def save_message(
        self,
        conversation_id: str,
        role: str,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> ConversationMessage:
        ...

    async def delete_message(self, message_id: str) -> None:
        ...


# ---------------------------------------------------------------------------
# LANGUAGE MODEL PROTOCOL
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SafetySetting:
    """A content-safety threshold for one harm category."""
    category: str
    threshold: str = "BLOCK_MEDIUM_AND_ABOVE"


def _default_safety_settings() -> tuple[SafetySetting, ...]:
    return (
        SafetySetting("HARM_CATEGORY_HARASSMENT"),
        SafetySetting("HARM_CATEGORY_HATE_SPEECH"),
        SafetySetting("HARM_CATEGORY_SEXUALLY_EXPLICIT"),
        SafetySetting("HARM_CATEGORY_DANGEROUS_CONTENT"),
    )


@dataclass(frozen=True)
class GenerationConfig:
    """
    Fixed generation settings sent with every prompt.

    Low temperature keeps medical answers conservative.
    """
    temperature: float = 0.3
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 1024
    safety_settings: tuple[SafetySetting, ...] = field(
        default_factory=_default_safety_settings
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the camelCase shape generative-language APIs expect."""
        return {
            "generationConfig": {
                "temperature": self.temperature,
                "topK": self.top_k,
                "topP": self.top_p,
                "maxOutputTokens": self.max_output_tokens,
            },
            "safetySettings": [
                {"category": s.category, "threshold": s.threshold}
                for s in self.safety_settings
            ],
        }


@runtime_checkable
class LanguageModel(Protocol):
    """
    Contract for the external text generation service.

    The core's only obligation is to hand over the composed prompt.

    Implementations:
    - Provided by the host application
    - MockLanguageModel (testing)
    """

    async def generate(self, prompt: str, config: GenerationConfig) -> str:
        """Generate a reply for the composed prompt."""
        ...
