"""
Conversation history schemas.

Mirrors the medical_conversations / medical_messages tables.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONVERSATION_TITLE = "New Medical Consultation"
MAX_TITLE_LENGTH = 100
MAX_MESSAGE_LENGTH = 10000


class Conversation(BaseModel):
    """A chat thread owned by one user."""

    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    title: str
    created_at: datetime
    updated_at: datetime


class ConversationMessage(BaseModel):
    """A single user or assistant turn."""

    model_config = ConfigDict(extra="ignore")

    id: str
    conversation_id: str
    role: Literal["user", "assistant"]
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


def normalize_title(title: str) -> str:
    """Truncate to the column limit, falling back to the default title."""
    return title[:MAX_TITLE_LENGTH] or DEFAULT_CONVERSATION_TITLE
