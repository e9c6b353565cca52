"""
Schemas - Pydantic models for knowledge records and conversation history.
"""

from medassist.schemas.knowledge import (
    AGE_GROUPS,
    POPULAR_CATEGORIES,
    AdvancedSearchFilters,
    AgeGroup,
    CategoryListing,
    ContentType,
    DosageByAge,
    KnowledgeSearchResults,
    PediatricCondition,
    PediatricDrug,
    PediatricTopic,
    RelatedContent,
    SearchFilters,
    SearchResult,
    SortBy,
    SortOrder,
)
from medassist.schemas.conversation import (
    DEFAULT_CONVERSATION_TITLE,
    Conversation,
    ConversationMessage,
)

__all__ = [
    # Records
    "PediatricCondition",
    "PediatricDrug",
    "PediatricTopic",
    "DosageByAge",
    # Search
    "SearchResult",
    "SearchFilters",
    "AdvancedSearchFilters",
    "KnowledgeSearchResults",
    "RelatedContent",
    "CategoryListing",
    "ContentType",
    "SortBy",
    "SortOrder",
    # Age groups
    "AgeGroup",
    "AGE_GROUPS",
    "POPULAR_CATEGORIES",
    # Conversations
    "Conversation",
    "ConversationMessage",
    "DEFAULT_CONVERSATION_TITLE",
]
