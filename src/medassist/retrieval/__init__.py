"""
Retrieval module - keyword extraction, knowledge search and ranking.

This module provides:
- Extraction helpers: extract_keywords, is_pediatric_query, ...
- calculate_relevance_score: query/record scoring
- convert/filter/sort helpers for SearchResults
- KnowledgeStoreConfig, PgKnowledgeStore, InMemoryKnowledgeStore
- get_knowledge_store(): Factory function
- KnowledgeService: the search API

ARCHITECTURE:
-------------
1. Protocol defines the contract (in core.protocols)
2. Multiple implementations (PgKnowledgeStore, InMemoryKnowledgeStore)
3. Factory function for instantiation
4. Service layer owns the concurrency and error contract
"""

from medassist.retrieval.extract import (
    extract_keywords,
    is_pediatric_query,
    extract_age_expression,
    map_age_to_group,
    generate_search_suggestions,
    highlight_search_terms,
)
from medassist.retrieval.scoring import calculate_relevance_score
from medassist.retrieval.results import (
    convert_to_search_results,
    sort_search_results,
    filter_search_results,
    rank_search_results,
)
from medassist.retrieval.store import (
    KnowledgeStoreConfig,
    PgKnowledgeStore,
    InMemoryKnowledgeStore,
    get_knowledge_store,
)
from medassist.retrieval.service import KnowledgeService
from medassist.retrieval.seeds import load_seed_records, seed_knowledge_store

__all__ = [
    # Extraction
    "extract_keywords",
    "is_pediatric_query",
    "extract_age_expression",
    "map_age_to_group",
    "generate_search_suggestions",
    "highlight_search_terms",
    # Scoring
    "calculate_relevance_score",
    # Results
    "convert_to_search_results",
    "sort_search_results",
    "filter_search_results",
    "rank_search_results",
    # Stores
    "KnowledgeStoreConfig",
    "PgKnowledgeStore",
    "InMemoryKnowledgeStore",
    "get_knowledge_store",
    # Service
    "KnowledgeService",
    # Seeds
    "load_seed_records",
    "seed_knowledge_store",
]
