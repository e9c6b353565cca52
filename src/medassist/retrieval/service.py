"""
Knowledge service - the search API used by the chat flow and the CLI.

Wraps a KnowledgeStore with the search contract:
- search() fans out three sub-queries concurrently and is all-or-nothing
- enrichment helpers (related content, categories) never raise

A service built without a store is in disabled mode: search and record
lookups raise ConfigurationError, enrichment helpers return empty results.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import TYPE_CHECKING

from medassist.core.errors import ConfigurationError, RetrievalError
from medassist.retrieval.results import rank_search_results
from medassist.schemas.knowledge import (
    AdvancedSearchFilters,
    CategoryListing,
    KnowledgeSearchResults,
    PediatricCondition,
    PediatricDrug,
    RelatedContent,
    SearchFilters,
    SearchResult,
)

if TYPE_CHECKING:
    from medassist.core import KnowledgeStore

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 20
RELATED_PER_KIND = 2


class KnowledgeService:
    """
    Search and lookup over the pediatric knowledge base.

    Dependencies are INJECTED: pass InMemoryKnowledgeStore in tests,
    PgKnowledgeStore in production, or None for disabled mode.
    """

    def __init__(self, store: KnowledgeStore | None):
        self._store = store

    @property
    def enabled(self) -> bool:
        return self._store is not None

    async def close(self) -> None:
        """Release the store connection, if any."""
        if self._store is not None:
            await self._store.close()

    def _require_store(self) -> KnowledgeStore:
        if self._store is None:
            raise ConfigurationError("Knowledge base not available")
        return self._store

    async def search(
        self,
        query: str,
        filters: SearchFilters | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> KnowledgeSearchResults:
        """
        Search conditions, drugs and topics concurrently.

        Each kind gets ceil(limit / 3) rows. If any sub-query fails the
        whole search fails with RetrievalError; there are no partial
        results and no retries.

        Raises:
            ConfigurationError: the store is not configured
            RetrievalError: any sub-query failed
        """
        store = self._require_store()
        filters = filters or SearchFilters()
        per_kind = math.ceil(limit / 3)

        try:
            conditions, drugs, topics = await asyncio.gather(
                store.search_conditions(query, filters, per_kind),
                store.search_drugs(query, filters, per_kind),
                store.search_topics(query, filters, per_kind),
            )
        except Exception as e:
            message = str(e) or "Search failed"
            logger.error("Knowledge search failed for %r: %s", query, message)
            raise RetrievalError(message, cause=e) from e

        return KnowledgeSearchResults(conditions=conditions, drugs=drugs, topics=topics)

    async def search_ranked(
        self,
        query: str,
        filters: SearchFilters | None = None,
        advanced: AdvancedSearchFilters | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[SearchResult]:
        """search() followed by unify, filter and sort."""
        results = await self.search(query, filters, limit)
        return rank_search_results(
            results.conditions, results.drugs, results.topics, query, advanced
        )

    async def get_related_content(
        self,
        query: str,
        max_results: int = 5,
        age_groups: list[str] | None = None,
    ) -> RelatedContent:
        """
        Best-effort context for prompt enrichment.

        Keeps the first two records of each kind. With age_groups, only
        conditions tagged with one of them are kept; drugs and topics carry
        no age list and are never narrowed. A single group is pushed into
        the store query so the row budget is spent on matching conditions.

        Any failure, including disabled mode, yields empty content so the
        chat flow is never blocked.
        """
        if not self.enabled:
            return RelatedContent()

        filters = SearchFilters()
        if age_groups and len(age_groups) == 1:
            filters = SearchFilters(age_group=age_groups[0])

        try:
            results = await self.search(query, filters, max_results)
        except Exception as e:
            logger.warning("Failed to get related content: %s", e)
            return RelatedContent()

        conditions = results.conditions
        if age_groups:
            conditions = [
                c for c in conditions if any(group in c.age_groups for group in age_groups)
            ]

        return RelatedContent(
            conditions=conditions[:RELATED_PER_KIND],
            drugs=results.drugs[:RELATED_PER_KIND],
            topics=results.topics[:RELATED_PER_KIND],
        )

    async def get_condition(self, condition_id: str) -> PediatricCondition | None:
        """Single condition by id; None when missing or on lookup failure."""
        store = self._require_store()
        try:
            return await store.get_condition(condition_id)
        except Exception as e:
            logger.warning("Failed to get condition %s: %s", condition_id, e)
            return None

    async def get_drug(self, drug_id: str) -> PediatricDrug | None:
        """Single drug by id; None when missing or on lookup failure."""
        store = self._require_store()
        try:
            return await store.get_drug(drug_id)
        except Exception as e:
            logger.warning("Failed to get drug %s: %s", drug_id, e)
            return None

    async def get_conditions_by_category(
        self, category: str, limit: int = 50
    ) -> list[PediatricCondition]:
        """Conditions in a category ordered by title; [] on failure."""
        store = self._require_store()
        try:
            return await store.list_conditions_by_category(category, limit)
        except Exception as e:
            logger.warning("Failed to get conditions for %s: %s", category, e)
            return []

    async def get_categories(self) -> CategoryListing:
        """Distinct categories per kind; empty listing on any failure."""
        if not self.enabled:
            return CategoryListing()

        try:
            conditions, drugs, topics = await asyncio.gather(
                self._store.list_categories("condition"),
                self._store.list_categories("drug"),
                self._store.list_categories("topic"),
            )
        except Exception as e:
            logger.warning("Failed to get categories: %s", e)
            return CategoryListing()

        return CategoryListing(
            condition_categories=conditions,
            drug_categories=drugs,
            topic_categories=topics,
        )
