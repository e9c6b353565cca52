"""
Unify, filter and sort knowledge records as SearchResults.

The three record kinds are projected onto one shape so a single list can be
ranked and filtered. Every function returns a new list and leaves its input
untouched.
"""

from __future__ import annotations

from typing import Any, Callable

from medassist.retrieval.scoring import calculate_relevance_score
from medassist.schemas.knowledge import (
    AdvancedSearchFilters,
    PediatricCondition,
    PediatricDrug,
    PediatricTopic,
    SearchResult,
    SortBy,
    SortOrder,
)

DRUG_CHAPTER = "Medications"
TOPIC_PREVIEW_LENGTH = 200


def _drug_description(drug: PediatricDrug) -> str:
    prefix = f"({drug.generic_name}) " if drug.generic_name else ""
    return prefix + ", ".join(drug.indications[:2])


def convert_to_search_results(
    conditions: list[PediatricCondition],
    drugs: list[PediatricDrug],
    topics: list[PediatricTopic],
    query: str,
) -> list[SearchResult]:
    """
    Project records of all three kinds into scored SearchResults.

    Output order is conditions, then drugs, then topics, each in input
    order. That order is what ties fall back to when sorting.
    """
    results: list[SearchResult] = []

    for condition in conditions:
        results.append(
            SearchResult(
                id=condition.id,
                title=condition.title,
                type="condition",
                category=condition.category,
                description=condition.description,
                relevance_score=calculate_relevance_score(
                    query, condition.title, condition.description
                ),
                age_groups=list(condition.age_groups),
                chapter=condition.chapter,
            )
        )

    for drug in drugs:
        results.append(
            SearchResult(
                id=drug.id,
                title=drug.name,
                type="drug",
                category=drug.category,
                description=_drug_description(drug),
                relevance_score=calculate_relevance_score(
                    query, drug.name, " ".join(drug.indications)
                ),
                chapter=DRUG_CHAPTER,
            )
        )

    for topic in topics:
        results.append(
            SearchResult(
                id=topic.id,
                title=topic.title,
                type="topic",
                category=topic.category,
                description=topic.content[:TOPIC_PREVIEW_LENGTH] + "...",
                relevance_score=calculate_relevance_score(
                    query, topic.title, topic.content
                ),
                chapter=topic.chapter,
            )
        )

    return results


# casefold, not locale collation: accented titles sort by code point
_SORT_KEYS: dict[str, Callable[[SearchResult], Any]] = {
    "relevance": lambda r: r.relevance_score,
    "title": lambda r: r.title.casefold(),
    "category": lambda r: r.category.casefold(),
    "chapter": lambda r: (r.chapter or "").casefold(),
}


def sort_search_results(
    results: list[SearchResult],
    sort_by: SortBy = "relevance",
    sort_order: SortOrder = "desc",
) -> list[SearchResult]:
    """
    Stable sort by one field.

    Python's sort keeps equal elements in input order even with
    reverse=True, so ties are never reordered in either direction.
    """
    try:
        key = _SORT_KEYS[sort_by]
    except KeyError:
        raise ValueError(f"Unknown sort field: {sort_by!r}") from None
    if sort_order not in ("asc", "desc"):
        raise ValueError(f"Unknown sort order: {sort_order!r}")
    return sorted(results, key=key, reverse=sort_order == "desc")


def _matches(result: SearchResult, filters: AdvancedSearchFilters) -> bool:
    if filters.categories and result.category not in filters.categories:
        return False

    # Results without an age list are kept: missing data is not disqualifying
    if filters.age_groups and result.age_groups is not None:
        if not any(group in result.age_groups for group in filters.age_groups):
            return False

    if filters.chapters and (not result.chapter or result.chapter not in filters.chapters):
        return False

    if filters.content_types and result.type not in filters.content_types:
        return False

    return True


def filter_search_results(
    results: list[SearchResult],
    filters: AdvancedSearchFilters,
) -> list[SearchResult]:
    """Keep results matching every provided filter dimension."""
    return [result for result in results if _matches(result, filters)]


def rank_search_results(
    conditions: list[PediatricCondition],
    drugs: list[PediatricDrug],
    topics: list[PediatricTopic],
    query: str,
    filters: AdvancedSearchFilters | None = None,
) -> list[SearchResult]:
    """Convert, filter and sort in one step."""
    filters = filters or AdvancedSearchFilters()
    results = convert_to_search_results(conditions, drugs, topics, query)
    results = filter_search_results(results, filters)
    return sort_search_results(results, filters.sort_by, filters.sort_order)
