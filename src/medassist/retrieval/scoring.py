"""
Relevance scoring for knowledge records.

Scores are unbounded integers meaningful only for ranking within a single
search call. Drugs, conditions and topics share one scale using their
title-like and content-like text. Cross-kind ranking is therefore
approximate.
"""

from __future__ import annotations

EXACT_TITLE_SCORE = 100
TITLE_CONTAINS_QUERY_SCORE = 50
TITLE_WORD_SCORE = 20
CONTENT_WORD_SCORE = 5
BOOST_TERM_SCORE = 15

# Query words shorter than this are ignored ("a", "of", "is")
MIN_WORD_LENGTH = 3

BOOST_TERMS: tuple[str, ...] = ("pediatric", "child", "infant", "newborn", "adolescent")


def calculate_relevance_score(query: str, title: str, content: str) -> int:
    """
    Score how well a record's title and content match a query.

    >>> calculate_relevance_score("asthma", "Asthma", "")
    120
    """
    query_lower = query.lower()
    title_lower = title.lower()
    content_lower = content.lower()

    score = 0

    if title_lower == query_lower:
        score += EXACT_TITLE_SCORE
    elif query_lower in title_lower:
        score += TITLE_CONTAINS_QUERY_SCORE

    words = [word for word in query_lower.split(" ") if len(word) >= MIN_WORD_LENGTH]
    for word in words:
        if word in title_lower:
            score += TITLE_WORD_SCORE
        if word in content_lower:
            score += CONTENT_WORD_SCORE

    for term in BOOST_TERMS:
        if term in query_lower and (term in title_lower or term in content_lower):
            score += BOOST_TERM_SCORE

    return score
