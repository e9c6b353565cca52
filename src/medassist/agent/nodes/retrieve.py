"""
Retrieval node - fetches knowledge base context for the message.

The service is injected, so tests can pass a KnowledgeService over an
InMemoryKnowledgeStore. Retrieval is best effort: get_related_content
never raises, so this node never fails the chat turn.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Awaitable, Callable

from medassist.retrieval.extract import (
    extract_age_expression,
    extract_keywords,
    is_pediatric_query,
    map_age_to_group,
)

if TYPE_CHECKING:
    from medassist.agent.state import ChatState
    from medassist.retrieval.service import KnowledgeService


def create_retrieve_node(
    service: KnowledgeService,
    max_results: int = 3,
) -> Callable[[ChatState], Awaitable[dict]]:
    """
    Factory that creates a retrieval node with an injected service.

    Args:
        service: KnowledgeService (may be in disabled mode)
        max_results: Row budget passed to get_related_content

    Returns:
        An async node function compatible with LangGraph
    """

    async def retrieve_context(state: ChatState) -> dict:
        """
        Look up related records when the message is pediatric.

        Reads from state:
        - message, pediatric_mode

        Writes to state:
        - keywords, age_expression, age_groups, context, retrieval_latency_ms
        """
        start = time.time()
        message = state["message"]

        keywords = extract_keywords(message)
        age_expression = extract_age_expression(message)
        age_groups = map_age_to_group(age_expression) if age_expression else []

        context = None
        wants_context = state["pediatric_mode"] or is_pediatric_query(message)
        if service.enabled and wants_context and keywords:
            # conditions are narrowed to the age mentioned, if any
            context = await service.get_related_content(
                " ".join(keywords), max_results, age_groups or None
            )

        return {
            "keywords": keywords,
            "age_expression": age_expression,
            "age_groups": age_groups,
            "context": context,
            "retrieval_latency_ms": (time.time() - start) * 1000,
        }

    return retrieve_context
