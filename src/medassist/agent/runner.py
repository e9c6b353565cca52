"""
Chat runner - the public API for running one chat turn.

Converts a raw message into the initial ChatState, invokes the graph and
returns a typed result. No business logic lives here.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from medassist.agent.graph import build_chat_graph
from medassist.agent.state import create_initial_state

if TYPE_CHECKING:
    from medassist.core import GenerationConfig, LanguageModel
    from medassist.retrieval.service import KnowledgeService
    from medassist.schemas.knowledge import RelatedContent


# ---------------------------------------------------------------------------
# RESULT TYPES
# ---------------------------------------------------------------------------


@dataclass
class ChatTurnResult:
    """Result of one chat turn."""

    prompt: str
    reply: str | None
    keywords: list[str] = field(default_factory=list)
    age_expression: str | None = None
    age_groups: list[str] = field(default_factory=list)
    context: RelatedContent | None = None
    retrieval_latency_ms: float = 0
    generation_latency_ms: float = 0
    total_latency_ms: float = 0


@dataclass
class ChatTurnError:
    """The language model failed; prompt is kept for diagnostics."""

    error_type: str
    error_message: str
    prompt: str = ""


# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------


async def run_chat_turn(
    message: str,
    service: KnowledgeService,
    model: LanguageModel | None = None,
    pediatric_mode: bool = False,
    config: GenerationConfig | None = None,
    max_results: int = 3,
) -> ChatTurnResult | ChatTurnError:
    """
    Run retrieval, prompt composition and (optionally) generation.

    Args:
        message: The user's question
        service: KnowledgeService for context
        model: LanguageModel; when None only the prompt is produced
        pediatric_mode: Retrieve context even for non-pediatric questions
        config: Generation settings
        max_results: Row budget for context retrieval

    Returns:
        ChatTurnResult on success, ChatTurnError if the model failed
    """
    start = time.time()
    graph = build_chat_graph(service, model, config, max_results)
    final = await graph.ainvoke(create_initial_state(message, pediatric_mode))

    if final.get("error"):
        return ChatTurnError(
            error_type="generation_error",
            error_message=final["error"],
            prompt=final["prompt"],
        )

    return ChatTurnResult(
        prompt=final["prompt"],
        reply=final.get("reply"),
        keywords=final["keywords"],
        age_expression=final["age_expression"],
        age_groups=final["age_groups"],
        context=final["context"],
        retrieval_latency_ms=final["retrieval_latency_ms"],
        generation_latency_ms=final.get("generation_latency_ms", 0),
        total_latency_ms=(time.time() - start) * 1000,
    )
