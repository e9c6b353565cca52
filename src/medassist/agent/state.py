"""
Chat state definition - the data flowing through the LangGraph.

Each node reads from and writes to specific state keys.
"""

from typing import TypedDict

from medassist.schemas.knowledge import RelatedContent


class ChatState(TypedDict):
    """
    State that flows through the chat graph.

    Input fields are set at invocation time.
    Intermediate fields are populated by nodes.
    Output fields contain the final result.
    """

    # -------------------------------------------------------------------------
    # INPUT (set at invocation)
    # -------------------------------------------------------------------------
    message: str
    pediatric_mode: bool

    # -------------------------------------------------------------------------
    # INTERMEDIATE (populated by nodes)
    # -------------------------------------------------------------------------
    keywords: list[str]
    age_expression: str | None
    age_groups: list[str]
    context: RelatedContent | None
    prompt: str

    # -------------------------------------------------------------------------
    # OUTPUT (final result)
    # -------------------------------------------------------------------------
    reply: str | None
    error: str | None

    # -------------------------------------------------------------------------
    # METRICS
    # -------------------------------------------------------------------------
    retrieval_latency_ms: float
    generation_latency_ms: float


def create_initial_state(message: str, pediatric_mode: bool = False) -> ChatState:
    """Create an initial chat state with every field set."""
    return ChatState(
        message=message,
        pediatric_mode=pediatric_mode,
        keywords=[],
        age_expression=None,
        age_groups=[],
        context=None,
        prompt="",
        reply=None,
        error=None,
        retrieval_latency_ms=0,
        generation_latency_ms=0,
    )
