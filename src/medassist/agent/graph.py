"""
Graph construction with dependency injection.

The graph is just WIRING - all logic lives in nodes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from langgraph.graph import END, StateGraph

from medassist.agent.state import ChatState
from medassist.agent.nodes import (
    compose_prompt_node,
    create_generate_node,
    create_retrieve_node,
)

if TYPE_CHECKING:
    from medassist.core import GenerationConfig, LanguageModel
    from medassist.retrieval.service import KnowledgeService


def build_chat_graph(
    service: KnowledgeService,
    model: LanguageModel | None = None,
    config: GenerationConfig | None = None,
    max_results: int = 3,
):
    """
    Build the chat workflow with injected dependencies.

    Graph structure:
    START -> retrieve_context -> compose_prompt -> generate_reply -> END

    Without a model the graph stops after compose_prompt, which is what
    the CLI uses to preview prompts.

    Args:
        service: KnowledgeService for context retrieval
        model: Optional LanguageModel for the reply
        config: Generation settings (defaults to GenerationConfig())
        max_results: Row budget for context retrieval

    Returns:
        Compiled graph ready for ainvoke()
    """
    workflow = StateGraph(ChatState)

    workflow.add_node("retrieve_context", create_retrieve_node(service, max_results))
    workflow.add_node("compose_prompt", compose_prompt_node)  # Pure, no deps needed

    workflow.set_entry_point("retrieve_context")
    workflow.add_edge("retrieve_context", "compose_prompt")

    if model is not None:
        workflow.add_node("generate_reply", create_generate_node(model, config))
        workflow.add_edge("compose_prompt", "generate_reply")
        workflow.add_edge("generate_reply", END)
    else:
        workflow.add_edge("compose_prompt", END)

    return workflow.compile()
