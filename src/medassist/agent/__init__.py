"""
Agent module - the LangGraph chat flow.

WHY LANGGRAPH:
--------------
1. STATE MACHINE: Explicit nodes and edges make the flow visible
2. TESTABILITY: Each node can be tested in isolation
3. INJECTION: Store and model are passed in, never global
"""

from medassist.agent.state import ChatState, create_initial_state
from medassist.agent.nodes import (
    create_retrieve_node,
    compose_prompt_node,
    create_generate_node,
)
from medassist.agent.graph import build_chat_graph
from medassist.agent.models import MockLanguageModel
from medassist.agent.runner import ChatTurnResult, ChatTurnError, run_chat_turn

__all__ = [
    # State
    "ChatState",
    "create_initial_state",
    # Nodes
    "create_retrieve_node",
    "compose_prompt_node",
    "create_generate_node",
    # Graph
    "build_chat_graph",
    # Models
    "MockLanguageModel",
    # Runner
    "ChatTurnResult",
    "ChatTurnError",
    "run_chat_turn",
]
