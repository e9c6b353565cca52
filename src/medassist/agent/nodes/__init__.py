"""
Chat graph nodes - isolated, testable functions.

PATTERN:
--------
1. Pure nodes (no dependencies) are simple functions
2. Nodes with dependencies use factory pattern: create_X_node(deps) -> node_fn
"""

from medassist.agent.nodes.retrieve import create_retrieve_node
from medassist.agent.nodes.compose import compose_prompt_node
from medassist.agent.nodes.generate import create_generate_node, FALLBACK_REPLY

__all__ = [
    "create_retrieve_node",
    "compose_prompt_node",
    "create_generate_node",
    "FALLBACK_REPLY",
]
