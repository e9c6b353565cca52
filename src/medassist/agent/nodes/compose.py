"""
Prompt node - PURE, no dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from medassist.prompts.templates import compose_prompt

if TYPE_CHECKING:
    from medassist.agent.state import ChatState


def compose_prompt_node(state: ChatState) -> dict:
    """Build the final prompt from the message and retrieved context."""
    return {"prompt": compose_prompt(state["message"], state["context"])}
