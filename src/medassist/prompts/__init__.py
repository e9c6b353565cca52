"""
Prompts module - context formatting and prompt composition.
"""

from medassist.prompts.context import CONTEXT_HEADER, format_pediatric_context
from medassist.prompts.templates import (
    GENERAL_PROMPT_TEMPLATE,
    PEDIATRIC_PROMPT_TEMPLATE,
    PEDIATRIC_QUICK_PROMPTS,
    build_general_prompt,
    create_pediatric_prompt,
    enhance_prompt_with_pediatric_knowledge,
    compose_prompt,
)

__all__ = [
    "CONTEXT_HEADER",
    "format_pediatric_context",
    "GENERAL_PROMPT_TEMPLATE",
    "PEDIATRIC_PROMPT_TEMPLATE",
    "PEDIATRIC_QUICK_PROMPTS",
    "build_general_prompt",
    "create_pediatric_prompt",
    "enhance_prompt_with_pediatric_knowledge",
    "compose_prompt",
]
