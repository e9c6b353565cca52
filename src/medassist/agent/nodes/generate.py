"""
Generation node - hands the composed prompt to the language model.

Model failures are recorded in state instead of raised; the caller
decides how to show them.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Awaitable, Callable

from medassist.core.protocols import GenerationConfig

if TYPE_CHECKING:
    from medassist.agent.state import ChatState
    from medassist.core import LanguageModel

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I couldn't generate a response."


def create_generate_node(
    model: LanguageModel,
    config: GenerationConfig | None = None,
) -> Callable[[ChatState], Awaitable[dict]]:
    """Factory that creates a generation node with an injected model."""
    config = config or GenerationConfig()

    async def generate_reply(state: ChatState) -> dict:
        start = time.time()
        try:
            reply = await model.generate(state["prompt"], config)
        except Exception as e:
            logger.warning("Language model call failed: %s", e)
            return {
                "reply": None,
                "error": str(e) or type(e).__name__,
                "generation_latency_ms": (time.time() - start) * 1000,
            }

        return {
            "reply": reply or FALLBACK_REPLY,
            "error": None,
            "generation_latency_ms": (time.time() - start) * 1000,
        }

    return generate_reply
