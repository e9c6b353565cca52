"""
Language model test double.

The real model client belongs to the host application; it only has to
satisfy the LanguageModel protocol.
"""

from __future__ import annotations

from medassist.core.protocols import GenerationConfig


class MockLanguageModel:
    """
    Records every prompt and returns a canned reply.

    NOT for production use. The chat graph tests pass it to run_chat_turn
    and create_generate_node; no CLI command uses it, since `medassist prompt`
    composes the prompt without a model.
    """

    def __init__(self, reply: str = "This is educational information only.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []
        self.configs: list[GenerationConfig] = []

    async def generate(self, prompt: str, config: GenerationConfig) -> str:
        self.prompts.append(prompt)
        self.configs.append(config)
        if self.error is not None:
            raise self.error
        return self.reply
