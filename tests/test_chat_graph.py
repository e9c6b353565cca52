"""
Tests for the chat graph: nodes in isolation, then the full turn.

Nodes are plain functions (or factories returning them), so they can be
driven directly with a state dict. The end-to-end tests run the compiled
LangGraph over the seeded in-memory store and a MockLanguageModel.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from medassist.agent import (
    ChatTurnError,
    ChatTurnResult,
    MockLanguageModel,
    build_chat_graph,
    create_initial_state,
    run_chat_turn,
)
from medassist.agent.nodes import (
    FALLBACK_REPLY,
    compose_prompt_node,
    create_generate_node,
    create_retrieve_node,
)
from medassist.core import GenerationConfig
from medassist.retrieval import InMemoryKnowledgeStore, KnowledgeService, load_seed_records
from medassist.schemas.knowledge import PediatricCondition, RelatedContent


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def service():
    return KnowledgeService(InMemoryKnowledgeStore(*load_seed_records()))


@pytest.fixture
def spy_service():
    """Service double that records related-content calls."""
    spy = AsyncMock()
    spy.enabled = True
    spy.get_related_content.return_value = RelatedContent()
    return spy


# ---------------------------------------------------------------------------
# RETRIEVE NODE
# ---------------------------------------------------------------------------


class TestRetrieveNode:
    """Test context retrieval decisions."""

    def test_pediatric_query_retrieves(self, spy_service):
        node = create_retrieve_node(spy_service, max_results=3)
        state = create_initial_state("My baby has a fever and rash")

        update = asyncio.run(node(state))

        spy_service.get_related_content.assert_awaited_once_with("fever rash baby", 3, ["infant"])
        assert update["keywords"] == ["fever", "rash", "baby"]
        assert update["age_expression"] == "baby"
        assert update["age_groups"] == ["infant"]

    def test_general_query_skips_retrieval(self, spy_service):
        node = create_retrieve_node(spy_service)

        update = asyncio.run(node(create_initial_state("How long does a cough last?")))

        spy_service.get_related_content.assert_not_awaited()
        assert update["context"] is None
        assert update["keywords"] == ["cough"]

    def test_pediatric_mode_forces_retrieval(self, spy_service):
        node = create_retrieve_node(spy_service)

        asyncio.run(node(create_initial_state("How long does a cough last?", pediatric_mode=True)))

        spy_service.get_related_content.assert_awaited_once_with("cough", 3, None)

    def test_no_keywords_skips_retrieval(self, spy_service):
        node = create_retrieve_node(spy_service)

        update = asyncio.run(node(create_initial_state("my kid is grumpy")))

        spy_service.get_related_content.assert_not_awaited()
        assert update["keywords"] == []

    def test_disabled_service_skips_retrieval(self):
        node = create_retrieve_node(KnowledgeService(None))

        update = asyncio.run(node(create_initial_state("My baby has a fever")))

        assert update["context"] is None
        assert update["keywords"] == ["fever", "baby"]


# ---------------------------------------------------------------------------
# COMPOSE AND GENERATE NODES
# ---------------------------------------------------------------------------


class TestComposeNode:
    """Test the pure prompt node."""

    def test_builds_prompt(self):
        state = create_initial_state("What causes migraines?")

        update = compose_prompt_node(state)

        assert update["prompt"].endswith("User question: What causes migraines?")


class TestGenerateNode:
    """Test model invocation and failure capture."""

    def test_reply(self):
        model = MockLanguageModel(reply="Fluids and rest.")
        node = create_generate_node(model)
        state = {**create_initial_state("q"), "prompt": "PROMPT"}

        update = asyncio.run(node(state))

        assert update["reply"] == "Fluids and rest."
        assert update["error"] is None
        assert model.prompts == ["PROMPT"]
        assert model.configs == [GenerationConfig()]

    def test_empty_reply_uses_fallback(self):
        node = create_generate_node(MockLanguageModel(reply=""))

        update = asyncio.run(node(create_initial_state("q")))

        assert update["reply"] == FALLBACK_REPLY

    def test_model_failure_recorded_in_state(self):
        node = create_generate_node(MockLanguageModel(error=RuntimeError("quota exceeded")))

        update = asyncio.run(node(create_initial_state("q")))

        assert update["reply"] is None
        assert update["error"] == "quota exceeded"

    def test_custom_config_passed_through(self):
        model = MockLanguageModel()
        config = GenerationConfig(temperature=0.0)

        asyncio.run(create_generate_node(model, config)(create_initial_state("q")))

        assert model.configs == [config]


# ---------------------------------------------------------------------------
# END TO END
# ---------------------------------------------------------------------------


class TestChatTurn:
    """Run the compiled graph over the seeded store."""

    def test_pediatric_fever_question(self, service):
        result = asyncio.run(
            run_chat_turn("What is the fever treatment for a 2 year old?", service)
        )

        assert isinstance(result, ChatTurnResult)
        assert "fever" in result.keywords
        assert result.age_expression == "2 year old"
        assert result.age_groups == ["toddler"]
        assert "Nelson's Textbook of Pediatrics" in result.prompt
        assert "PEDIATRIC KNOWLEDGE BASE CONTEXT" in result.prompt
        assert "Fever Without a Focus" in result.prompt
        assert result.reply is None

    def test_context_limited_to_mentioned_age(self):
        """A fever condition for adolescents is not embedded for a toddler."""
        conditions, drugs, topics = load_seed_records()
        teen_fever = PediatricCondition(
            id="cond_teen_fever",
            title="Fever in Adolescent Athletes",
            category="Infectious Diseases",
            description="Fever after endurance training",
            age_groups=["adolescent"],
        )
        service = KnowledgeService(
            InMemoryKnowledgeStore([teen_fever, *conditions], drugs, topics)
        )

        result = asyncio.run(
            run_chat_turn("What is the fever treatment for a 2 year old?", service)
        )

        titles = [c.title for c in result.context.conditions]
        assert "Fever in Adolescent Athletes" not in titles
        assert "Fever Without a Focus" in titles
        assert "Fever in Adolescent Athletes" not in result.prompt
        assert all("toddler" in c.age_groups for c in result.context.conditions)

    def test_context_capped_per_kind(self, service):
        result = asyncio.run(
            run_chat_turn("My child has a fever", service, max_results=12)
        )

        assert len(result.context.conditions) <= 2
        assert len(result.context.drugs) <= 2
        assert len(result.context.topics) <= 2

    def test_general_question_gets_general_prompt(self, service):
        result = asyncio.run(run_chat_turn("What causes migraines?", service))

        assert result.context is None
        assert result.prompt.startswith("You are MedAssist AI, a helpful medical information assistant.")

    def test_with_model(self, service):
        model = MockLanguageModel(reply="Offer fluids and monitor.")

        result = asyncio.run(run_chat_turn("My baby has a fever", service, model=model))

        assert result.reply == "Offer fluids and monitor."
        assert model.prompts == [result.prompt]
        assert result.total_latency_ms >= 0

    def test_model_failure_returns_error(self, service):
        model = MockLanguageModel(error=RuntimeError("model unavailable"))

        result = asyncio.run(run_chat_turn("My baby has a fever", service, model=model))

        assert isinstance(result, ChatTurnError)
        assert result.error_type == "generation_error"
        assert result.error_message == "model unavailable"
        assert "User question: My baby has a fever" in result.prompt

    def test_disabled_service_still_composes_prompt(self):
        result = asyncio.run(run_chat_turn("My baby has a fever", KnowledgeService(None)))

        assert "PEDIATRIC-SPECIFIC CONSIDERATIONS" in result.prompt
        assert "PEDIATRIC KNOWLEDGE BASE CONTEXT" not in result.prompt

    def test_graph_without_model_has_no_generate_node(self, service):
        graph = build_chat_graph(service)

        assert "generate_reply" not in graph.get_graph().nodes
