"""
Unit Tests for Context Formatting and Prompt Templates
"""

import pytest

from medassist.prompts import (
    GENERAL_PROMPT_TEMPLATE,
    compose_prompt,
    create_pediatric_prompt,
    enhance_prompt_with_pediatric_knowledge,
    format_pediatric_context,
)
from medassist.prompts.context import CONTEXT_FOOTER, CONTEXT_HEADER
from medassist.schemas.knowledge import (
    PediatricCondition,
    PediatricDrug,
    PediatricTopic,
    RelatedContent,
)


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def condition():
    return PediatricCondition(
        id="c1",
        title="Acute Otitis Media",
        category="Infectious Diseases",
        description="Middle ear infection",
        symptoms=["ear pain", "fever", "irritability", "ear tugging"],
        treatment="Watchful waiting or amoxicillin",
        age_groups=["infant", "toddler"],
    )


@pytest.fixture
def drug():
    return PediatricDrug(
        id="d1",
        name="Ibuprofen",
        category="NSAIDs",
        dosage_pediatric="5-10 mg/kg every 6-8 hours",
        indications=["fever", "pain", "inflammation"],
        warnings=["Avoid in dehydration", "GI upset", "Renal risk"],
    )


@pytest.fixture
def topic():
    return PediatricTopic(
        id="t1",
        title="Managing Fever in Children",
        category="Infectious Diseases",
        content="Fever is common.",
        key_points=["one", "two", "three", "four"],
    )


# ---------------------------------------------------------------------------
# CONTEXT FORMATTING
# ---------------------------------------------------------------------------


class TestFormatPediatricContext:
    """Test the prompt fragment layout."""

    def test_empty_context(self):
        assert format_pediatric_context(RelatedContent()) == ""

    def test_none_context(self):
        assert format_pediatric_context(None) == ""

    def test_header_and_footer(self, condition):
        fragment = format_pediatric_context(RelatedContent(conditions=[condition]))

        assert fragment.startswith("\n\n**PEDIATRIC KNOWLEDGE BASE CONTEXT:**\n")
        assert fragment.startswith(CONTEXT_HEADER)
        assert fragment.endswith(CONTEXT_FOOTER)

    def test_condition_block(self, condition):
        fragment = format_pediatric_context(RelatedContent(conditions=[condition]))

        assert (
            "\n**Relevant Pediatric Conditions:**\n"
            "- **Acute Otitis Media** (Infectious Diseases)\n"
            "  Description: Middle ear infection\n"
            "  Age Groups: infant, toddler\n"
            "  Key Symptoms: ear pain, fever, irritability\n"
            "  Treatment Overview: Watchful waiting or amoxicillin...\n\n"
        ) in fragment

    def test_drug_block_without_generic_name(self, drug):
        fragment = format_pediatric_context(RelatedContent(drugs=[drug]))

        assert (
            "\n**Relevant Pediatric Medications:**\n"
            "- **Ibuprofen** \n"
            "  Category: NSAIDs\n"
            "  Pediatric Dosage: 5-10 mg/kg every 6-8 hours\n"
            "  Indications: fever, pain\n"
            "  Key Warnings: Avoid in dehydration, GI upset\n\n"
        ) in fragment

    def test_drug_without_warnings_has_no_warning_line(self):
        drug = PediatricDrug(id="d2", name="Acetaminophen", generic_name="paracetamol", category="Analgesics")

        fragment = format_pediatric_context(RelatedContent(drugs=[drug]))

        assert "- **Acetaminophen** (paracetamol)\n" in fragment
        assert "Key Warnings" not in fragment

    def test_topic_block(self, topic):
        fragment = format_pediatric_context(RelatedContent(topics=[topic]))

        assert (
            "- **Managing Fever in Children** (Infectious Diseases)\n"
            "  Key Points: one; two; three\n"
            "  Content Preview: Fever is common....\n\n"
        ) in fragment

    def test_sections_in_kind_order(self, condition, drug, topic):
        fragment = format_pediatric_context(
            RelatedContent(conditions=[condition], drugs=[drug], topics=[topic])
        )

        conditions_at = fragment.index("Relevant Pediatric Conditions")
        drugs_at = fragment.index("Relevant Pediatric Medications")
        topics_at = fragment.index("Relevant Pediatric Topics")
        assert conditions_at < drugs_at < topics_at

    def test_missing_kinds_have_no_subheader(self, topic):
        fragment = format_pediatric_context(RelatedContent(topics=[topic]))

        assert "Relevant Pediatric Conditions" not in fragment
        assert "Relevant Pediatric Medications" not in fragment

    def test_treatment_preview_truncated(self, condition):
        long = condition.model_copy(update={"treatment": "t" * 300})

        fragment = format_pediatric_context(RelatedContent(conditions=[long]))

        assert f"  Treatment Overview: {'t' * 200}...\n" in fragment


# ---------------------------------------------------------------------------
# TEMPLATE SELECTION
# ---------------------------------------------------------------------------


class TestPromptTemplates:
    """Test template choice and placeholder substitution."""

    def test_general_query_uses_general_template(self):
        prompt = compose_prompt("What causes migraines?")

        assert prompt == GENERAL_PROMPT_TEMPLATE.format(user_message="What causes migraines?")

    def test_general_query_appends_context(self, condition):
        context = RelatedContent(conditions=[condition])

        prompt = compose_prompt("What causes ear pain?", context)

        assert prompt.endswith(format_pediatric_context(context))
        assert "Nelson's Textbook" not in prompt

    def test_pediatric_query_uses_specialized_template(self, condition):
        context = RelatedContent(conditions=[condition])

        prompt = compose_prompt("My toddler has ear pain", context)

        assert "Nelson's Textbook of Pediatrics" in prompt
        assert format_pediatric_context(context) in prompt
        assert prompt.endswith("User question: My toddler has ear pain")

    def test_pediatric_query_without_context_still_specialized(self):
        prompt = compose_prompt("Is a fever normal for a 2 year old?")

        assert "PEDIATRIC-SPECIFIC CONSIDERATIONS" in prompt
        assert "PEDIATRIC KNOWLEDGE BASE CONTEXT" not in prompt
        assert "{context}" not in prompt

    def test_enhance_replaces_original_for_pediatric(self):
        prompt = enhance_prompt_with_pediatric_knowledge("ORIGINAL", "baby rash")

        assert "ORIGINAL" not in prompt
        assert prompt == create_pediatric_prompt("baby rash")

    def test_enhance_keeps_original_for_general(self):
        assert enhance_prompt_with_pediatric_knowledge("ORIGINAL", "back pain") == "ORIGINAL"

    def test_braces_in_message_are_literal(self):
        prompt = compose_prompt("what does {x} mean")

        assert prompt.endswith("User question: what does {x} mean")
