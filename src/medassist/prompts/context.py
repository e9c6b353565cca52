"""
Context formatter - renders retrieved records into a prompt fragment.

The output format is consumed verbatim by the language model prompt, so the
layout (header, per-kind subheaders, blank line between records) is fixed.
"""

from __future__ import annotations

from medassist.schemas.knowledge import (
    PediatricCondition,
    PediatricDrug,
    PediatricTopic,
    RelatedContent,
)

CONTEXT_HEADER = "\n\n**PEDIATRIC KNOWLEDGE BASE CONTEXT:**\n"
CONDITIONS_HEADER = "\n**Relevant Pediatric Conditions:**\n"
DRUGS_HEADER = "\n**Relevant Pediatric Medications:**\n"
TOPICS_HEADER = "\n**Relevant Pediatric Topics:**\n"
CONTEXT_FOOTER = (
    "\n**IMPORTANT:** Use this pediatric knowledge to provide more accurate, "
    "age-appropriate medical information. Always emphasize consulting with "
    "pediatric healthcare professionals.\n"
)

TREATMENT_PREVIEW_LENGTH = 200
CONTENT_PREVIEW_LENGTH = 150


def _format_condition(condition: PediatricCondition) -> str:
    return (
        f"- **{condition.title}** ({condition.category})\n"
        f"  Description: {condition.description}\n"
        f"  Age Groups: {', '.join(condition.age_groups)}\n"
        f"  Key Symptoms: {', '.join(condition.symptoms[:3])}\n"
        f"  Treatment Overview: {condition.treatment[:TREATMENT_PREVIEW_LENGTH]}...\n\n"
    )


def _format_drug(drug: PediatricDrug) -> str:
    generic = f"({drug.generic_name})" if drug.generic_name else ""
    text = (
        f"- **{drug.name}** {generic}\n"
        f"  Category: {drug.category}\n"
        f"  Pediatric Dosage: {drug.dosage_pediatric}\n"
        f"  Indications: {', '.join(drug.indications[:2])}\n"
    )
    if drug.warnings:
        text += f"  Key Warnings: {', '.join(drug.warnings[:2])}\n"
    return text + "\n"


def _format_topic(topic: PediatricTopic) -> str:
    return (
        f"- **{topic.title}** ({topic.category})\n"
        f"  Key Points: {'; '.join(topic.key_points[:3])}\n"
        f"  Content Preview: {topic.content[:CONTENT_PREVIEW_LENGTH]}...\n\n"
    )


def format_pediatric_context(context: RelatedContent | None) -> str:
    """
    Render related records as a markdown-like prompt fragment.

    Returns "" when there is nothing to render, so callers can append the
    result unconditionally.
    """
    if context is None or context.is_empty:
        return ""

    parts = [CONTEXT_HEADER]

    if context.conditions:
        parts.append(CONDITIONS_HEADER)
        parts.extend(_format_condition(c) for c in context.conditions)

    if context.drugs:
        parts.append(DRUGS_HEADER)
        parts.extend(_format_drug(d) for d in context.drugs)

    if context.topics:
        parts.append(TOPICS_HEADER)
        parts.extend(_format_topic(t) for t in context.topics)

    parts.append(CONTEXT_FOOTER)
    return "".join(parts)
