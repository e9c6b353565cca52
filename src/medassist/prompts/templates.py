"""
Prompt templates and the prompt composer.

Template choice depends only on whether the message is a pediatric query,
never on whether context was found. A pediatric query with no context still
gets the pediatric template, with an empty context block.
"""

from __future__ import annotations

from medassist.prompts.context import format_pediatric_context
from medassist.retrieval.extract import is_pediatric_query
from medassist.schemas.knowledge import RelatedContent

GENERAL_PROMPT_TEMPLATE = """You are MedAssist AI, a helpful medical information assistant. Provide accurate, evidence-based medical information while always emphasizing that this is for educational purposes only and users should consult healthcare professionals for actual medical advice.

IMPORTANT DISCLAIMERS:
- This is for educational purposes only
- Always recommend consulting qualified healthcare professionals
- Do not provide specific diagnoses or treatment plans
- Emphasize emergency care when appropriate

User question: {user_message}"""

PEDIATRIC_PROMPT_TEMPLATE = """You are MedAssist AI, a specialized medical information assistant with access to Nelson's Textbook of Pediatrics knowledge base. You provide educational medical information with a focus on pediatric care.

CRITICAL GUIDELINES:
- Provide accurate, evidence-based pediatric medical information
- Always emphasize age-appropriate considerations
- Include specific pediatric dosing, symptoms, and treatment approaches when relevant
- Clearly state when immediate medical attention is needed
- Reference pediatric-specific guidelines and protocols
- Always recommend consulting with pediatric healthcare professionals
- Never provide definitive diagnoses - only educational information
- Be especially cautious with medication recommendations for children

PEDIATRIC-SPECIFIC CONSIDERATIONS:
- Age-appropriate symptom recognition
- Weight-based dosing calculations
- Developmental considerations
- Age-specific normal values and ranges
- Pediatric emergency warning signs
- Growth and development factors
- Family-centered care approaches

{context}

RESPONSE FORMAT:
- Start with age-appropriate medical information
- Include relevant pediatric considerations
- Provide clear warning signs that require immediate medical attention
- End with strong recommendation to consult pediatric healthcare providers
- Use clear, accessible language appropriate for parents/caregivers

User question: {user_message}"""

PEDIATRIC_QUICK_PROMPTS: tuple[str, ...] = (
    "What are normal fever ranges for different pediatric age groups?",
    "When should I be concerned about my child's cough?",
    "What are the signs of dehydration in infants and children?",
    "How do I know if my child's rash needs medical attention?",
    "What are age-appropriate developmental milestones?",
    "When should my child see a pediatrician for stomach pain?",
    "What are the warning signs of serious illness in children?",
    "How do pediatric medication dosages differ from adults?",
)


def build_general_prompt(user_message: str) -> str:
    return GENERAL_PROMPT_TEMPLATE.format(user_message=user_message)


def create_pediatric_prompt(user_message: str, context: RelatedContent | None = None) -> str:
    """The pediatric template with the context fragment embedded."""
    return PEDIATRIC_PROMPT_TEMPLATE.format(
        context=format_pediatric_context(context),
        user_message=user_message,
    )


def enhance_prompt_with_pediatric_knowledge(
    original_prompt: str,
    user_message: str,
    context: RelatedContent | None = None,
) -> str:
    """
    Pick the final prompt for a message.

    Pediatric queries get the specialized template. Other messages keep
    the original prompt, with the context fragment appended when present.
    """
    if is_pediatric_query(user_message):
        return create_pediatric_prompt(user_message, context)

    return original_prompt + format_pediatric_context(context)


def compose_prompt(user_message: str, context: RelatedContent | None = None) -> str:
    """Compose the full prompt starting from the general template."""
    return enhance_prompt_with_pediatric_knowledge(
        build_general_prompt(user_message), user_message, context
    )
