"""
Keyword and age extraction from free-text questions.

Pure functions over fixed vocabularies - no I/O, deterministic,
safe to call on every chat message.
"""

from __future__ import annotations

import re

# Order matters: extract_keywords returns matches in this order.
MEDICAL_TERMS: tuple[str, ...] = (
    # Common pediatric conditions
    "fever", "cough", "rash", "vomiting", "diarrhea", "seizure", "asthma", "pneumonia",
    "bronchitis", "otitis", "strep", "flu", "cold", "allergies", "eczema", "constipation",
    "dehydration", "jaundice", "anemia", "diabetes", "obesity", "growth", "development",
    # Age groups
    "newborn", "infant", "baby", "toddler", "child", "children", "adolescent", "teenager",
    "pediatric", "neonatal",
    # Symptoms
    "pain", "headache", "stomach", "abdominal", "chest", "breathing", "difficulty",
    "swelling", "bleeding", "bruising", "fatigue", "weakness", "irritability",
    # Body systems
    "respiratory", "cardiac", "gastrointestinal", "neurological", "dermatological",
    "musculoskeletal", "endocrine", "immunological",
)

PEDIATRIC_INDICATORS: tuple[str, ...] = (
    "child", "children", "baby", "infant", "newborn", "toddler", "kid", "kids",
    "pediatric", "paediatric", "adolescent", "teenager", "teen", "neonatal",
    "year old", "years old", "month old", "months old", "week old", "weeks old",
)

# Tried in order; the first pattern that matches wins.
AGE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(\d+)\s*(year|yr)s?\s*old", re.IGNORECASE),
    re.compile(r"(\d+)\s*(month|mo)s?\s*old", re.IGNORECASE),
    re.compile(r"(\d+)\s*(week|wk)s?\s*old", re.IGNORECASE),
    re.compile(r"(\d+)\s*(day)s?\s*old", re.IGNORECASE),
    re.compile(r"(newborn|infant|baby|toddler|child|adolescent|teenager)", re.IGNORECASE),
)

_YEARS_RE = re.compile(r"(\d+)\s*year", re.IGNORECASE)
_MONTHS_RE = re.compile(r"(\d+)\s*month", re.IGNORECASE)

COMMON_SEARCH_TERMS: tuple[str, ...] = (
    "fever in children",
    "pediatric asthma",
    "infant feeding",
    "childhood vaccines",
    "growth charts",
    "developmental milestones",
    "newborn care",
    "pediatric emergencies",
    "child nutrition",
    "adolescent health",
    "pediatric medications",
    "childhood infections",
    "infant sleep",
    "toddler behavior",
    "school health",
    "pediatric allergies",
    "child safety",
    "immunizations",
    "pediatric dermatology",
    "childhood obesity",
)


def extract_keywords(query: str) -> list[str]:
    """
    Return every known medical term occurring in the query.

    Matching is a case-insensitive substring test, so "fevers" yields
    "fever". Results follow vocabulary order, not input order.
    """
    query_lower = query.lower()
    return [term for term in MEDICAL_TERMS if term in query_lower]


def is_pediatric_query(query: str) -> bool:
    """True if the question mentions a child or a child's age."""
    query_lower = query.lower()
    return any(indicator in query_lower for indicator in PEDIATRIC_INDICATORS)


def extract_age_expression(query: str) -> str | None:
    """
    Find the first age expression in the query.

    >>> extract_age_expression("fever in my 2 year old")
    '2 year old'
    """
    for pattern in AGE_PATTERNS:
        match = pattern.search(query)
        if match:
            return match.group(0)
    return None


def map_age_to_group(age_expression: str) -> list[str]:
    """
    Map an age expression to age-group tags.

    Keyword rules are checked before numeric parsing, so "child" maps to
    both preschool and school. Anything unrecognized maps to [].
    """
    age_lower = age_expression.lower()

    if "newborn" in age_lower or ("0" in age_lower and "day" in age_lower):
        return ["newborn"]
    if "infant" in age_lower or "baby" in age_lower:
        return ["infant"]
    if "toddler" in age_lower:
        return ["toddler"]
    if "child" in age_lower or "kid" in age_lower:
        return ["preschool", "school"]
    if "adolescent" in age_lower or "teen" in age_lower:
        return ["adolescent"]

    year_match = _YEARS_RE.search(age_expression)
    if year_match:
        years = int(year_match.group(1))
        if years < 1:
            return ["infant"]
        if years <= 3:
            return ["toddler"]
        if years <= 5:
            return ["preschool"]
        if years <= 12:
            return ["school"]
        return ["adolescent"]

    month_match = _MONTHS_RE.search(age_expression)
    if month_match:
        months = int(month_match.group(1))
        if months <= 12:
            return ["infant"]
        if months <= 36:
            return ["toddler"]
        return ["preschool"]

    return []


def generate_search_suggestions(text: str, limit: int = 8) -> list[str]:
    """Common search terms containing the partial input."""
    text_lower = text.lower()
    return [term for term in COMMON_SEARCH_TERMS if text_lower in term][:limit]


def highlight_search_terms(text: str, terms: list[str]) -> str:
    """Wrap case-insensitive occurrences of each term in <mark> tags."""
    highlighted = text
    for term in terms:
        if not term:
            continue
        pattern = re.compile(f"({re.escape(term)})", re.IGNORECASE)
        highlighted = pattern.sub(r"<mark>\1</mark>", highlighted)
    return highlighted
