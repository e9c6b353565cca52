"""
PHI heuristics for user messages.

PRIVACY WARNING:
    These are best-effort regular expressions, NOT de-identification.
    They miss many identifiers (addresses, single names, free-form dates)
    and flag harmless text (any two capitalized words look like a name).
    Use them to warn users and to scrub obvious identifiers before
    anything leaves the process. Never rely on them for compliance.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_SSN = (re.compile(r"\b\d{3}-\d{2}-\d{4}\b"), re.compile(r"\b\d{9}\b"))
_PHONE = (
    re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b"),
    re.compile(r"\(\d{3}\)\s?\d{3}[-.]?\d{4}"),
)
_EMAIL = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_NAME = re.compile(r"\b[A-Z][a-z]+ [A-Z][a-z]+\b")
_DATE = (
    re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b"),
    re.compile(r"\b\d{1,2}-\d{1,2}-\d{4}\b"),
)
_MRN = re.compile(r"\bMRN:?\s*\d+", re.IGNORECASE)
_LONG_ID = re.compile(r"\b\d{6,12}\b")

# Substitutions run in this order; SSNs before phones before generic ids.
_REDACTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (_SSN[0], "[SSN]"),
    (_SSN[1], "[SSN]"),
    (_PHONE[0], "[PHONE]"),
    (_PHONE[1], "[PHONE]"),
    (_EMAIL, "[EMAIL]"),
    (_NAME, "[NAME]"),
    (_DATE[0], "[DATE]"),
    (_DATE[1], "[DATE]"),
    (_MRN, "[MRN]"),
    (_LONG_ID, "[ID]"),
)


def anonymize_text(message: str) -> str:
    """Replace obvious identifiers with placeholders like [SSN] or [EMAIL]."""
    for pattern, placeholder in _REDACTIONS:
        message = pattern.sub(placeholder, message)
    return message


@dataclass
class PHIValidation:
    """Result of scanning a message for likely identifiers."""
    is_valid: bool
    warnings: list[str] = field(default_factory=list)


def validate_message(message: str) -> PHIValidation:
    """Warn about identifiers a user probably should not send."""
    warnings = []

    if any(p.search(message) for p in _SSN):
        warnings.append("Message may contain Social Security Number")
    if any(p.search(message) for p in _PHONE):
        warnings.append("Message may contain phone number")
    if _EMAIL.search(message):
        warnings.append("Message may contain email address")
    if _NAME.search(message):
        warnings.append("Message may contain personal names")
    if any(p.search(message) for p in _DATE):
        warnings.append("Message may contain specific dates")

    return PHIValidation(is_valid=not warnings, warnings=warnings)


_QUERY_TYPES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("symptoms", re.compile(r"symptom|feel|pain|hurt")),
    ("medication", re.compile(r"medication|drug|prescription|pill")),
    ("treatment", re.compile(r"treatment|therapy|cure|heal")),
    ("diagnosis", re.compile(r"diagnosis|condition|disease|disorder")),
    # "er" must be a whole word or it matches nearly every message
    ("emergency", re.compile(r"emergency|urgent|911|\ber\b")),
    ("prevention", re.compile(r"prevention|avoid|protect|vaccine")),
)


def classify_query_type(message: str) -> str:
    """Coarse query category; first matching category wins."""
    message_lower = message.lower()
    for query_type, pattern in _QUERY_TYPES:
        if pattern.search(message_lower):
            return query_type
    return "general"
