"""
Core module - shared protocols, errors and types for the entire system.

USAGE:
------
from medassist.core import KnowledgeStore, RetrievalError

class MyKnowledgeStore:
    '''Implements KnowledgeStore protocol.'''
    ...
"""

from medassist.core.errors import (
    MedAssistError,
    ConfigurationError,
    RetrievalError,
    NotFoundError,
)
from medassist.core.protocols import (
    # Protocols
    KnowledgeStore,
    ConversationStore,
    LanguageModel,
    # Data classes
    GenerationConfig,
    SafetySetting,
)

__all__ = [
    # Errors
    "MedAssistError",
    "ConfigurationError",
    "RetrievalError",
    "NotFoundError",
    # Protocols
    "KnowledgeStore",
    "ConversationStore",
    "LanguageModel",
    # Data classes
    "GenerationConfig",
    "SafetySetting",
]
