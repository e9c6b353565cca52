"""
Seed data for the knowledge base.

Separating data from infrastructure enables:
- Content updates without code changes
- Easy testing with controlled data
"""

from medassist.retrieval.seeds.pediatric_knowledge import (
    get_pediatric_conditions,
    get_pediatric_drugs,
    get_pediatric_topics,
    load_seed_records,
    seed_knowledge_store,
)

__all__ = [
    "get_pediatric_conditions",
    "get_pediatric_drugs",
    "get_pediatric_topics",
    "load_seed_records",
    "seed_knowledge_store",
]
