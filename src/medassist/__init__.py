"""
MedAssist - pediatric knowledge retrieval for a medical chat assistant.

Free-text questions are matched against a relational pediatric knowledge
base (conditions, drugs, topics), ranked, and rendered into a prompt context
fragment for a downstream language model.
"""

__version__ = "0.1.0"
