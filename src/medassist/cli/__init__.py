"""
CLI module - unified command-line interface.

Provides entry points for:
- Ranked knowledge search
- Context and prompt previews
- Message analysis
- Seeding the knowledge base
"""

from medassist.cli.commands import (
    main,
    run_search_cli,
    run_context_cli,
    run_prompt_cli,
    run_analyze_cli,
    run_seed_cli,
)

__all__ = [
    "main",
    "run_search_cli",
    "run_context_cli",
    "run_prompt_cli",
    "run_analyze_cli",
    "run_seed_cli",
]
