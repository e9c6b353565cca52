"""
CLI commands - entry points for searching and prompt previews.

Each command follows a consistent pattern:
1. Parse arguments
2. Load environment
3. Run the operation
4. Print results
5. Return exit code
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from medassist.config import get_settings
from medassist.core.errors import MedAssistError


def _load_env() -> None:
    """Load environment variables from .env file."""
    try:
        from dotenv import load_dotenv

        load_dotenv()
    except ImportError:
        pass  # dotenv is optional


def _configure_logging() -> None:
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_service():
    from medassist.retrieval import KnowledgeService, get_knowledge_store

    return KnowledgeService(get_knowledge_store(get_settings()))


def run_search_cli() -> int:
    """CLI entry point for ranked knowledge search."""
    from medassist.schemas.knowledge import AdvancedSearchFilters, SearchFilters

    parser = argparse.ArgumentParser(description="Search the pediatric knowledge base")
    parser.add_argument("query", help="Search text")
    parser.add_argument("--limit", type=int, default=None, help="Row budget across all kinds")
    parser.add_argument("--category", help="Only this category")
    parser.add_argument("--age-group", help="Only conditions tagged with this age group")
    parser.add_argument("--chapter", help="Only this chapter")
    parser.add_argument("--tag", action="append", default=[], help="Topic tag (repeatable)")
    parser.add_argument(
        "--type",
        action="append",
        default=[],
        choices=["condition", "drug", "topic"],
        help="Content type to keep (repeatable)",
    )
    parser.add_argument(
        "--sort-by", default="relevance", choices=["relevance", "title", "category", "chapter"]
    )
    parser.add_argument("--sort-order", default="desc", choices=["asc", "desc"])
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    args = parser.parse_args()

    filters = SearchFilters(
        category=args.category,
        age_group=args.age_group,
        chapter=args.chapter,
        tags=args.tag,
    )
    advanced = AdvancedSearchFilters(
        content_types=args.type,
        sort_by=args.sort_by,
        sort_order=args.sort_order,
    )
    limit = args.limit or get_settings().search_limit
    service = _build_service()

    async def _run():
        try:
            return await service.search_ranked(args.query, filters, advanced, limit)
        finally:
            await service.close()

    try:
        results = asyncio.run(_run())
    except MedAssistError as e:
        print(f"Search failed: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([r.model_dump() for r in results], indent=2))
        return 0

    print("=" * 60)
    print(f"SEARCH: {args.query}")
    print("=" * 60)
    for result in results:
        print(f"  [{result.relevance_score:>4}] {result.type:<9} {result.title} ({result.category})")
        if result.description:
            print(f"         {result.description[:100]}")
    print(f"\nTotal: {len(results)}")
    return 0


def run_context_cli() -> int:
    """CLI entry point printing the prompt context fragment for a query."""
    from medassist.prompts import format_pediatric_context

    parser = argparse.ArgumentParser(description="Show knowledge base context for a query")
    parser.add_argument("query", help="Search text")
    parser.add_argument("--max-results", type=int, default=None)
    args = parser.parse_args()

    service = _build_service()
    max_results = args.max_results or get_settings().context_results

    async def _run():
        try:
            return await service.get_related_content(args.query, max_results)
        finally:
            await service.close()

    context = asyncio.run(_run())
    fragment = format_pediatric_context(context)
    if not fragment:
        print("No related knowledge found.")
        return 1
    print(fragment)
    return 0


def run_prompt_cli() -> int:
    """CLI entry point printing the composed prompt for a chat message."""
    from medassist.agent import run_chat_turn

    parser = argparse.ArgumentParser(description="Compose the prompt for a chat message")
    parser.add_argument("message", help="User message")
    parser.add_argument(
        "--pediatric-mode",
        action="store_true",
        default=None,
        help="Retrieve context even for non-pediatric questions",
    )
    args = parser.parse_args()

    settings = get_settings()
    pediatric_mode = args.pediatric_mode if args.pediatric_mode is not None else settings.pediatric_mode
    service = _build_service()

    async def _run():
        try:
            return await run_chat_turn(
                args.message,
                service,
                pediatric_mode=pediatric_mode,
                max_results=settings.context_results,
            )
        finally:
            await service.close()

    result = asyncio.run(_run())
    print(result.prompt)
    return 0


def run_analyze_cli() -> int:
    """CLI entry point showing what the extractors see in a message."""
    from medassist.compliance import classify_query_type, validate_message
    from medassist.retrieval.extract import (
        extract_age_expression,
        extract_keywords,
        is_pediatric_query,
        map_age_to_group,
    )

    parser = argparse.ArgumentParser(description="Analyze a chat message")
    parser.add_argument("message", help="User message")
    args = parser.parse_args()

    age_expression = extract_age_expression(args.message)
    validation = validate_message(args.message)
    report = {
        "pediatric": is_pediatric_query(args.message),
        "keywords": extract_keywords(args.message),
        "age_expression": age_expression,
        "age_groups": map_age_to_group(age_expression) if age_expression else [],
        "query_type": classify_query_type(args.message),
        "phi_warnings": validation.warnings,
    }
    print(json.dumps(report, indent=2))
    return 0


def run_seed_cli() -> int:
    """CLI entry point creating the schema and loading seed records."""
    from medassist.retrieval import get_knowledge_store, seed_knowledge_store

    parser = argparse.ArgumentParser(description="Create tables and load seed records")
    parser.parse_args()

    settings = get_settings()
    if not (settings.use_postgres and settings.knowledge_enabled):
        print(
            "Seeding needs MEDASSIST_USE_POSTGRES=true and MEDASSIST_DATABASE_URL",
            file=sys.stderr,
        )
        return 1

    store = get_knowledge_store(settings, seed=False)

    async def _run():
        try:
            return await seed_knowledge_store(store)
        finally:
            await store.close()

    count = asyncio.run(_run())
    print(f"Seeded {count} records")
    return 0


def main() -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        medassist search QUERY    # Ranked knowledge search
        medassist context QUERY   # Prompt context fragment
        medassist prompt MESSAGE  # Full composed prompt
        medassist analyze MESSAGE # Keywords, age, PHI warnings
        medassist seed            # Load seed records into Postgres
    """
    _load_env()
    _configure_logging()

    parser = argparse.ArgumentParser(
        description="MedAssist pediatric knowledge tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  search      Ranked search across conditions, drugs and topics
  context     Show the knowledge base context for a query
  prompt      Show the prompt that would be sent to the model
  analyze     Show keywords, age group and PHI warnings for a message
  seed        Create tables and load seed records (Postgres)

Examples:
  medassist search asthma --type drug
  medassist prompt "What is the fever treatment for a 2 year old?"
        """,
    )

    parser.add_argument(
        "command",
        choices=["search", "context", "prompt", "analyze", "seed"],
        help="Command to run",
    )

    # Parse just the command first
    args, remaining = parser.parse_known_args()

    commands = {
        "search": run_search_cli,
        "context": run_context_cli,
        "prompt": run_prompt_cli,
        "analyze": run_analyze_cli,
        "seed": run_seed_cli,
    }

    # Re-inject remaining args for the subcommand
    sys.argv = [sys.argv[0]] + remaining

    try:
        return commands[args.command]()
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
