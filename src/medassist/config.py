"""
Application configuration.

Loads settings from environment variables. The knowledge store is optional:
without a database URL the Postgres store runs in disabled mode.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = ("true", "1", "yes")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in _TRUTHY


@dataclass
class Settings:
    """Configuration for MedAssist.

    Environment Variables:
        MEDASSIST_DATABASE_URL: Postgres connection string (falls back to DATABASE_URL)
        MEDASSIST_USE_POSTGRES: Use the Postgres knowledge store (default: false)
        MEDASSIST_SEARCH_LIMIT: Default row budget for a search (default: 20)
        MEDASSIST_CONTEXT_RESULTS: Row budget for prompt enrichment (default: 3)
        MEDASSIST_CONNECT_TIMEOUT: Connection timeout in seconds (default: 10)
        MEDASSIST_PEDIATRIC_MODE: Always enrich prompts with context (default: false)
        MEDASSIST_LOG_LEVEL: Logging level for the CLI (default: WARNING)
    """

    database_url: str | None = None
    use_postgres: bool = False
    search_limit: int = 20
    context_results: int = 3
    connect_timeout: int = 10
    pediatric_mode: bool = False
    log_level: str = "WARNING"

    @property
    def knowledge_enabled(self) -> bool:
        """Whether a Postgres knowledge base has been configured."""
        return bool(self.database_url)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_url=(
                os.environ.get("MEDASSIST_DATABASE_URL")
                or os.environ.get("DATABASE_URL")
                or None
            ),
            use_postgres=_env_flag("MEDASSIST_USE_POSTGRES"),
            search_limit=int(os.environ.get("MEDASSIST_SEARCH_LIMIT", "20")),
            context_results=int(os.environ.get("MEDASSIST_CONTEXT_RESULTS", "3")),
            connect_timeout=int(os.environ.get("MEDASSIST_CONNECT_TIMEOUT", "10")),
            pediatric_mode=_env_flag("MEDASSIST_PEDIATRIC_MODE"),
            log_level=os.environ.get("MEDASSIST_LOG_LEVEL", "WARNING").upper(),
        )


# Global settings singleton
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings (lazy-loaded from env)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
