"""
Error types shared across the system.

Only `search` style operations propagate these to callers. Enrichment paths
(related content, category listing) log and degrade instead.
"""

from __future__ import annotations


class MedAssistError(Exception):
    """Base class for all MedAssist errors."""


class ConfigurationError(MedAssistError):
    """The knowledge store is not configured or not reachable at startup."""


class RetrievalError(MedAssistError):
    """
    A knowledge-base query failed.

    Raised when any of the concurrent sub-queries of a search fails.
    The original exception is kept on `cause` for logging.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class NotFoundError(MedAssistError):
    """A conversation or message id does not exist."""
