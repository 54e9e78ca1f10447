"""
Search provider protocol, document type and failure taxonomy.

Providers return raw documents; SearchExecutor wraps them with the timeout
and result cap the research pipeline relies on.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchDocument:
    """Single retrieved document. Either field may be missing."""

    url: str | None = None
    content: str | None = None
    title: str | None = None


class SearchError(Exception):
    """Base class for search failures surfaced to the orchestrator."""

    def __init__(self, message: str, provider: str | None = None, query: str | None = None):
        self.provider = provider
        self.query = query
        super().__init__(message)


class SearchTimeoutError(SearchError):
    """The search did not complete within its timeout."""


class SearchRateLimitError(SearchError):
    """The provider rejected the request with a rate-limit response."""


class SearchTransportError(SearchError):
    """Network, HTTP or provider-side failure."""


class SearchProvider(Protocol):
    """Protocol for search providers."""

    @property
    def name(self) -> str:
        """Provider name (firecrawl, tavily, serper, ...)."""
        ...

    async def search(
        self,
        query: str,
        max_results: int = 5,
        *,
        timeout: float = 15.0,
        formats: list[str] | None = None,
    ) -> list[SearchDocument]:
        """
        Execute search and return documents.

        Args:
            query: Search query
            max_results: Maximum results to return
            timeout: Provider-side timeout in seconds
            formats: Content formats to include (e.g. ["markdown"]); empty
                or None means URLs and snippets only

        Returns:
            List of documents, possibly fewer than max_results
        """
        ...
