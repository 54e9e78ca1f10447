"""Bounded wrapper around a search provider."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx

from ..search.base import (
    SearchDocument,
    SearchError,
    SearchRateLimitError,
    SearchTimeoutError,
    SearchTransportError,
)

if TYPE_CHECKING:
    from ..search.base import SearchProvider

logger = logging.getLogger(__name__)


class SearchExecutor:
    """
    Runs one search with a hard timeout and a result cap.

    Failures are normalized into the SearchError hierarchy and re-raised.
    There is no retry here; the orchestrator decides what a failed search
    means for its branch.
    """

    def __init__(
        self,
        provider: SearchProvider,
        timeout: float = 15.0,
        result_limit: int = 5,
        formats: list[str] | None = None,
    ):
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        if result_limit < 1:
            raise ValueError("result_limit must be >= 1")
        self.provider = provider
        self.timeout = timeout
        self.result_limit = result_limit
        self.formats = ["markdown"] if formats is None else formats

    async def search(self, query: str) -> list[SearchDocument]:
        """
        Search for query.

        Raises:
            SearchTimeoutError: Call exceeded the timeout
            SearchRateLimitError: Provider answered 429
            SearchTransportError: Any other failure
        """
        name = self.provider.name
        try:
            documents = await asyncio.wait_for(
                self.provider.search(
                    query,
                    self.result_limit,
                    timeout=self.timeout,
                    formats=self.formats,
                ),
                timeout=self.timeout,
            )
        except SearchError:
            raise
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise SearchTimeoutError(
                f"{name} search timed out after {self.timeout}s", provider=name, query=query
            ) from e
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 429:
                raise SearchRateLimitError(
                    f"{name} rate limit hit", provider=name, query=query
                ) from e
            raise SearchTransportError(
                f"{name} returned HTTP {e.response.status_code}", provider=name, query=query
            ) from e
        except Exception as e:
            raise SearchTransportError(
                f"{name} search failed: {e}", provider=name, query=query
            ) from e

        documents = list(documents)[: self.result_limit]
        logger.info(f"Search via {name}: {len(documents)} results for '{query[:50]}'")
        return documents
