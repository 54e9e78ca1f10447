"""Multi-provider search."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import (
    SearchDocument,
    SearchError,
    SearchProvider,
    SearchRateLimitError,
    SearchTimeoutError,
    SearchTransportError,
)
from .firecrawl import FirecrawlSearchProvider
from .serper import SerperSearchProvider
from .tavily import TavilySearchProvider

if TYPE_CHECKING:
    from ..config import ResearchConfig


def build_search_provider(config: ResearchConfig) -> SearchProvider:
    """
    Construct the configured search provider.

    Raises:
        ValueError: If a required API key is missing
    """
    api_key = config.get_search_api_key()
    provider = config.search.provider

    if provider == "firecrawl":
        return FirecrawlSearchProvider(api_key=api_key, base_url=config.search.base_url)
    if provider == "tavily":
        return TavilySearchProvider(api_key=api_key)
    if provider == "serper":
        return SerperSearchProvider(api_key=api_key)

    raise ValueError(f"Unsupported search provider: {provider}")


__all__ = [
    "SearchDocument",
    "SearchError",
    "SearchProvider",
    "SearchRateLimitError",
    "SearchTimeoutError",
    "SearchTransportError",
    "FirecrawlSearchProvider",
    "SerperSearchProvider",
    "TavilySearchProvider",
    "build_search_provider",
]
