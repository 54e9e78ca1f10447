"""Tavily search provider."""

import logging

from tavily import AsyncTavilyClient

from .base import SearchDocument

logger = logging.getLogger(__name__)


class TavilySearchProvider:
    """Tavily search provider (best for research)."""

    def __init__(self, api_key: str):
        """
        Initialize Tavily provider.

        Args:
            api_key: Tavily API key
        """
        self.client = AsyncTavilyClient(api_key=api_key)
        self._name = "tavily"

    @property
    def name(self) -> str:
        return self._name

    async def search(
        self,
        query: str,
        max_results: int = 5,
        *,
        timeout: float = 15.0,
        formats: list[str] | None = None,
    ) -> list[SearchDocument]:
        """
        Execute Tavily search.

        Raw page content is requested only when a content format is asked
        for; otherwise the short extract Tavily always returns is used.
        """
        include_raw_content = bool(formats)

        response = await self.client.search(
            query=query,
            max_results=max_results,
            search_depth="advanced",
            include_raw_content=include_raw_content,
            timeout=int(timeout),
        )

        documents = []
        for r in response.get("results", []):
            content = r.get("raw_content") if include_raw_content else None
            documents.append(
                SearchDocument(
                    url=r.get("url"),
                    content=content or r.get("content"),
                    title=r.get("title"),
                )
            )

        return documents
