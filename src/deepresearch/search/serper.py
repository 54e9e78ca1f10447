"""Serper search provider (Google results)."""

import asyncio
import logging
import time

import httpx

from .base import SearchDocument
from .web_fetch import fetch_pages

logger = logging.getLogger(__name__)

# Share of the search timeout page fetching may use, counted from the start of
# the call. The rest is slack for the results request and the caller.
PAGE_FETCH_SHARE = 0.8


class SerperSearchProvider:
    """Serper.dev search provider. Page content is fetched separately."""

    def __init__(self, api_key: str):
        """
        Initialize Serper provider.

        Args:
            api_key: Serper API key
        """
        self.api_key = api_key
        self.url = "https://google.serper.dev/search"
        self._name = "serper"

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
        Execute Serper search.

        When formats are requested each hit is fetched and converted to
        markdown. Page fetching stops at a deadline inside the search timeout;
        pages that fail or run out of time keep their snippet as content.
        """
        deadline = time.monotonic() + timeout * PAGE_FETCH_SHARE

        async with httpx.AsyncClient() as client:
            response = await client.post(
                self.url,
                headers={"X-API-KEY": self.api_key},
                json={"q": query, "num": max_results},
                timeout=timeout,
            )
            response.raise_for_status()
            data = response.json()

        hits = data.get("organic", [])[:max_results]

        pages: dict[str, str | None] = {}
        if formats:
            urls = [h["link"] for h in hits if h.get("link")]
            pages = await self._fetch_pages(urls, deadline - time.monotonic())

        return [
            SearchDocument(
                url=h.get("link"),
                content=pages.get(h.get("link", "")) or h.get("snippet"),
                title=h.get("title"),
            )
            for h in hits
        ]

    async def _fetch_pages(self, urls: list[str], budget: float) -> dict[str, str | None]:
        if not urls or budget <= 0:
            return {}
        try:
            # fetch_page may try two sources per URL, each with the per-page timeout
            return await asyncio.wait_for(fetch_pages(urls, timeout=budget / 2), timeout=budget)
        except asyncio.TimeoutError:
            logger.warning(f"Page fetch ran out of time after {budget:.1f}s, using snippets")
            return {}
