"""Firecrawl search provider (search + scrape in one call)."""

import logging

import httpx

from .base import SearchDocument

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.firecrawl.dev"


class FirecrawlSearchProvider:
    """Firecrawl search provider. Returns page markdown alongside each hit."""

    def __init__(self, api_key: str | None = None, base_url: str | None = None):
        """
        Initialize Firecrawl provider.

        Args:
            api_key: Firecrawl API key (optional for self-hosted instances)
            base_url: Override for self-hosted Firecrawl
        """
        self.api_key = api_key
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._name = "firecrawl"

    @property
    def name(self) -> str:
        return self._name

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    async def search(
        self,
        query: str,
        max_results: int = 5,
        *,
        timeout: float = 15.0,
        formats: list[str] | None = None,
    ) -> list[SearchDocument]:
        """
        Execute Firecrawl search.

        The server-side timeout is passed through in milliseconds; the HTTP
        client gets a little slack on top so the server can answer first.
        """
        payload: dict = {
            "query": query,
            "limit": max_results,
            "timeout": int(timeout * 1000),
        }
        if formats:
            payload["scrapeOptions"] = {"formats": formats}

        async with httpx.AsyncClient(timeout=timeout + 5.0) as client:
            response = await client.post(
                f"{self.base_url}/v1/search",
                headers=self._headers(),
                json=payload,
            )
            response.raise_for_status()
            data = response.json()

        if data.get("success") is False:
            raise RuntimeError(f"Firecrawl search failed: {data.get('error', 'unknown error')}")

        content_fields = formats or ["markdown"]
        documents = []
        for item in data.get("data", []):
            documents.append(
                SearchDocument(
                    url=item.get("url"),
                    content=_first_content(item, content_fields),
                    title=item.get("title") or (item.get("metadata") or {}).get("title"),
                )
            )

        return documents


def _first_content(item: dict, fields: list[str]) -> str | None:
    """Page content under the first requested format Firecrawl filled in."""
    for field in fields:
        if item.get(field):
            return item[field]
    return None
