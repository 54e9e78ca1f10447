"""
Page content extraction for providers that only return links and snippets.

Strategies:
1. Jina Reader API (fast, clean markdown)
2. Fallback to direct fetch + readability + markdownify
"""

import asyncio
import logging

import httpx
from bs4 import BeautifulSoup
from markdownify import markdownify
from readability import Document

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; DeepResearchBot/1.0)"


def html_to_markdown(html: str) -> str:
    """Extract the main article from an HTML page and convert it to markdown."""
    doc = Document(html)
    title = doc.title()
    content_html = doc.summary()

    # readability keeps an html/body wrapper around the article
    body = BeautifulSoup(content_html, "html.parser")
    content_md = markdownify(str(body), heading_style="ATX").strip()

    if title and title != "[no-title]":
        return f"# {title}\n\n{content_md}"
    return content_md


async def fetch_page(url: str, timeout: float = 15.0, use_jina: bool = True) -> str | None:
    """
    Fetch clean page content as markdown.

    Args:
        url: URL to fetch
        timeout: Per-request timeout in seconds
        use_jina: Try Jina Reader first

    Returns:
        Markdown content, or None if the page could not be fetched
    """
    if use_jina:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(f"https://r.jina.ai/{url}", timeout=timeout)
            if response.status_code == 200 and response.text.strip():
                logger.debug(f"Fetched via Jina Reader: {url}")
                return response.text
        except httpx.HTTPError as e:
            logger.warning(f"Jina Reader failed for {url}: {e}")

    try:
        async with httpx.AsyncClient(follow_redirects=True) as client:
            response = await client.get(
                url,
                headers={"User-Agent": USER_AGENT},
                timeout=timeout,
            )
            response.raise_for_status()
            html = response.text
    except httpx.HTTPError as e:
        logger.warning(f"Web fetch failed for {url}: {e}")
        return None

    try:
        content = html_to_markdown(html)
    except Exception as e:
        logger.warning(f"Content extraction failed for {url}: {e}")
        return None

    logger.debug(f"Fetched via readability: {url}")
    return content or None


async def fetch_pages(
    urls: list[str], timeout: float = 15.0, max_concurrent: int = 5
) -> dict[str, str | None]:
    """
    Fetch multiple URLs concurrently.

    Returns:
        Dict mapping URL to content (None for pages that failed)
    """
    semaphore = asyncio.Semaphore(max_concurrent)

    async def fetch_with_semaphore(url: str) -> tuple[str, str | None]:
        async with semaphore:
            return url, await fetch_page(url, timeout=timeout)

    completed = await asyncio.gather(*(fetch_with_semaphore(url) for url in urls))
    return dict(completed)
