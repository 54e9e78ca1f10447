"""
Tests for page fetching and HTML extraction.

These tests verify:
- Jina Reader output is used when it answers
- Direct fetch with readability is the fallback
- Failed pages come back as None
"""

import httpx
import pytest

from deepresearch.search import web_fetch as web_fetch_module
from deepresearch.search.web_fetch import fetch_page, fetch_pages, html_to_markdown

ARTICLE_HTML = """
<html>
  <head><title>Acme Batteries</title></head>
  <body>
    <nav><a href="/">Home</a> <a href="/about">About</a></nav>
    <article>
      <h2>Solid electrolytes</h2>
      <p>Acme Batteries builds cells with a solid electrolyte that blocks dendrites.
      The company raised $40M in 2024 to scale a pilot line in Nevada.</p>
      <p>Its ceramic separator is thinner than competing designs, which improves
      energy density while keeping the cell stable at high charge rates.</p>
    </article>
  </body>
</html>
"""


class Routes(dict):
    """Canned responses by URL. Requests made are recorded in seen."""

    def __init__(self):
        super().__init__()
        self.seen = []


@pytest.fixture
def routes(monkeypatch):
    """Serve canned responses by URL; unknown URLs answer 404."""
    table = Routes()
    real_client = httpx.AsyncClient

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        table.seen.append((url, request.headers.get("User-Agent")))
        response = table.get(url)
        if response is None:
            return httpx.Response(404)
        if isinstance(response, Exception):
            raise response
        return response

    def factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    monkeypatch.setattr(web_fetch_module.httpx, "AsyncClient", factory)
    return table


def test_html_to_markdown_keeps_title_and_article():
    markdown = html_to_markdown(ARTICLE_HTML)

    assert markdown.startswith("# Acme Batteries\n\n")
    assert "solid electrolyte" in markdown
    assert "<p>" not in markdown


@pytest.mark.asyncio
async def test_fetch_page_prefers_jina(routes):
    routes["https://r.jina.ai/https://acme.example/post"] = httpx.Response(200, text="# Clean page")

    content = await fetch_page("https://acme.example/post")

    assert content == "# Clean page"
    assert [url for url, _ in routes.seen] == ["https://r.jina.ai/https://acme.example/post"]


@pytest.mark.asyncio
async def test_fetch_page_falls_back_to_direct_fetch(routes):
    routes["https://r.jina.ai/https://acme.example/post"] = httpx.Response(500)
    routes["https://acme.example/post"] = httpx.Response(200, html=ARTICLE_HTML)

    content = await fetch_page("https://acme.example/post")

    assert content.startswith("# Acme Batteries")
    assert "solid electrolyte" in content
    direct = routes.seen[-1]
    assert direct == ("https://acme.example/post", web_fetch_module.USER_AGENT)


@pytest.mark.asyncio
async def test_fetch_page_empty_jina_body_falls_back(routes):
    routes["https://r.jina.ai/https://acme.example/post"] = httpx.Response(200, text="   ")
    routes["https://acme.example/post"] = httpx.Response(200, html=ARTICLE_HTML)

    content = await fetch_page("https://acme.example/post")

    assert content.startswith("# Acme Batteries")


@pytest.mark.asyncio
async def test_fetch_page_jina_error_falls_back(routes):
    routes["https://r.jina.ai/https://acme.example/post"] = httpx.ConnectError("refused")
    routes["https://acme.example/post"] = httpx.Response(200, html=ARTICLE_HTML)

    content = await fetch_page("https://acme.example/post")

    assert content.startswith("# Acme Batteries")


@pytest.mark.asyncio
async def test_fetch_page_without_jina(routes):
    routes["https://acme.example/post"] = httpx.Response(200, html=ARTICLE_HTML)

    content = await fetch_page("https://acme.example/post", use_jina=False)

    assert "solid electrolyte" in content
    assert [url for url, _ in routes.seen] == ["https://acme.example/post"]


@pytest.mark.asyncio
async def test_fetch_page_both_fail_returns_none(routes):
    routes["https://r.jina.ai/https://acme.example/post"] = httpx.Response(503)
    routes["https://acme.example/post"] = httpx.Response(403)

    assert await fetch_page("https://acme.example/post") is None


@pytest.mark.asyncio
async def test_fetch_pages_maps_every_url(routes):
    routes["https://r.jina.ai/https://a.example"] = httpx.Response(200, text="page a")

    pages = await fetch_pages(["https://a.example", "https://b.example"], max_concurrent=1)

    assert pages == {"https://a.example": "page a", "https://b.example": None}
