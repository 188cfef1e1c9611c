"""Reader view: fetch a web page and reduce it to wrapped plain text.

Failures never raise; they produce a "fallback" document explaining what
went wrong so the reader pane always has something to show.
"""

from __future__ import annotations

import asyncio
import logging
import textwrap

import httpx
from bs4 import BeautifulSoup

import hnclient
from hnclient.core.items import ArticleDocument

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 8.0
WRAP_WIDTH = 100
USER_AGENT = f"hnclient/{hnclient.__version__} (+terminal)"

_BLOCK_TAGS = ["p", "h1", "h2", "h3", "h4", "h5", "h6", "li", "pre", "blockquote"]
_DROP_TAGS = ["script", "style", "noscript", "img", "svg", "iframe", "nav", "footer", "form"]


def html_to_text(markup: str, width: int = WRAP_WIDTH) -> tuple[str, str]:
    """Return (title, body) for an HTML page.

    Links keep their target as "text [href]"; images and page chrome are
    skipped.
    """
    soup = BeautifulSoup(markup, "html.parser")
    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""

    for tag in soup(_DROP_TAGS):
        tag.decompose()
    for link in soup.find_all("a"):
        href = link.get("href")
        label = link.get_text(" ", strip=True)
        if href and href.startswith(("http://", "https://")) and href != label:
            link.replace_with(f"{label} [{href}]" if label else href)

    root = soup.find("article") or soup.find("main") or soup.body or soup
    blocks = root.find_all(_BLOCK_TAGS)
    if blocks:
        paragraphs = [b.get_text(" ", strip=True) for b in blocks if not b.find(_BLOCK_TAGS)]
    else:
        paragraphs = [line.strip() for line in root.get_text("\n").splitlines()]

    wrapped = [textwrap.fill(p, width=width) for p in paragraphs if p]
    return title or "Untitled", "\n\n".join(wrapped)


class ArticleRenderer:
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def render(self, url: str) -> ArticleDocument:
        try:
            response = await self._client.get(
                url,
                headers={"user-agent": USER_AGENT},
                timeout=REQUEST_TIMEOUT,
                follow_redirects=True,
            )
        except httpx.HTTPError as exc:
            logger.warning("article fetch failed for %s: %s", url, exc)
            return ArticleDocument(
                title="Article unavailable",
                url=url,
                body=f"Could not load article in-terminal: {exc or type(exc).__name__}",
                status="fallback",
            )
        if response.status_code >= 400:
            return ArticleDocument(
                title="Article unavailable",
                url=url,
                body=f"Could not load article. HTTP {response.status_code}.",
                status="fallback",
            )

        # Parsing large pages is CPU-bound; keep it off the event loop.
        title, body = await asyncio.to_thread(html_to_text, response.text)
        return ArticleDocument(title=title, url=url, body=body, status="ok")
