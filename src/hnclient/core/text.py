"""Small text helpers for HN payloads (HTML snippets, timestamps, urls)."""

from __future__ import annotations

import html
import re
import time
from urllib.parse import urlparse

_TAG_RE = re.compile(r"<[^>]*>")
_PARAGRAPH_RE = re.compile(r"<p\s*/?>", re.IGNORECASE)
_WS_RE = re.compile(r"\s+")


def epoch_now() -> int:
    return int(time.time())


def strip_html(value: str) -> str:
    """Drop tags, decode entities and collapse whitespace onto one line."""
    text = _TAG_RE.sub(" ", value)
    return _WS_RE.sub(" ", html.unescape(text)).strip()


def comment_paragraphs(value: str) -> list[str]:
    """Split HN comment HTML into plain-text paragraphs.

    HN separates paragraphs with a bare <p> (no closing tag).
    """
    parts = _PARAGRAPH_RE.split(value or "")
    return [p for p in (strip_html(part) for part in parts) if p]


def relative_time(timestamp: int | None, now: int | None = None) -> str:
    if not timestamp:
        return "unknown"
    current = epoch_now() if now is None else now
    diff = max(1, current - timestamp)
    if diff < 60:
        return f"{diff}s ago"
    minutes = diff // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def trim_line(value: str, max_len: int = 130) -> str:
    if len(value) <= max_len:
        return value
    return value[: max_len - 3] + "..."


def domain_from_url(url: str | None) -> str:
    if not url:
        return "news.ycombinator.com"
    host = urlparse(url).hostname
    if not host:
        return url
    return host[4:] if host.startswith("www.") else host
