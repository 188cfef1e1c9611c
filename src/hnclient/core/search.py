"""Local and remote story search.

Local search filters rows already in memory; remote search results come
from the Algolia collaborator and are projected onto DisplayRows here.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from hnclient.core.items import DisplayRow, SearchHit, SearchPage
from hnclient.core.text import strip_html


def normalize_query(query: str) -> str:
    return " ".join((query or "").split())


def local_search(texts: Sequence[str], query: str) -> list[int] | None:
    """Indices of texts containing query, case-insensitively, in list order.

    Returns None for a blank query so callers can tell "nothing to search"
    apart from "no matches".
    """
    needle = (query or "").strip().casefold()
    if not needle:
        return None
    return [idx for idx, text in enumerate(texts) if needle in text.casefold()]


def hit_to_display_row(hit: SearchHit) -> DisplayRow | None:
    """Project an Algolia hit; hits whose objectID is not numeric are dropped."""
    try:
        item_id = int(hit.object_id.strip())
    except ValueError:
        return None
    return DisplayRow(
        id=item_id,
        title=strip_html(hit.title or hit.story_title or "(no title)"),
        author=hit.author or "unknown",
        score=hit.points or 0,
        comment_count=hit.num_comments or 0,
        timestamp=hit.created_at_i or 0,
        kind="story",
        url=hit.url or hit.story_url or None,
    )


def rows_from_hits(hits: Iterable[SearchHit]) -> list[DisplayRow]:
    return [row for row in (hit_to_display_row(h) for h in hits) if row is not None]


def rows_from_page(page: SearchPage) -> list[DisplayRow]:
    return rows_from_hits(page.hits)
