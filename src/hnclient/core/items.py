"""Remote item model and display projections.

Items arrive from the Firebase API as loosely-typed JSON objects whose fields
depend on the item kind. parse_item() turns them into one frozen dataclass
per kind so a Comment can never carry a title and a Story never a parent.

// [LAW:one-source-of-truth] is_displayable_comment is the only comment filter.
// [LAW:single-enforcer] Raw payload → variant conversion happens in parse_item only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from hnclient.core.text import strip_html

FEEDS: tuple[str, ...] = ("top", "new", "best", "ask", "show", "job")
LISTABLE_KINDS = frozenset({"story", "job", "poll"})
HN_ITEM_URL = "https://news.ycombinator.com/item?id={id}"


# ─── Remote items ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class _ItemBase:
    id: int
    by: str | None = None
    time: int = 0
    kids: tuple[int, ...] = ()
    deleted: bool = False
    dead: bool = False


@dataclass(frozen=True)
class Story(_ItemBase):
    title: str | None = None
    url: str | None = None
    text: str | None = None
    score: int = 0
    descendants: int = 0

    kind = "story"


@dataclass(frozen=True)
class Comment(_ItemBase):
    text: str | None = None
    parent: int | None = None

    kind = "comment"


@dataclass(frozen=True)
class Job(_ItemBase):
    title: str | None = None
    url: str | None = None
    text: str | None = None
    score: int = 0

    kind = "job"


@dataclass(frozen=True)
class Poll(_ItemBase):
    title: str | None = None
    text: str | None = None
    score: int = 0
    descendants: int = 0
    parts: tuple[int, ...] = ()

    kind = "poll"


@dataclass(frozen=True)
class PollOption(_ItemBase):
    text: str | None = None
    poll: int | None = None
    score: int = 0

    kind = "pollopt"


RemoteItem = Union[Story, Comment, Job, Poll, PollOption]

_VARIANTS: dict[str, type] = {
    "story": Story,
    "comment": Comment,
    "job": Job,
    "poll": Poll,
    "pollopt": PollOption,
}

# Fields each variant reads from the payload, beyond the shared base fields.
_VARIANT_FIELDS: dict[str, tuple[str, ...]] = {
    "story": ("title", "url", "text", "score", "descendants"),
    "comment": ("text", "parent"),
    "job": ("title", "url", "text", "score"),
    "poll": ("title", "text", "score", "descendants", "parts"),
    "pollopt": ("text", "poll", "score"),
}

_INT_FIELDS = frozenset({"score", "descendants", "parent", "poll"})
_ID_LIST_FIELDS = frozenset({"parts"})


def _int_or_none(value) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None


def _id_tuple(value) -> tuple[int, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(v for v in value if isinstance(v, int) and not isinstance(v, bool))


def parse_item(payload) -> RemoteItem | None:
    """Convert a raw Firebase item payload into its kind-specific variant.

    Returns None for null payloads, payloads without an integer id, and
    unknown kinds.
    """
    if not isinstance(payload, dict):
        return None
    item_id = _int_or_none(payload.get("id"))
    if item_id is None:
        return None
    kind = payload.get("type")
    cls = _VARIANTS.get(kind)
    if cls is None:
        return None

    by = payload.get("by")
    kwargs: dict = {
        "id": item_id,
        "by": by if isinstance(by, str) else None,
        "time": _int_or_none(payload.get("time")) or 0,
        "kids": _id_tuple(payload.get("kids")),
        "deleted": bool(payload.get("deleted", False)),
        "dead": bool(payload.get("dead", False)),
    }
    for name in _VARIANT_FIELDS[kind]:
        raw = payload.get(name)
        if name in _ID_LIST_FIELDS:
            kwargs[name] = _id_tuple(raw)
        elif name in _INT_FIELDS:
            value = _int_or_none(raw)
            if value is not None:
                kwargs[name] = value
        elif isinstance(raw, str):
            kwargs[name] = raw
    return cls(**kwargs)


def is_displayable_comment(item: RemoteItem | None) -> bool:
    """True when item is a live comment that belongs in a thread view."""
    return isinstance(item, Comment) and not item.deleted and not item.dead


# ─── Display projections ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class DisplayRow:
    """A story-like row shown in the feed and search panes."""

    id: int
    title: str
    author: str
    score: int
    comment_count: int
    timestamp: int
    kind: str
    url: str | None = None

    @property
    def discussion_url(self) -> str:
        return HN_ITEM_URL.format(id=self.id)

    @property
    def target_url(self) -> str:
        return self.url or self.discussion_url


def to_display_row(item: RemoteItem | None) -> DisplayRow | None:
    """Project a listable item onto a DisplayRow.

    Comments, poll options, deleted and dead items yield None.
    """
    if item is None or item.kind not in LISTABLE_KINDS:
        return None
    if item.deleted or item.dead:
        return None
    return DisplayRow(
        id=item.id,
        title=strip_html(item.title or "(no title)"),
        author=item.by or "unknown",
        score=item.score,
        comment_count=getattr(item, "descendants", 0),
        timestamp=item.time,
        kind=item.kind,
        url=getattr(item, "url", None) or None,
    )


@dataclass
class CommentNode:
    id: int
    author: str
    text: str
    timestamp: int
    depth: int
    parent_id: int | None = None
    children: list[CommentNode] = field(default_factory=list)


# ─── Search payloads ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SearchHit:
    object_id: str
    title: str | None = None
    story_title: str | None = None
    story_text: str | None = None
    author: str | None = None
    points: int | None = None
    num_comments: int | None = None
    url: str | None = None
    story_url: str | None = None
    created_at_i: int | None = None

    @classmethod
    def from_payload(cls, payload: dict) -> SearchHit:
        def _str(name):
            value = payload.get(name)
            return value if isinstance(value, str) else None

        return cls(
            object_id=str(payload.get("objectID", "")),
            title=_str("title"),
            story_title=_str("story_title"),
            story_text=_str("story_text"),
            author=_str("author"),
            points=_int_or_none(payload.get("points")),
            num_comments=_int_or_none(payload.get("num_comments")),
            url=_str("url"),
            story_url=_str("story_url"),
            created_at_i=_int_or_none(payload.get("created_at_i")),
        )


@dataclass(frozen=True)
class SearchPage:
    hits: tuple[SearchHit, ...]
    page: int
    total_pages: int

    @classmethod
    def from_payload(cls, payload: dict) -> SearchPage:
        raw_hits = payload.get("hits")
        hits = tuple(
            SearchHit.from_payload(h) for h in (raw_hits if isinstance(raw_hits, list) else [])
            if isinstance(h, dict)
        )
        return cls(
            hits=hits,
            page=_int_or_none(payload.get("page")) or 0,
            total_pages=_int_or_none(payload.get("nbPages")) or 0,
        )

    def to_payload(self) -> dict:
        """Serialize back to the Algolia field names (cache format)."""
        return {
            "hits": [
                {
                    "objectID": h.object_id,
                    "title": h.title,
                    "story_title": h.story_title,
                    "story_text": h.story_text,
                    "author": h.author,
                    "points": h.points,
                    "num_comments": h.num_comments,
                    "url": h.url,
                    "story_url": h.story_url,
                    "created_at_i": h.created_at_i,
                }
                for h in self.hits
            ],
            "page": self.page,
            "nbPages": self.total_pages,
        }


@dataclass(frozen=True)
class ArticleDocument:
    title: str
    url: str
    body: str
    status: str = "ok"  # "ok" | "fallback"

    @classmethod
    def from_payload(cls, payload: dict) -> ArticleDocument:
        return cls(
            title=str(payload.get("title", "")),
            url=str(payload.get("url", "")),
            body=str(payload.get("body", "")),
            status=str(payload.get("status", "ok")),
        )

    def to_payload(self) -> dict:
        return {"title": self.title, "url": self.url, "body": self.body, "status": self.status}
