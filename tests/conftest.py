"""Pytest configuration and shared fakes for hnclient tests."""

import pytest

from hnclient.core.items import ArticleDocument, SearchHit, SearchPage, parse_item
from hnclient.errors import FetchError
from hnclient.io.config import AppConfig


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------

def story(item_id, title="Story", kids=(), **extra):
    payload = {
        "id": item_id,
        "type": "story",
        "by": "alice",
        "title": title,
        "score": 10,
        "descendants": len(kids),
        "time": 1_700_000_000,
        "kids": list(kids),
        "url": f"https://example.com/{item_id}",
    }
    payload.update(extra)
    return payload


def comment(item_id, parent, kids=(), text="hello", **extra):
    payload = {
        "id": item_id,
        "type": "comment",
        "by": "bob",
        "text": text,
        "parent": parent,
        "time": 1_700_000_100,
        "kids": list(kids),
    }
    payload.update(extra)
    return payload


# ---------------------------------------------------------------------------
# Gateway fake
# ---------------------------------------------------------------------------

class FakeGateway:
    """In-memory stand-in for HackerNewsGateway.

    Records every call so tests can assert on fetch counts and order.
    """

    def __init__(self, items=None, feeds=None, search_pages=None, articles=None):
        self.items = dict(items or {})
        self.feeds = dict(feeds or {})
        self.search_pages = dict(search_pages or {})
        self.articles = dict(articles or {})
        self.failing_ids = set()
        self.fail_feed = False
        self.fail_search = False
        self.item_calls = []
        self.feed_calls = []
        self.search_calls = []
        self.article_calls = []
        self.cache = None

    async def feed_ids(self, feed):
        self.feed_calls.append(feed)
        if self.fail_feed:
            raise FetchError(f"Failed to fetch {feed} feed: 503", status=503)
        return list(self.feeds.get(feed, []))

    async def item(self, item_id):
        self.item_calls.append(item_id)
        if item_id in self.failing_ids:
            raise FetchError(f"Failed to fetch item {item_id}: 500", status=500)
        return parse_item(self.items.get(item_id))

    async def search(self, query, page=0):
        self.search_calls.append((query, page))
        if self.fail_search:
            raise FetchError("Search request failed: 500", status=500)
        return self.search_pages.get((query, page), SearchPage(hits=(), page=page, total_pages=0))

    async def article(self, url):
        self.article_calls.append(url)
        return self.articles.get(
            url,
            ArticleDocument(title="Article", url=url, body="line one\nline two", status="ok"),
        )


def search_page(ids, page=0, total_pages=1):
    return SearchPage(
        hits=tuple(
            SearchHit(object_id=str(i), title=f"Result {i}", author="carol", points=1)
            for i in ids
        ),
        page=page,
        total_pages=total_pages,
    )


@pytest.fixture
def config():
    return AppConfig(default_feed="top", chunk_size=5)


@pytest.fixture
def thread_items():
    """Story 100 with thread 1 -> [2, 3], 2 -> [4]."""
    return {
        100: story(100, "Root story", kids=[1]),
        1: comment(1, 100, kids=[2, 3], text="root"),
        2: comment(2, 1, kids=[4], text="child"),
        3: comment(3, 1, text="sibling"),
        4: comment(4, 2, text="leaf"),
    }


@pytest.fixture
def feed_gateway():
    """Gateway with a 12-story top feed and a 3-story new feed."""
    items = {i: story(i, f"Story number {i}") for i in range(1, 13)}
    items.update({i: story(i, f"New story {i}") for i in range(50, 53)})
    return FakeGateway(items=items, feeds={"top": list(range(1, 13)), "new": [50, 51, 52]})


@pytest.fixture
def fake_gateway_cls():
    return FakeGateway


@pytest.fixture
def payloads():
    """Access to the payload builders from tests."""

    class _Payloads:
        pass

    _Payloads.story = staticmethod(story)
    _Payloads.comment = staticmethod(comment)
    _Payloads.search_page = staticmethod(search_page)
    return _Payloads
