"""Cache-through access to every remote collaborator.

All network reads go through HackerNewsGateway so the TTL cache sees every
request. With cache=None (--no-cache) loaders always run and the cache file
is never touched.

// [LAW:single-enforcer] Cache keys and TTL selection live here only.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from hnclient.core.items import ArticleDocument, RemoteItem, SearchPage, parse_item
from hnclient.io.config import CacheTtls
from hnclient.io.ttl_cache import TtlCache

logger = logging.getLogger(__name__)


def feed_key(feed: str) -> str:
    return f"feed:{feed}"


def item_key(item_id: int) -> str:
    return f"item:{item_id}"


def search_key(query: str, page: int) -> str:
    return f"search:{query}:{page}"


def article_key(url: str) -> str:
    return f"article:{url}"


class HackerNewsGateway:
    """Feed, item, search and article reads with TTL caching.

    Values are cached as plain JSON (raw item payloads, Algolia page
    payloads, article dicts) and converted to model objects on the way out.
    CacheWriteError from the store propagates to the caller.
    """

    def __init__(
        self,
        hn,
        search,
        article,
        ttls: CacheTtls,
        cache: TtlCache | None = None,
    ) -> None:
        self._hn = hn
        self._search = search
        self._article = article
        self._ttls = ttls
        self._cache = cache

    @property
    def cache(self) -> TtlCache | None:
        return self._cache

    async def _cached(self, key: str, ttl: int, loader: Callable[[], Awaitable[Any]]) -> Any:
        if self._cache is None:
            return await loader()
        hit = self._cache.get(key)
        if hit is not None:
            return hit
        logger.debug("cache miss %s", key)
        loaded = await loader()
        # Absent items (null payloads) are not worth caching; they are refetched.
        if loaded is not None:
            self._cache.set(key, loaded, ttl)
        return loaded

    async def feed_ids(self, feed: str) -> list[int]:
        ids = await self._cached(feed_key(feed), self._ttls.feed, lambda: self._hn.get_feed_ids(feed))
        return list(ids or [])

    async def item_payload(self, item_id: int) -> dict | None:
        return await self._cached(item_key(item_id), self._ttls.item, lambda: self._hn.get_item(item_id))

    async def item(self, item_id: int) -> RemoteItem | None:
        return parse_item(await self.item_payload(item_id))

    async def search(self, query: str, page: int = 0) -> SearchPage:
        async def _load() -> dict:
            result = await self._search.search(query, page)
            return result.to_payload()

        payload = await self._cached(search_key(query, page), self._ttls.search, _load)
        return SearchPage.from_payload(payload)

    async def article(self, url: str) -> ArticleDocument:
        key = article_key(url)
        if self._cache is not None:
            hit = self._cache.get(key)
            if hit is not None:
                return ArticleDocument.from_payload(hit)
        document = await self._article.render(url)
        # Fallback documents are shown but not cached.
        if self._cache is not None and document.status == "ok":
            self._cache.set(key, document.to_payload(), self._ttls.article)
        return document
