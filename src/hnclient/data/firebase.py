"""Hacker News Firebase API client (story listings and items)."""

from __future__ import annotations

import logging

import httpx

from hnclient.core.items import FEEDS
from hnclient.errors import FetchError

logger = logging.getLogger(__name__)

BASE_URL = "https://hacker-news.firebaseio.com/v0"
DEFAULT_TIMEOUT = 10.0


class HackerNewsClient:
    """Thin async wrapper over the Firebase endpoints.

    Returns raw JSON payloads; parsing into item variants happens in
    hnclient.core.items so cached payloads and fresh ones share one path.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def get_feed_ids(self, feed: str) -> list[int]:
        if feed not in FEEDS:
            raise ValueError(f"unknown feed {feed!r}")
        url = f"{BASE_URL}/{feed}stories.json"
        response = await self._client.get(url)
        if response.status_code != 200:
            raise FetchError(
                f"Failed to fetch {feed} feed: {response.status_code}",
                status=response.status_code,
                url=url,
            )
        payload = response.json()
        if not isinstance(payload, list):
            return []
        return [v for v in payload if isinstance(v, int) and not isinstance(v, bool)]

    async def get_item(self, item_id: int) -> dict | None:
        url = f"{BASE_URL}/item/{item_id}.json"
        response = await self._client.get(url)
        if response.status_code != 200:
            raise FetchError(
                f"Failed to fetch item {item_id}: {response.status_code}",
                status=response.status_code,
                url=url,
            )
        payload = response.json()
        return payload if isinstance(payload, dict) else None
