"""Hacker News full-text search via the Algolia API."""

from __future__ import annotations

import httpx

from hnclient.core.items import SearchPage
from hnclient.errors import FetchError

SEARCH_URL = "https://hn.algolia.com/api/v1/search"


class AlgoliaSearchClient:
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def search(self, query: str, page: int = 0) -> SearchPage:
        """One page of story hits for query."""
        response = await self._client.get(
            SEARCH_URL,
            params={"query": query, "tags": "story", "page": str(page)},
        )
        if response.status_code != 200:
            raise FetchError(
                f"Search request failed: {response.status_code}",
                status=response.status_code,
                url=SEARCH_URL,
            )
        payload = response.json()
        return SearchPage.from_payload(payload if isinstance(payload, dict) else {})
