"""Incremental materialization of feed ids into display rows.

// [LAW:dataflow-not-control-flow] Every id in a batch is fetched; failures become
//   excluded ids rather than aborting the gather.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from hnclient.core.items import DisplayRow, RemoteItem, to_display_row
from hnclient.errors import CacheWriteError

logger = logging.getLogger(__name__)

FetchItem = Callable[[int], Awaitable["RemoteItem | None"]]


@dataclass(frozen=True)
class StoryBatch:
    rows: tuple[DisplayRow, ...]
    # Number of ids consumed from the id list, including dropped ones.
    consumed: int
    failed: int = 0


async def materialize_batch(
    ids: Sequence[int],
    start: int,
    batch_size: int,
    fetch_item: FetchItem,
) -> StoryBatch:
    """Fetch ids[start:start + batch_size] concurrently and project them.

    Rows keep the order of the id list. Comments, deleted/dead and missing
    items are dropped. A failed fetch drops its id and is counted in
    `failed`; cache persistence failures are re-raised.
    """
    chunk = list(ids[start : start + max(1, batch_size)])
    if not chunk:
        return StoryBatch(rows=(), consumed=0)

    results = await asyncio.gather(
        *(fetch_item(item_id) for item_id in chunk),
        return_exceptions=True,
    )

    rows: list[DisplayRow] = []
    failed = 0
    for item_id, result in zip(chunk, results):
        if isinstance(result, CacheWriteError) or (
            isinstance(result, BaseException) and not isinstance(result, Exception)
        ):
            raise result
        if isinstance(result, Exception):
            failed += 1
            logger.warning("item %s fetch failed: %s", item_id, result)
            continue
        row = to_display_row(result)
        if row is not None:
            rows.append(row)

    return StoryBatch(rows=tuple(rows), consumed=len(chunk), failed=failed)
