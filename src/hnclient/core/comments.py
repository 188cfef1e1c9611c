"""Comment thread assembly and flattening.

Assembly is two-phase: a breadth-first walk fetches every reachable item
exactly once into a lookup map, then the tree is built from that map.
Building after the walk keeps display order independent of fetch order.

// [LAW:single-enforcer] is_displayable_comment decides which items become nodes.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Awaitable, Callable, Iterable, Mapping

from hnclient.core.items import CommentNode, RemoteItem, is_displayable_comment

logger = logging.getLogger(__name__)

FetchItem = Callable[[int], Awaitable["RemoteItem | None"]]


async def collect_thread_items(
    root_kids: Iterable[int],
    fetch_item: FetchItem,
) -> dict[int, RemoteItem]:
    """Breadth-first walk of the item graph below a story.

    Items are fetched one at a time in queue order. An id is fetched at most
    once, so shared children and cycles in malformed data are harmless.
    """
    queue: deque[int] = deque(root_kids)
    visited: set[int] = set()
    lookup: dict[int, RemoteItem] = {}

    while queue:
        item_id = queue.popleft()
        if item_id in visited:
            continue
        visited.add(item_id)

        item = await fetch_item(item_id)
        if item is None:
            logger.debug("thread item %s missing", item_id)
            continue
        lookup[item.id] = item
        for kid in item.kids:
            if kid not in visited:
                queue.append(kid)

    return lookup


def build_comment_tree(
    root_kids: Iterable[int],
    lookup: Mapping[int, RemoteItem],
    depth: int = 0,
    parent_id: int | None = None,
    _path: frozenset[int] = frozenset(),
) -> list[CommentNode]:
    """Build CommentNodes for root_kids from an id → item map.

    Items that are missing, not comments, deleted or dead are skipped along
    with their whole subtree.
    """
    nodes: list[CommentNode] = []
    for item_id in root_kids:
        item = lookup.get(item_id)
        if not is_displayable_comment(item) or item_id in _path:
            continue
        node = CommentNode(
            id=item.id,
            author=item.by or "unknown",
            text=item.text or "",
            timestamp=item.time,
            depth=depth,
            parent_id=parent_id,
        )
        node.children = build_comment_tree(
            item.kids, lookup, depth + 1, item.id, _path | {item_id}
        )
        nodes.append(node)
    return nodes


def flatten_comment_tree(
    nodes: Iterable[CommentNode],
    collapsed: frozenset[int] | set[int],
) -> list[CommentNode]:
    """Pre-order listing of nodes, hiding descendants of collapsed ids."""
    out: list[CommentNode] = []
    _flatten_into(nodes, collapsed, out)
    return out


def _flatten_into(nodes, collapsed, out: list[CommentNode]) -> None:
    for node in nodes:
        out.append(node)
        if node.id not in collapsed:
            _flatten_into(node.children, collapsed, out)


async def assemble_thread(
    root_kids: Iterable[int],
    fetch_item: FetchItem,
) -> list[CommentNode]:
    """Fetch and build the comment tree below a story's direct children."""
    kids = list(root_kids)
    lookup = await collect_thread_items(kids, fetch_item)
    logger.debug("assembled thread: %d items fetched", len(lookup))
    return build_comment_tree(kids, lookup)


def count_descendants(node: CommentNode) -> int:
    return sum(1 + count_descendants(child) for child in node.children)
