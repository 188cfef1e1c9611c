"""Navigation state machine: panes, cursors, input modes and loads.

The Navigator is the only writer of NavigationState. Keys arrive through
handle_key(); every remote operation goes through the injected gateway and
is wrapped by _guarded() so failures end up in the status line instead of
the event loop.

// [LAW:single-enforcer] handle_key is the sole key dispatcher.
// [LAW:one-source-of-truth] NavigationState holds all view state; widgets only read it.
// [LAW:locality-or-seam] No Textual imports here; the app is a thin adapter.

Superseded results: each load records a generation number when it starts
and drops its result if a newer conflicting request bumped the counter in
the meantime.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable

from hnclient.core.comments import assemble_thread, flatten_comment_tree
from hnclient.core.items import FEEDS, ArticleDocument, CommentNode, DisplayRow
from hnclient.core.search import local_search, normalize_query, rows_from_page
from hnclient.core.stories import materialize_batch
from hnclient.core.text import comment_paragraphs
from hnclient.errors import CacheWriteError
from hnclient.io.browser import open_external
from hnclient.io.config import AppConfig
from hnclient.tui.gestures import DoublePressGesture
from hnclient.tui.input_modes import ENTRY_KEYS, NORMAL_KEYMAP, InputMode

logger = logging.getLogger(__name__)

# Auto-load the next feed batch when the cursor is this close to the end.
PREFETCH_MARGIN = 2


class Pane(Enum):
    FEED = "feed"
    SEARCH = "search"
    COMMENTS = "comments"
    ARTICLE = "article"


LIST_PANES = (Pane.FEED, Pane.SEARCH)


@dataclass
class NavigationState:
    pane: Pane = Pane.FEED
    feed: str = FEEDS[0]
    feed_ids: list[int] = field(default_factory=list)
    feed_rows: list[DisplayRow] = field(default_factory=list)
    # Ids consumed from feed_ids so far (dropped items included).
    feed_consumed: int = 0

    search_query: str = ""
    search_rows: list[DisplayRow] = field(default_factory=list)
    search_page: int = 0
    search_total_pages: int = 0

    active_story: DisplayRow | None = None
    comment_tree: list[CommentNode] = field(default_factory=list)
    collapsed: set[int] = field(default_factory=set)
    flat_comments: list[CommentNode] = field(default_factory=list)

    article: ArticleDocument | None = None
    article_lines: list[str] = field(default_factory=list)

    cursors: dict[Pane, int] = field(default_factory=lambda: {p: 0 for p in Pane})
    return_stack: list[Pane] = field(default_factory=list)

    input_mode: InputMode = InputMode.NONE
    input_buffer: str = ""
    local_matches: list[int] = field(default_factory=list)
    local_match_index: int = 0
    local_match_pane: Pane = Pane.FEED

    status: str = ""
    loading: bool = False
    read_ids: set[int] = field(default_factory=set)
    quit_requested: bool = False

    @property
    def cursor(self) -> int:
        return self.cursors[self.pane]

    @property
    def has_more_feed(self) -> bool:
        return self.feed_consumed < len(self.feed_ids)

    @property
    def has_more_search(self) -> bool:
        return self.search_page + 1 < self.search_total_pages

    def rows_for(self, pane: Pane) -> list[DisplayRow]:
        if pane is Pane.SEARCH:
            return self.search_rows
        if pane is Pane.FEED:
            return self.feed_rows
        return []

    def length_of(self, pane: Pane) -> int:
        if pane is Pane.COMMENTS:
            return len(self.flat_comments)
        if pane is Pane.ARTICLE:
            return len(self.article_lines)
        return len(self.rows_for(pane))

    def selected_row(self) -> DisplayRow | None:
        if self.pane in LIST_PANES:
            rows = self.rows_for(self.pane)
            idx = self.cursors[self.pane]
            return rows[idx] if 0 <= idx < len(rows) else None
        return self.active_story

    def selected_comment(self) -> CommentNode | None:
        idx = self.cursors[Pane.COMMENTS]
        if 0 <= idx < len(self.flat_comments):
            return self.flat_comments[idx]
        return None


def clamp(value: int, length: int) -> int:
    """Clamp a cursor into [0, length - 1]; 0 for empty lists."""
    return max(0, min(value, length - 1))


def visible_window(cursor: int, length: int, height: int) -> tuple[int, int]:
    """[start, end) slice of a list to show, keeping cursor near the middle."""
    height = max(1, height)
    start = max(0, cursor - height // 2)
    end = min(length, start + height)
    start = max(0, min(start, end - height))
    return start, end


class Navigator:
    """Owns NavigationState and reacts to keys.

    gateway: HackerNewsGateway-like object (feed_ids, item, search, article).
    open_url: callable(url) -> bool used for the browser hand-off.
    on_change: called after every state change the UI should redraw.
    on_quit: called when the user leaves the feed pane with back/quit.
    """

    def __init__(
        self,
        gateway,
        config: AppConfig,
        *,
        open_url: Callable[[str], bool] = open_external,
        gesture: DoublePressGesture | None = None,
        on_change: Callable[[], None] | None = None,
        on_quit: Callable[[], None] | None = None,
    ) -> None:
        self._gateway = gateway
        self._config = config
        self._open_url = open_url
        self._gesture = gesture or DoublePressGesture()
        self.on_change = on_change
        self.on_quit = on_quit
        self.state = NavigationState(feed=config.default_feed)
        self._pending = 0
        self._feed_gen = 0
        self._search_gen = 0
        self._view_gen = 0

    # ─── Plumbing ───────────────────────────────────────────────────────

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _set_status(self, message: str) -> None:
        self.state.status = message
        self._changed()

    async def _guarded(self, label: str, operation: Callable[[], Awaitable[None]]) -> bool:
        """Run operation; convert any failure into a status message.

        Returns True when the operation completed without raising.

        [LAW:single-enforcer] The only place async failures are caught.
        """
        self._pending += 1
        self.state.loading = True
        self._changed()
        try:
            await operation()
            return True
        except CacheWriteError as exc:
            logger.warning("%s: %s", label, exc)
            cache = getattr(self._gateway, "cache", None)
            if cache is not None:
                cache.use_memory_only()
            self.state.status = f"{label} failed: {exc}. Continuing without disk cache."
        except Exception as exc:
            logger.warning("%s failed", label, exc_info=True)
            self.state.status = f"{label} failed: {exc}"
        finally:
            self._pending -= 1
            self.state.loading = self._pending > 0
            self._changed()
        return False

    def _push_and_show(self, origin: Pane, target: Pane) -> None:
        if origin is not target:
            self.state.return_stack.append(origin)
        self.state.pane = target

    # ─── Startup ────────────────────────────────────────────────────────

    async def start(self, feed: str | None = None, initial_search: str | None = None) -> None:
        await self.refresh_feed(feed or self.state.feed)
        if initial_search:
            await self.run_remote_search(initial_search)

    # ─── Key dispatch ───────────────────────────────────────────────────

    async def handle_key(self, key: str) -> None:
        state = self.state
        if key == "ctrl+c":
            self.quit()
            return

        if state.input_mode is not InputMode.NONE:
            await self._handle_entry_key(key)
            self._changed()
            return

        action = NORMAL_KEYMAP.get(key)
        if action != "go_top":
            self._gesture.reset()
        if action is None:
            return
        name, _, arg = action.partition(":")
        handler = getattr(self, f"action_{name}")
        result = handler(arg) if arg else handler()
        if result is not None:
            await result
        self._changed()

    async def _handle_entry_key(self, key: str) -> None:
        state = self.state
        action = ENTRY_KEYS.get(key)
        if action == "commit_entry":
            mode, query = state.input_mode, state.input_buffer
            state.input_mode = InputMode.NONE
            state.input_buffer = ""
            if mode is InputMode.LOCAL_SEARCH:
                self.run_local_search(query)
            else:
                await self.run_remote_search(query)
        elif action == "cancel_entry":
            state.input_mode = InputMode.NONE
            state.input_buffer = ""
            state.status = "Search canceled."
        elif action == "erase_char":
            state.input_buffer = state.input_buffer[:-1]
        elif action == "type_space":
            state.input_buffer += " "
        elif len(key) == 1 and key.isprintable():
            state.input_buffer += key

    # ─── Cursor actions ─────────────────────────────────────────────────

    def move_cursor(self, delta: int) -> None:
        state = self.state
        pane = state.pane
        state.cursors[pane] = clamp(state.cursors[pane] + delta, state.length_of(pane))

    def set_cursor(self, pane: Pane, index: int) -> None:
        self.state.cursors[pane] = clamp(index, self.state.length_of(pane))

    async def action_cursor_down(self) -> None:
        self.move_cursor(1)
        await self._maybe_prefetch()

    def action_cursor_up(self) -> None:
        self.move_cursor(-1)

    def action_go_top(self) -> None:
        if self._gesture.press("g"):
            self.set_cursor(self.state.pane, 0)

    def action_go_top_now(self) -> None:
        self.set_cursor(self.state.pane, 0)

    async def action_go_bottom(self) -> None:
        self.set_cursor(self.state.pane, self.state.length_of(self.state.pane) - 1)
        await self._maybe_prefetch()

    async def _maybe_prefetch(self) -> None:
        state = self.state
        if state.pane is not Pane.FEED or state.loading or not state.has_more_feed:
            return
        if state.cursors[Pane.FEED] >= len(state.feed_rows) - PREFETCH_MARGIN:
            await self.load_more()

    # ─── Feed ───────────────────────────────────────────────────────────

    async def refresh_feed(self, feed: str, reset_cursor: bool = True) -> None:
        self._feed_gen += 1
        self._view_gen += 1
        gen, view_gen = self._feed_gen, self._view_gen
        self.state.status = f"Loading {feed}..."

        async def _load() -> None:
            ids = await self._gateway.feed_ids(feed)
            batch = await materialize_batch(ids, 0, self._config.chunk_size, self._gateway.item)
            if gen != self._feed_gen:
                logger.debug("discarding superseded %s feed load", feed)
                return
            state = self.state
            state.feed = feed
            state.feed_ids = list(ids)
            state.feed_rows = list(batch.rows)
            state.feed_consumed = batch.consumed
            self._drop_matches(Pane.FEED)
            if view_gen == self._view_gen:
                state.pane = Pane.FEED
                state.return_stack.clear()
            if reset_cursor:
                state.cursors[Pane.FEED] = 0
            else:
                self.set_cursor(Pane.FEED, state.cursors[Pane.FEED])
            state.status = self._feed_status(batch.failed)

        if await self._guarded("Feed load", _load):
            await self._maybe_prefetch()

    async def load_more(self) -> None:
        state = self.state
        if state.loading or not state.has_more_feed:
            return
        gen = self._feed_gen

        async def _load() -> None:
            batch = await materialize_batch(
                state.feed_ids, state.feed_consumed, self._config.chunk_size, self._gateway.item
            )
            if gen != self._feed_gen:
                logger.debug("discarding superseded feed batch")
                return
            state.feed_rows.extend(batch.rows)
            state.feed_consumed += batch.consumed
            state.status = self._feed_status(batch.failed)

        # A batch of dropped items (or a key press swallowed while loading)
        # can leave the cursor inside the margin; check again once idle.
        if await self._guarded("Loading more stories", _load):
            await self._maybe_prefetch()

    def _feed_status(self, failed: int) -> str:
        state = self.state
        message = f"{state.feed.upper()} {len(state.feed_rows)} stories, {state.feed_consumed}/{len(state.feed_ids)} loaded"
        if failed:
            message += f" ({failed} failed)"
        return message

    async def action_switch_feed(self, feed: str) -> None:
        await self.refresh_feed(feed, reset_cursor=True)

    async def action_refresh(self) -> None:
        await self.refresh_feed(self.state.feed, reset_cursor=False)

    async def action_load_more(self) -> None:
        if self.state.pane is Pane.SEARCH:
            await self.load_more_search()
        elif self.state.pane is Pane.FEED:
            if not self.state.has_more_feed:
                self.state.status = "No more stories."
                return
            await self.load_more()

    # ─── Search ─────────────────────────────────────────────────────────

    def action_start_local_search(self) -> None:
        self.state.input_mode = InputMode.LOCAL_SEARCH
        self.state.input_buffer = ""

    def action_start_global_search(self) -> None:
        self.state.input_mode = InputMode.GLOBAL_SEARCH
        self.state.input_buffer = self.state.search_query

    def _searchable_texts(self, pane: Pane) -> list[str]:
        if pane is Pane.COMMENTS:
            return [f"{c.author} {' '.join(comment_paragraphs(c.text))}" for c in self.state.flat_comments]
        if pane is Pane.ARTICLE:
            return list(self.state.article_lines)
        return [row.title for row in self.state.rows_for(pane)]

    def run_local_search(self, query: str) -> None:
        state = self.state
        pane = state.pane
        matches = local_search(self._searchable_texts(pane), query)
        if matches is None:
            state.status = "Search query is empty."
            return
        state.local_matches = matches
        state.local_match_index = 0
        state.local_match_pane = pane
        if matches:
            self.set_cursor(pane, matches[0])
            state.status = f"Local matches: {len(matches)}"
        else:
            state.status = "No local matches."

    def _drop_matches(self, pane: Pane) -> None:
        """Forget local matches that index into pane's list, which was rebuilt."""
        state = self.state
        if state.local_match_pane is pane:
            state.local_matches = []
            state.local_match_index = 0

    def _step_match(self, step: int) -> None:
        state = self.state
        if not state.local_matches:
            return
        state.local_match_index = (state.local_match_index + step) % len(state.local_matches)
        state.pane = state.local_match_pane
        self.set_cursor(state.pane, state.local_matches[state.local_match_index])
        state.status = f"Match {state.local_match_index + 1}/{len(state.local_matches)}"

    def action_next_match(self) -> None:
        self._step_match(1)

    def action_prev_match(self) -> None:
        self._step_match(-1)

    async def run_remote_search(self, query: str) -> None:
        cleaned = normalize_query(query)
        if not cleaned:
            self._set_status("Search query is empty.")
            return
        self._search_gen += 1
        self._view_gen += 1
        gen, view_gen = self._search_gen, self._view_gen
        self.state.status = f'Searching for "{cleaned}"...'

        async def _load() -> None:
            page = await self._gateway.search(cleaned, 0)
            if gen != self._search_gen:
                return
            state = self.state
            rows = rows_from_page(page)
            state.search_query = cleaned
            state.search_rows = rows
            state.search_page = page.page
            state.search_total_pages = page.total_pages
            state.cursors[Pane.SEARCH] = 0
            self._drop_matches(Pane.SEARCH)
            if view_gen == self._view_gen:
                # Back from fresh results always lands on the feed.
                state.return_stack.clear()
                state.pane = Pane.SEARCH
            state.status = f'Found {len(rows)} results for "{cleaned}".'

        await self._guarded("Search", _load)

    async def load_more_search(self) -> None:
        state = self.state
        if state.loading:
            return
        if not state.search_query or not state.has_more_search:
            state.status = "No more results."
            return
        gen = self._search_gen
        query, next_page = state.search_query, state.search_page + 1

        async def _load() -> None:
            page = await self._gateway.search(query, next_page)
            if gen != self._search_gen:
                return
            rows = rows_from_page(page)
            state.search_rows.extend(rows)
            state.search_page = page.page
            state.search_total_pages = page.total_pages
            state.status = f'{len(state.search_rows)} results for "{query}" (page {page.page + 1}/{page.total_pages}).'

        await self._guarded("Search", _load)

    # ─── Comments ───────────────────────────────────────────────────────

    async def action_open_comments(self) -> None:
        row = self.state.selected_row()
        if row is None or self.state.pane not in LIST_PANES:
            return
        await self.open_comments(row)

    async def open_comments(self, row: DisplayRow) -> None:
        self._view_gen += 1
        view_gen = self._view_gen
        origin = self.state.pane
        self.state.status = f"Loading comments for {row.id}..."

        async def _load() -> None:
            root = await self._gateway.item(row.id)
            kids = root.kids if root is not None else ()
            tree = await assemble_thread(kids, self._gateway.item)
            if view_gen != self._view_gen:
                logger.debug("discarding superseded comments for %s", row.id)
                return
            state = self.state
            state.active_story = row
            state.comment_tree = tree
            state.collapsed = set()
            state.flat_comments = flatten_comment_tree(tree, state.collapsed)
            state.cursors[Pane.COMMENTS] = 0
            self._drop_matches(Pane.COMMENTS)
            state.read_ids.add(row.id)
            self._push_and_show(origin, Pane.COMMENTS)
            state.status = f"Comments loaded: {len(state.flat_comments)}"

        await self._guarded("Comment load", _load)

    def set_collapsed(self, collapse: bool) -> None:
        state = self.state
        node = state.selected_comment()
        if node is None:
            return
        if collapse:
            if not node.children:
                return
            state.collapsed.add(node.id)
        else:
            state.collapsed.discard(node.id)
        state.flat_comments = flatten_comment_tree(state.comment_tree, state.collapsed)
        self._drop_matches(Pane.COMMENTS)
        # Pre-order: nodes before the toggled one are unaffected, so its index holds.
        self.set_cursor(Pane.COMMENTS, state.cursors[Pane.COMMENTS])

    def action_collapse(self) -> None:
        if self.state.pane is Pane.COMMENTS:
            self.set_collapsed(True)

    def action_expand(self) -> None:
        if self.state.pane is Pane.COMMENTS:
            self.set_collapsed(False)

    # ─── Article ────────────────────────────────────────────────────────

    async def action_open_article(self) -> None:
        row = self.state.selected_row()
        if row is None or self.state.pane is Pane.ARTICLE:
            return
        if not row.url:
            self.state.status = "No article link for this item."
            return
        await self.open_article(row)

    async def open_article(self, row: DisplayRow) -> None:
        self._view_gen += 1
        view_gen = self._view_gen
        origin = self.state.pane
        self.state.status = f"Loading article {row.url}..."

        async def _load() -> None:
            document = await self._gateway.article(row.url)
            if view_gen != self._view_gen:
                return
            state = self.state
            state.active_story = row
            state.article = document
            state.article_lines = document.body.splitlines()
            state.cursors[Pane.ARTICLE] = 0
            self._drop_matches(Pane.ARTICLE)
            state.read_ids.add(row.id)
            self._push_and_show(origin, Pane.ARTICLE)
            state.status = document.title if document.status == "ok" else "Article unavailable; showing fallback."

        await self._guarded("Article load", _load)

    # ─── Back / quit ────────────────────────────────────────────────────

    def action_back(self) -> None:
        state = self.state
        # A load started from the pane being left must not pull the view back.
        self._view_gen += 1
        if state.return_stack:
            state.pane = state.return_stack.pop()
            state.status = f"Back to {state.pane.value}."
        elif state.pane is not Pane.FEED:
            state.pane = Pane.FEED
            state.status = "Back to feed."
        else:
            self.quit()

    def action_quit(self) -> None:
        self.quit()

    def quit(self) -> None:
        self.state.quit_requested = True
        if self.on_quit is not None:
            self.on_quit()

    # ─── Browser ────────────────────────────────────────────────────────

    def open_selected(self, on_hn: bool) -> None:
        row = self.state.selected_row()
        if row is None:
            return
        target = row.discussion_url if on_hn else row.target_url
        if self._open_url(target):
            self.state.read_ids.add(row.id)
            self.state.status = f"Opened: {target}"
        else:
            self.state.status = "Could not launch browser."

    def action_open_link(self) -> None:
        self.open_selected(on_hn=False)

    def action_open_discussion(self) -> None:
        self.open_selected(on_hn=True)
