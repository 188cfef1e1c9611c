"""Textual widgets that draw NavigationState.

Widgets hold no state of their own; update_view() is the sole render entry.
"""

from __future__ import annotations

from textual.widgets import Static

import hnclient.tui.rendering as rendering
from hnclient.tui.navigation import NavigationState, Pane, visible_window


class HeaderBar(Static):
    DEFAULT_CSS = """
    HeaderBar {
        dock: top;
        height: 1;
        padding: 0 1;
    }
    """

    def update_view(self, state: NavigationState) -> None:
        self.update(
            rendering.render_header(
                state.feed,
                state.pane.value,
                state.feed_consumed,
                len(state.feed_ids),
                state.loading,
            )
        )


class PaneView(Static):
    """The active pane: story list, comment list or article text."""

    DEFAULT_CSS = """
    PaneView {
        height: 1fr;
        padding: 0 1;
    }
    """

    def update_view(self, state: NavigationState) -> None:
        height = max(1, self.size.height)
        width = max(20, self.size.width - 2)
        pane = state.pane
        cursor = state.cursors[pane]
        matches = set(state.local_matches) if state.local_match_pane is pane else set()

        if pane in (Pane.FEED, Pane.SEARCH):
            rows = state.rows_for(pane)
            start, end = visible_window(cursor, len(rows), height // rendering.STORY_BLOCK_HEIGHT)
            self.update(
                rendering.render_story_rows(
                    rows[start:end],
                    start,
                    cursor,
                    read_ids=state.read_ids,
                    matches=matches,
                    width=width,
                )
            )
        elif pane is Pane.COMMENTS:
            nodes = state.flat_comments
            start, end = visible_window(cursor, len(nodes), height // rendering.COMMENT_BLOCK_HEIGHT)
            self.update(
                rendering.render_comment_rows(
                    nodes[start:end],
                    start,
                    cursor,
                    collapsed=state.collapsed,
                    matches=matches,
                    width=width,
                )
            )
        else:
            document = state.article
            lines = state.article_lines[cursor : cursor + height]
            self.update(
                rendering.render_article(
                    document.title if document else "",
                    document.url if document else "",
                    lines,
                    cursor,
                )
            )


class CommentDetail(Static):
    """Full text of the selected comment; only shown in the comments pane."""

    DEFAULT_CSS = """
    CommentDetail {
        height: auto;
        max-height: 12;
        border-top: solid $accent;
        padding: 0 1;
        overflow-y: auto;
    }
    """

    def update_view(self, state: NavigationState) -> None:
        self.display = state.pane is Pane.COMMENTS
        if self.display:
            self.update(rendering.render_comment_detail(state.selected_comment()))


class StatusFooter(Static):
    DEFAULT_CSS = """
    StatusFooter {
        dock: bottom;
        height: 2;
        padding: 0 1;
    }
    """

    def update_view(self, state: NavigationState) -> None:
        self.update(rendering.render_status(state.status, state.input_mode, state.input_buffer))
