"""Main TUI application using Textual.

// [LAW:locality-or-seam] Thin adapter: all behaviour lives in navigation.Navigator.
// [LAW:single-enforcer] on_key is the sole key entry; it forwards to the navigator.
"""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.css.query import NoMatches

from hnclient.tui.input_modes import key_token
from hnclient.tui.navigation import Navigator
from hnclient.tui.widgets import CommentDetail, HeaderBar, PaneView, StatusFooter

logger = logging.getLogger(__name__)


class HnClientApp(App):
    """TUI application for hnclient."""

    TITLE = "hnclient"
    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        navigator: Navigator,
        initial_feed: str | None = None,
        initial_search: str | None = None,
    ) -> None:
        super().__init__()
        self._navigator = navigator
        self._initial_feed = initial_feed
        self._initial_search = initial_search
        navigator.on_change = self.refresh_view
        navigator.on_quit = self.exit

    @property
    def navigator(self) -> Navigator:
        return self._navigator

    def compose(self) -> ComposeResult:
        yield HeaderBar(id="header")
        yield PaneView(id="pane")
        yield CommentDetail(id="comment-detail")
        yield StatusFooter(id="status")

    def on_mount(self) -> None:
        self.refresh_view()
        self.run_worker(
            self._navigator.start(self._initial_feed, self._initial_search),
            group="navigator",
            exit_on_error=False,
        )

    def on_resize(self, _event) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        state = self._navigator.state
        for widget_type in (HeaderBar, PaneView, CommentDetail, StatusFooter):
            try:
                self.query_one(widget_type).update_view(state)
            except NoMatches:
                # Not mounted yet (early on_change during startup) or already torn down.
                return

    async def on_key(self, event) -> None:
        event.prevent_default()
        event.stop()
        token = key_token(event.key, event.character)
        self.run_worker(
            self._navigator.handle_key(token),
            group="navigator",
            exit_on_error=False,
        )
