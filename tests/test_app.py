"""In-process Textual smoke tests for HnClientApp."""

from contextlib import asynccontextmanager

from hnclient.tui.app import HnClientApp
from hnclient.tui.navigation import Navigator, Pane
from hnclient.tui.widgets import CommentDetail


@asynccontextmanager
async def run_app(gateway, config, size=(100, 30)):
    navigator = Navigator(gateway, config, open_url=lambda url: True)
    app = HnClientApp(navigator, initial_feed="top")
    async with app.run_test(size=size) as pilot:
        await app.workers.wait_for_complete()
        await pilot.pause()
        yield pilot, app


async def settle(pilot, app):
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


async def test_startup_loads_feed(feed_gateway, config):
    async with run_app(feed_gateway, config) as (pilot, app):
        state = app.navigator.state

        assert state.pane is Pane.FEED
        assert len(state.feed_rows) == 5
        assert app.query_one(CommentDetail).display is False


async def test_keys_reach_navigator(feed_gateway, config):
    async with run_app(feed_gateway, config) as (pilot, app):
        await pilot.press("j")
        await settle(pilot, app)
        assert app.navigator.state.cursor == 1

        await pilot.press("slash", "2", "enter")
        await settle(pilot, app)
        assert app.navigator.state.local_matches == [1]


async def test_comments_pane_shows_detail(fake_gateway_cls, thread_items, config):
    gateway = fake_gateway_cls(items=thread_items, feeds={"top": [100]})
    async with run_app(gateway, config) as (pilot, app):
        await pilot.press("c")
        await settle(pilot, app)

        assert app.navigator.state.pane is Pane.COMMENTS
        assert app.query_one(CommentDetail).display is True


async def test_q_on_feed_exits(feed_gateway, config):
    async with run_app(feed_gateway, config) as (pilot, app):
        await pilot.press("q")
        await pilot.pause()

        assert app.navigator.state.quit_requested
