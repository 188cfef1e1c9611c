"""CLI entry point for hnclient."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import httpx

import hnclient
import hnclient.io.config
import hnclient.io.logging_setup
import hnclient.io.paths
from hnclient.core.items import FEEDS
from hnclient.data.algolia import AlgoliaSearchClient
from hnclient.data.article import ArticleRenderer
from hnclient.data.firebase import DEFAULT_TIMEOUT, HackerNewsClient
from hnclient.data.gateway import HackerNewsGateway
from hnclient.errors import StartupError
from hnclient.io.ttl_cache import TtlCache
from hnclient.tui.app import HnClientApp
from hnclient.tui.navigation import Navigator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hnclient",
        description="Browse Hacker News stories and comment threads in the terminal",
    )
    parser.add_argument(
        "--feed",
        choices=FEEDS,
        default=None,
        help="Feed to open (default: defaultFeed from config.json)",
    )
    parser.add_argument(
        "--search",
        type=str,
        default=None,
        help="Run a Hacker News search right after startup",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        default=False,
        help="Bypass the on-disk cache for this session",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {hnclient.__version__}")
    return parser


def build_gateway(
    http: httpx.AsyncClient,
    config: hnclient.io.config.AppConfig,
    no_cache: bool,
) -> HackerNewsGateway:
    cache = None if no_cache else TtlCache(hnclient.io.paths.cache_path())
    return HackerNewsGateway(
        hn=HackerNewsClient(http),
        search=AlgoliaSearchClient(http),
        article=ArticleRenderer(http),
        ttls=config.cache_ttl_seconds,
        cache=cache,
    )


async def _run(args: argparse.Namespace, config: hnclient.io.config.AppConfig) -> None:
    async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as http:
        gateway = build_gateway(http, config, args.no_cache)
        navigator = Navigator(gateway, config)
        app = HnClientApp(
            navigator,
            initial_feed=args.feed or config.default_feed,
            initial_search=args.search,
        )
        await app.run_async()


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        hnclient.io.paths.ensure_app_dirs()
        log_runtime = hnclient.io.logging_setup.configure()
    except (StartupError, OSError) as exc:
        print(f"hnclient: {exc}", file=sys.stderr)
        sys.exit(1)

    logger.info(
        "logging configured level=%s file=%s",
        log_runtime.level_name,
        log_runtime.file_path,
    )
    config = hnclient.io.config.load_config()
    logger.info(
        "starting feed=%s search=%r no_cache=%s",
        args.feed or config.default_feed,
        args.search,
        args.no_cache,
    )

    try:
        asyncio.run(_run(args, config))
    except KeyboardInterrupt:
        pass
    logger.info("hnclient exiting")
