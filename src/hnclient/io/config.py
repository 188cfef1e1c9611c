"""Configuration file I/O for hnclient.

Manages a JSON config file at XDG_CONFIG_HOME/hnclient/config.json.
Loaded once at startup; any missing or invalid field takes its default.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path

import hnclient.io.paths
from hnclient.core.items import FEEDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheTtls:
    feed: int = 60
    item: int = 300
    search: int = 120
    article: int = 600


@dataclass(frozen=True)
class AppConfig:
    default_feed: str = "top"
    chunk_size: int = 30
    cache_ttl_seconds: CacheTtls = field(default_factory=CacheTtls)


DEFAULT_CONFIG = AppConfig()


def get_config_path() -> Path:
    return hnclient.io.paths.config_path()


def _positive_int(value, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def config_from_dict(data: dict) -> AppConfig:
    """Merge a parsed config document over the defaults, field by field."""
    if not isinstance(data, dict):
        return DEFAULT_CONFIG

    feed = data.get("defaultFeed", DEFAULT_CONFIG.default_feed)
    if feed not in FEEDS:
        if "defaultFeed" in data:
            logger.warning("unknown defaultFeed %r, using %r", feed, DEFAULT_CONFIG.default_feed)
        feed = DEFAULT_CONFIG.default_feed

    raw_ttls = data.get("cacheTtlSeconds")
    raw_ttls = raw_ttls if isinstance(raw_ttls, dict) else {}
    base = DEFAULT_CONFIG.cache_ttl_seconds
    ttls = replace(
        base,
        **{
            name: _positive_int(raw_ttls.get(name), getattr(base, name))
            for name in ("feed", "item", "search", "article")
        },
    )

    return AppConfig(
        default_feed=feed,
        chunk_size=_positive_int(data.get("chunkSize"), DEFAULT_CONFIG.chunk_size),
        cache_ttl_seconds=ttls,
    )


def config_to_dict(config: AppConfig) -> dict:
    return {
        "defaultFeed": config.default_feed,
        "chunkSize": config.chunk_size,
        "cacheTtlSeconds": asdict(config.cache_ttl_seconds),
    }


def load_config() -> AppConfig:
    """Load config from disk.

    A missing file is created with the defaults. A corrupt file is left
    untouched and the defaults are used.
    """
    path = get_config_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        try:
            save_config(DEFAULT_CONFIG)
        except OSError:
            logger.warning("could not write default config to %s", path, exc_info=True)
        return DEFAULT_CONFIG
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return DEFAULT_CONFIG
    return config_from_dict(data)


def save_config(config: AppConfig) -> None:
    """Atomic write of the config document (temp file → rename)."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(config_to_dict(config), f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
