"""Persistent key/value cache with per-entry expiry.

The whole cache is one JSON document mapping key → {"expiresAt", "value"}.
It is read lazily on first access and rewritten in full after every
mutation. Expired entries are dropped when read.

// [LAW:single-enforcer] Cache file I/O happens only in this module.
// [LAW:one-source-of-truth] _entries is the in-memory image of the document.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from hnclient.errors import CacheWriteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    key: str
    expires_at: float
    value: Any


class TtlCache:
    """Write-through TTL cache persisted as a single JSON file."""

    def __init__(self, path: Path, clock: Callable[[], float] = time.time) -> None:
        self._path = Path(path)
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._loaded = False
        self._memory_only = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def memory_only(self) -> bool:
        return self._memory_only

    def use_memory_only(self) -> None:
        """Stop writing to disk; entries keep living in memory."""
        if not self._memory_only:
            logger.warning("cache persistence disabled for this session: %s", self._path)
        self._memory_only = True

    def get(self, key: str) -> Any | None:
        self._ensure_loaded()
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            self._persist()
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        self._ensure_loaded()
        self._entries[key] = CacheEntry(
            key=key,
            expires_at=self._clock() + ttl_seconds,
            value=value,
        )
        self._persist()

    def __contains__(self, key: str) -> bool:
        self._ensure_loaded()
        return key in self._entries

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._entries)

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._entries = self._load()
        self._loaded = True

    def _load(self) -> dict[str, CacheEntry]:
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
            logger.warning("ignoring unreadable cache file %s: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            logger.warning("ignoring malformed cache file %s", self._path)
            return {}

        loaded: dict[str, CacheEntry] = {}
        for key, raw in payload.items():
            if not isinstance(raw, dict) or "value" not in raw:
                continue
            expires_at = raw.get("expiresAt")
            if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
                continue
            loaded[key] = CacheEntry(key=key, expires_at=expires_at, value=raw["value"])
        logger.debug("loaded %d cache entries from %s", len(loaded), self._path)
        return loaded

    def _persist(self) -> None:
        if self._memory_only:
            return
        payload = {
            key: {"expiresAt": entry.expires_at, "value": entry.value}
            for key, entry in self._entries.items()
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        except OSError as exc:
            raise CacheWriteError(self._path, exc) from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except (OSError, TypeError, ValueError) as exc:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise CacheWriteError(self._path, exc) from exc
