"""Tests for the persistent TTL cache."""

import json
import os

import pytest

from hnclient.errors import CacheWriteError
from hnclient.io.ttl_cache import TtlCache


class FakeClock:
    def __init__(self, now=1_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_path(tmp_path):
    return tmp_path / "cache" / "cache.json"


def test_set_then_get_returns_value(cache_path, clock):
    cache = TtlCache(cache_path, clock=clock)

    cache.set("item:1", {"id": 1}, 60)

    assert cache.get("item:1") == {"id": 1}


def test_expired_entry_is_absent_and_removed_from_disk(cache_path, clock):
    cache = TtlCache(cache_path, clock=clock)
    cache.set("feed:top", [1, 2, 3], 60)

    clock.advance(60)

    assert cache.get("feed:top") is None
    assert "feed:top" not in json.loads(cache_path.read_text())


def test_entry_survives_until_expiry(cache_path, clock):
    cache = TtlCache(cache_path, clock=clock)
    cache.set("k", "v", 60)

    clock.advance(59)

    assert cache.get("k") == "v"


def test_persisted_document_shape(cache_path, clock):
    cache = TtlCache(cache_path, clock=clock)

    cache.set("k", [1], 30)

    assert json.loads(cache_path.read_text()) == {"k": {"expiresAt": 1_030.0, "value": [1]}}


def test_reload_from_disk(cache_path, clock):
    TtlCache(cache_path, clock=clock).set("search:rust:0", {"hits": []}, 120)

    reloaded = TtlCache(cache_path, clock=clock)

    assert reloaded.get("search:rust:0") == {"hits": []}


def test_set_overwrites(cache_path, clock):
    cache = TtlCache(cache_path, clock=clock)
    cache.set("k", 1, 10)
    cache.set("k", 2, 100)

    clock.advance(50)

    assert cache.get("k") == 2
    assert len(cache) == 1


def test_load_is_lazy(cache_path, clock):
    cache = TtlCache(cache_path, clock=clock)
    cache_path.parent.mkdir(parents=True)
    # Written after construction but before first use: still picked up.
    cache_path.write_text(json.dumps({"k": {"expiresAt": 5_000, "value": "late"}}))

    assert cache.get("k") == "late"


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2, 3]",
        "",
    ],
    ids=["garbage", "wrong-type", "empty"],
)
def test_corrupt_document_is_treated_as_empty(cache_path, clock, content):
    cache_path.parent.mkdir(parents=True)
    cache_path.write_text(content)
    cache = TtlCache(cache_path, clock=clock)

    assert cache.get("anything") is None

    cache.set("k", "v", 10)
    assert json.loads(cache_path.read_text()) == {"k": {"expiresAt": 1_010.0, "value": "v"}}


def test_malformed_entries_are_skipped(cache_path, clock):
    cache_path.parent.mkdir(parents=True)
    cache_path.write_text(json.dumps({
        "good": {"expiresAt": 2_000, "value": 1},
        "no-expiry": {"value": 2},
        "bad-expiry": {"expiresAt": "soon", "value": 3},
        "not-a-dict": 4,
    }))

    cache = TtlCache(cache_path, clock=clock)

    assert cache.get("good") == 1
    assert len(cache) == 1


def test_write_failure_raises_and_memory_only_recovers(tmp_path, clock):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where the cache directory should be")
    cache = TtlCache(blocker / "cache.json", clock=clock)

    with pytest.raises(CacheWriteError):
        cache.set("k", "v", 10)

    cache.use_memory_only()
    cache.set("k2", "v2", 10)

    assert cache.memory_only
    assert cache.get("k") == "v"
    assert cache.get("k2") == "v2"


def test_unserializable_value_raises_cache_write_error(cache_path, clock):
    cache = TtlCache(cache_path, clock=clock)

    with pytest.raises(CacheWriteError):
        cache.set("k", object(), 10)

    assert not [p for p in os.listdir(cache_path.parent) if p.endswith(".tmp")]
