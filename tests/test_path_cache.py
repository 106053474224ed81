"""
Tests for the path cache — miss vs. cached absence, last write wins, TTL.
"""

import math

import pytest

from devjanitor.core.discovery.path_cache import MISS, PathCache
from devjanitor.core.models.package import DiscoveryMethod


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestPaths:
    def test_unknown_key_is_miss(self):
        cache = PathCache()
        assert cache.get_path("brew") is MISS
        assert not cache.has("brew")

    def test_miss_is_falsy_but_not_none(self):
        assert not MISS
        assert MISS is not None
        assert repr(MISS) == "MISS"

    def test_cached_none_is_not_a_miss(self):
        cache = PathCache()
        cache.set_path("brew", None)
        assert cache.get_path("brew") is None
        assert cache.has("brew")
        assert "brew" in cache

    def test_last_write_wins(self):
        cache = PathCache()
        cache.set_path("brew", "/usr/local/bin/brew")
        cache.set_path("brew", None)
        cache.set_path("brew", "/opt/homebrew/bin/brew")
        assert cache.get_path("brew") == "/opt/homebrew/bin/brew"

    def test_method_recorded_with_path(self):
        cache = PathCache()
        cache.set_path("conda", "/opt/miniconda3/bin/conda", DiscoveryMethod.COMMON_PATH)
        assert cache.get_method("conda") == DiscoveryMethod.COMMON_PATH

    def test_method_dropped_when_path_becomes_none(self):
        cache = PathCache()
        cache.set_path("conda", "/opt/miniconda3/bin/conda", DiscoveryMethod.COMMON_PATH)
        cache.set_path("conda", None, DiscoveryMethod.COMMON_PATH)
        assert cache.get_method("conda") is None

    def test_list_keys_in_insertion_order(self):
        cache = PathCache()
        cache.set_path("pipx", "/p")
        cache.set_path("brew", None)
        assert cache.list_keys() == ["pipx", "brew"]


class TestAvailability:
    def test_unknown_is_none(self):
        assert PathCache().get_availability("brew") is None

    def test_last_write_wins(self):
        cache = PathCache()
        cache.set_availability("brew", True)
        cache.set_availability("brew", False)
        assert cache.get_availability("brew") is False

    def test_independent_of_path_store(self):
        cache = PathCache()
        cache.set_availability("brew", True)
        assert cache.get_path("brew") is MISS
        assert cache.size() == 1


class TestHousekeeping:
    def test_invalidate_removes_only_that_key(self):
        cache = PathCache()
        cache.set_path("brew", "/b")
        cache.set_availability("brew", True)
        cache.set_path("conda", "/c")
        cache.invalidate("brew")
        assert cache.get_path("brew") is MISS
        assert cache.get_availability("brew") is None
        assert cache.get_path("conda") == "/c"
        assert cache.size() == 1

    def test_invalidate_unknown_key_is_noop(self):
        cache = PathCache()
        cache.invalidate("nope")
        assert cache.size() == 0

    def test_clear_empties_everything(self):
        cache = PathCache()
        cache.set_path("brew", "/b", DiscoveryMethod.PATH_SCAN)
        cache.set_availability("conda", False)
        cache.clear()
        assert cache.size() == 0
        assert len(cache) == 0
        assert cache.list_keys() == []
        assert cache.get_method("brew") is None


class TestTTL:
    def test_infinite_ttl_never_expires(self):
        clock = FakeClock()
        cache = PathCache(clock=clock)
        cache.set_path("brew", "/b")
        clock.advance(10**9)
        assert cache.get_path("brew") == "/b"

    def test_expired_entry_reads_as_miss(self):
        clock = FakeClock()
        cache = PathCache(ttl=60, clock=clock)
        cache.set_path("brew", "/b")
        cache.set_availability("brew", True)
        clock.advance(61)
        assert cache.get_path("brew") is MISS
        assert cache.get_availability("brew") is None
        assert cache.size() == 0

    def test_entry_alive_at_exact_ttl(self):
        clock = FakeClock()
        cache = PathCache(ttl=60, clock=clock)
        cache.set_path("brew", "/b")
        clock.advance(60)
        assert cache.get_path("brew") == "/b"

    def test_set_refreshes_timestamp(self):
        clock = FakeClock()
        cache = PathCache(ttl=60, clock=clock)
        cache.set_path("brew", "/b")
        clock.advance(50)
        cache.set_availability("brew", True)
        clock.advance(50)
        assert cache.get_path("brew") == "/b"

    def test_expired_cached_none_becomes_miss(self):
        clock = FakeClock()
        cache = PathCache(ttl=5, clock=clock)
        cache.set_path("brew", None)
        clock.advance(6)
        assert cache.get_path("brew") is MISS
        assert not cache.has("brew")

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_non_positive_ttl_rejected(self, ttl):
        with pytest.raises(ValueError):
            PathCache(ttl=ttl)

    def test_default_ttl_is_infinite(self):
        assert math.isinf(PathCache().ttl)
