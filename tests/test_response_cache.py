"""
Unit tests for the in-process response cache.
"""
import pytest

from econ_pipeline.cache.response_cache import TTL_COUNTRIES, TTL_INDICATORS, TTL_META, ResponseCache

pytestmark = pytest.mark.unit


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


class TestTTL:
    @pytest.mark.parametrize("kind,ttl", [
        ("countries", TTL_COUNTRIES),
        ("indicators", TTL_INDICATORS),
        ("meta", TTL_META),
    ])
    def test_entry_expires_after_its_kind_ttl(self, clock, kind, ttl):
        cache = ResponseCache(clock=clock)
        cache.set("key", {"v": 1}, kind=kind)

        clock.now += ttl - 1
        assert cache.get("key") == {"v": 1}

        clock.now += 1
        assert cache.get("key") is None
        assert len(cache) == 0

    def test_unknown_kind_uses_indicator_ttl(self, clock):
        cache = ResponseCache(clock=clock)
        cache.set("key", 1, kind="whatever")
        clock.now += TTL_INDICATORS
        assert cache.get("key") is None

    def test_missing_key(self):
        assert ResponseCache().get("nope") is None


class TestEviction:
    def test_least_recently_used_goes_first(self, clock):
        cache = ResponseCache(max_entries=2, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)

        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3


class TestInvalidation:
    def test_pattern_matches_substring(self):
        cache = ResponseCache()
        cache.set("indicators:gini", 1)
        cache.set("history:US:gini", 2)
        cache.set("countries:all", 3, kind="countries")

        assert cache.invalidate("gini") == 2
        assert cache.get("countries:all") == 3

    def test_no_pattern_clears_everything(self):
        cache = ResponseCache()
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.invalidate() == 2
        assert len(cache) == 0

    def test_invalidate_indicators_keeps_country_entries(self):
        cache = ResponseCache()
        cache.set("indicators:gdp_per_capita", 1)
        cache.set("history:DE:gdp_per_capita", 2)
        cache.set("meta:last-updated", 3, kind="meta")
        cache.set("countries:all", 4, kind="countries")

        assert cache.invalidate_indicators() == 3
        assert len(cache) == 1
