"""Tests for the match verdict cache."""

from pricecompare.cache import MatchCache
from pricecompare.models import MatchResult

RESULT = MatchResult(matched=True, score=0.9, method="jaccard", reason="ok")


class TestMatchCache:
    """Tests for MatchCache class."""

    def test_miss_then_hit(self) -> None:
        """Test that a stored verdict is returned."""
        cache = MatchCache()

        assert cache.get("Apple iPhone 15", "iPhone 15 Apple") is None
        cache.put("Apple iPhone 15", "iPhone 15 Apple", RESULT)
        assert cache.get("Apple iPhone 15", "iPhone 15 Apple") == RESULT
        assert cache.hits == 1
        assert cache.misses == 1

    def test_key_is_unordered(self) -> None:
        """Test that (A, B) and (B, A) share one entry."""
        cache = MatchCache()
        cache.put("Title One", "Title Two", RESULT)

        assert cache.get("Title Two", "Title One") == RESULT
        assert MatchCache.make_key("a", "b") == MatchCache.make_key("b", "a")

    def test_key_is_normalized(self) -> None:
        """Test that case and whitespace differences share one entry."""
        cache = MatchCache()
        cache.put("Apple  iPhone 15 ", "x", RESULT)

        assert ("apple iphone 15", "X") in cache
        assert cache.count() == 1

    def test_contains_rejects_non_pairs(self) -> None:
        """Test membership with malformed keys."""
        assert "apple" not in MatchCache()

    def test_clear(self) -> None:
        """Test that clear drops entries and counters."""
        cache = MatchCache()
        cache.put("a", "b", RESULT)
        cache.get("a", "b")
        cache.clear()

        assert cache.count() == 0
        assert cache.hits == 0
        assert cache.misses == 0
