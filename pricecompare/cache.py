"""Process-local memo of pairwise match verdicts."""

from pricecompare.models import MatchResult
from pricecompare.normalize import normalize

PairKey = tuple[str, str]


class MatchCache:
    """Stores match verdicts keyed by the unordered pair of normalized titles.

    Lives for one comparison run. Entries are idempotent, so concurrent
    coroutines racing on the same key may both write without harm. The key
    holds titles only; the orchestrator skips the cache for listings carrying
    brand or model overrides.
    """

    def __init__(self) -> None:
        """Initialize an empty cache."""
        self._cache: dict[PairKey, MatchResult] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(title_a: str | None, title_b: str | None) -> PairKey:
        """Build the unordered pair key, so (A, B) and (B, A) collide.

        Args:
            title_a: First title.
            title_b: Second title.

        Returns:
            Sorted tuple of the two normalized titles.
        """
        first, second = sorted((normalize(title_a), normalize(title_b)))
        return first, second

    def get(self, title_a: str | None, title_b: str | None) -> MatchResult | None:
        """Look up a verdict, counting hits and misses.

        Returns:
            Cached MatchResult, or None on a miss.
        """
        result = self._cache.get(self.make_key(title_a, title_b))
        if result is None:
            self.misses += 1
        else:
            self.hits += 1
        return result

    def put(self, title_a: str | None, title_b: str | None, result: MatchResult) -> None:
        """Store a verdict for the pair."""
        self._cache[self.make_key(title_a, title_b)] = result

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        return self.make_key(key[0], key[1]) in self._cache

    def count(self) -> int:
        """Return the number of cached pairs."""
        return len(self._cache)

    def clear(self) -> None:
        """Drop every entry and reset counters."""
        self._cache.clear()
        self.hits = 0
        self.misses = 0
