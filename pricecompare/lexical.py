"""Token overlap similarity between listing titles."""

from pricecompare.config import VALID_LEXICAL_MODES, Vocabulary
from pricecompare.errors import ConfigError
from pricecompare.normalize import tokenize


def jaccard(tokens_a: set[str], tokens_b: set[str]) -> float:
    """Symmetric Jaccard index |A & B| / |A | B|. Empty input scores 0."""
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


def coverage(query_tokens: set[str], title_tokens: set[str]) -> float:
    """One-sided share of query tokens present in the title. Empty input scores 0."""
    if not query_tokens or not title_tokens:
        return 0.0
    return len(query_tokens & title_tokens) / len(query_tokens)


class LexicalScorer:
    """Scores title pairs by token overlap after strict cleaning.

    Two modes:
    - ``jaccard``: fuzzy symmetric comparison for general search results.
    - ``coverage``: strict subset, how much of the first title the second covers.
    """

    def __init__(self, mode: str = "jaccard", vocabulary: Vocabulary | None = None):
        """Initialize scorer.

        Args:
            mode: "jaccard" or "coverage".
            vocabulary: Supplies the fluff words to drop. Uses defaults if None.

        Raises:
            ConfigError: If mode is unknown.
        """
        if mode not in VALID_LEXICAL_MODES:
            raise ConfigError(f"invalid lexical mode: {mode!r}. Valid: {sorted(VALID_LEXICAL_MODES)}")
        self.mode = mode
        self.vocabulary = vocabulary or Vocabulary.default()

    def tokens(self, title: str | None) -> set[str]:
        """Cleaned token set of a title."""
        return tokenize(title, self.vocabulary.fluff_words)

    def score(self, title_a: str | None, title_b: str | None) -> float:
        """Similarity of two titles in [0, 1].

        In coverage mode ``title_a`` is the query.
        """
        tokens_a = self.tokens(title_a)
        tokens_b = self.tokens(title_b)
        if self.mode == "coverage":
            return coverage(tokens_a, tokens_b)
        return jaccard(tokens_a, tokens_b)
