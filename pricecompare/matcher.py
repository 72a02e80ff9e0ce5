"""Match orchestrator deciding whether two listings are the same product.

Stages, evaluated in order for each pair:

1. Missing title -> rejected.
2. Cache lookup on the unordered title pair.
3. Brand veto.
4. Brand + part number equal -> accepted, score 1.0.
5. Lexical score (threshold strategy only): accept above ``hard_threshold``,
   reject below ``reject_threshold``, otherwise fall through.
6. Semantic check.
7. Spec-word then numeric veto over any lexical or semantic "yes".
8. Cache and return the verdict.
"""

import logging

from pricecompare.cache import MatchCache
from pricecompare.config import MatcherConfig, Vocabulary
from pricecompare.errors import ConfigError
from pricecompare.extractors import AttributeExtractor
from pricecompare.lexical import LexicalScorer
from pricecompare.models import Listing, MatchResult, NormalizedAttributes
from pricecompare.semantic import SemanticScorer
from pricecompare.vetoes import VetoRules

logger = logging.getLogger(__name__)


def _has_overrides(listing: Listing) -> bool:
    return bool(listing.brand or listing.model_number)


class MatchOrchestrator:
    """Sequences extraction, scoring, semantic fallback and vetoes per pair."""

    def __init__(
        self,
        config: MatcherConfig | None = None,
        vocabulary: Vocabulary | None = None,
        semantic_scorer: SemanticScorer | None = None,
        cache: MatchCache | None = None,
    ):
        """Initialize orchestrator.

        Args:
            config: Thresholds and policies. Uses defaults if None.
            vocabulary: Brand/spec word lists. Uses defaults if None.
            semantic_scorer: Backend for ambiguous pairs. None disables the semantic stage.
            cache: Verdict cache shared across calls. A fresh one is created if None.

        Raises:
            ConfigError: If the semantic-first strategy has no semantic scorer.
        """
        self.config = config or MatcherConfig()
        self.vocabulary = vocabulary or Vocabulary.default()
        self.semantic_scorer = semantic_scorer
        self.cache = cache if cache is not None else MatchCache()

        if self.config.strategy == "semantic-first" and semantic_scorer is None:
            raise ConfigError("strategy 'semantic-first' requires a semantic scorer")

        self.extractor = AttributeExtractor(self.vocabulary)
        self.lexical = LexicalScorer(self.config.lexical_mode, self.vocabulary)
        self.vetoes = VetoRules(self.config.brand_policy)

    async def match(self, listing_a: Listing, listing_b: Listing) -> MatchResult:
        """Decide whether two listings denote the same product.

        Never raises for semantic backend failures; those become rejections.

        Args:
            listing_a: Listing from one marketplace (the query side in coverage mode).
            listing_b: Listing from the other marketplace.

        Returns:
            MatchResult with score, method and reason.
        """
        if not listing_a.title or not listing_b.title:
            return MatchResult(matched=False, score=0.0, method=None, reason="One or both products lack a title.")

        # Overrides change the verdict for the same titles, so those pairs bypass the title-keyed cache
        use_cache = not (_has_overrides(listing_a) or _has_overrides(listing_b))

        cached = self.cache.get(listing_a.title, listing_b.title) if use_cache else None
        if cached is not None:
            logger.debug(f"Cache HIT for: {listing_a.title!r} vs {listing_b.title!r}")
            return cached
        logger.debug(f"Cache MISS for: {listing_a.title!r} vs {listing_b.title!r}")

        result, cacheable = await self._evaluate(listing_a, listing_b)
        if cacheable and use_cache:
            self.cache.put(listing_a.title, listing_b.title, result)
        return result

    async def match_titles(self, title_a: str, title_b: str) -> MatchResult:
        """Convenience wrapper comparing bare titles."""
        return await self.match(Listing(title=title_a), Listing(title=title_b))

    async def _evaluate(self, listing_a: Listing, listing_b: Listing) -> tuple[MatchResult, bool]:
        """Run every stage after the cache lookup.

        Returns:
            (result, cacheable). Results of a raising semantic backend are not cacheable.
        """
        attrs_a = self.extractor.extract(listing_a)
        attrs_b = self.extractor.extract(listing_b)

        brand_veto = self.vetoes.check_brand(attrs_a, attrs_b)
        if brand_veto is not None:
            return brand_veto, True

        fast = self._check_brand_and_model(attrs_a, attrs_b)
        if fast is not None:
            return fast, True

        if self.config.strategy == "threshold":
            score = self.lexical.score(listing_a.title, listing_b.title)
            if score >= self.config.hard_threshold:
                tentative = MatchResult(
                    matched=True,
                    score=score,
                    method="jaccard",
                    reason=f"Lexical {self.config.lexical_mode} score {score:.3f} >= {self.config.hard_threshold}",
                )
                return self.vetoes.apply(attrs_a, attrs_b, tentative), True
            if score < self.config.reject_threshold:
                return (
                    MatchResult(
                        matched=False,
                        score=score,
                        method="jaccard",
                        reason=f"Lexical {self.config.lexical_mode} score {score:.3f} < {self.config.reject_threshold}",
                    ),
                    True,
                )
            if self.semantic_scorer is None:
                return (
                    MatchResult(
                        matched=False,
                        score=score,
                        method="jaccard",
                        reason=f"Lexical score {score:.3f} is ambiguous and no semantic scorer is configured",
                    ),
                    True,
                )

        return await self._check_semantic(listing_a, listing_b, attrs_a, attrs_b)

    def _check_brand_and_model(
        self,
        attrs_a: NormalizedAttributes,
        attrs_b: NormalizedAttributes,
    ) -> MatchResult | None:
        """Accept pairs sharing brand and part number outright."""
        if not (attrs_a.brand and attrs_b.brand and attrs_a.model_number and attrs_b.model_number):
            return None
        if not (attrs_a.model_is_part_number and attrs_b.model_is_part_number):
            return None
        if attrs_a.brand != attrs_b.brand or attrs_a.model_number != attrs_b.model_number:
            return None
        return MatchResult(
            matched=True,
            score=1.0,
            method="brand+model",
            reason=f"Brand '{attrs_a.brand}' and model '{attrs_a.model_number}' match exactly",
        )

    async def _check_semantic(
        self,
        listing_a: Listing,
        listing_b: Listing,
        attrs_a: NormalizedAttributes,
        attrs_b: NormalizedAttributes,
    ) -> tuple[MatchResult, bool]:
        """Ask the semantic backend, then veto any "yes"."""
        if self.semantic_scorer is None:
            raise ConfigError("semantic check requested without a semantic scorer")

        try:
            semantic = await self.semantic_scorer.check_similarity(
                listing_a.title,
                listing_b.title,
                self.config.semantic_threshold,
            )
        except Exception as e:
            logger.warning(f"Semantic check failed for {listing_a.title!r} vs {listing_b.title!r}: {e}")
            return (
                MatchResult(matched=False, score=0.0, method="semantic", reason=f"Semantic check failed: {e}"),
                False,
            )

        result = MatchResult(
            matched=semantic.matched,
            score=semantic.score,
            method="semantic",
            reason=semantic.reason,
        )
        if semantic.error:
            logger.warning(f"Semantic backend unavailable for {listing_a.title!r} vs {listing_b.title!r}: {semantic.reason}")
        if not semantic.matched:
            return result, True

        return self.vetoes.apply(attrs_a, attrs_b, result), True
