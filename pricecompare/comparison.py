"""Comparison runner coordinating matching and price reporting."""

import logging
from datetime import datetime
from pathlib import Path

from pricecompare.cache import MatchCache
from pricecompare.config import AppConfig, MatcherConfig, Vocabulary, load_config
from pricecompare.matcher import MatchOrchestrator
from pricecompare.models import ComparisonRecord, ComparisonReport, Listing, MatchResult
from pricecompare.normalize import tokenize
from pricecompare.pricing import NOT_FOUND, decide_winner, parse_price
from pricecompare.selector import BestMatchSelector, find_best_for_query
from pricecompare.semantic import SemanticScorer, create_semantic_scorer

logger = logging.getLogger(__name__)


class ComparisonRunner:
    """Matches two marketplaces' listings and builds price comparison records."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        config: AppConfig | None = None,
        matcher_config: MatcherConfig | None = None,
        vocabulary: Vocabulary | None = None,
        semantic_scorer: SemanticScorer | None = None,
    ):
        """Initialize runner with configuration.

        Args:
            config_path: Path to config.yaml. Ignored if ``config`` is given.
            config: Already parsed configuration.
            matcher_config: Overrides the matcher section.
            vocabulary: Overrides the vocabulary section.
            semantic_scorer: Overrides the backend chosen by ``semantic_backend``.

        Raises:
            FileNotFoundError: If config_path doesn't exist.
            ConfigError: If the configuration is invalid.
        """
        if config is None:
            config = load_config(config_path) if config_path is not None else AppConfig()
        if matcher_config is not None:
            config.matcher = matcher_config
        if vocabulary is not None:
            config.vocabulary = vocabulary
        self.config = config

        if semantic_scorer is None:
            semantic_scorer = create_semantic_scorer(config.matcher)
        self.semantic_scorer = semantic_scorer

        # Initialize components
        self.cache = MatchCache()
        self.orchestrator = MatchOrchestrator(
            config=config.matcher,
            vocabulary=config.vocabulary,
            semantic_scorer=semantic_scorer,
            cache=self.cache,
        )
        self.selector = BestMatchSelector(self.orchestrator)

    @property
    def source_a(self) -> str:
        return self.config.source_a

    @property
    def source_b(self) -> str:
        return self.config.source_b

    def _new_report(self) -> ComparisonReport:
        return ComparisonReport(
            source_a=self.source_a,
            source_b=self.source_b,
            scraped_on=datetime.now().isoformat(),
        )

    async def compare(self, listings_a: list[Listing], listings_b: list[Listing]) -> ComparisonReport:
        """Find common products between two marketplaces and compare prices.

        Each source B listing is matched against all source A listings.

        Args:
            listings_a: Listings scraped from source A.
            listings_b: Listings scraped from source B.

        Returns:
            ComparisonReport with one record per matched source B listing.
        """
        report = self._new_report()
        report.logs.append(
            f"Found {len(listings_a)} products on {self.source_a} and {len(listings_b)} products on {self.source_b}."
        )
        logger.info(report.logs[-1])

        for listing_b in listings_b:
            if not listing_b.title:
                logger.debug("Skipping listing without a title")
                continue

            outcome = await self.selector.find_best_match(listing_b, listings_a)
            if outcome is None:
                continue

            report.records.append(self._build_record(outcome.item, listing_b, outcome.result, listing_b.title))

        if not report.records:
            report.logs.append(
                f"Couldn't find any common products between {self.source_a} and {self.source_b} based on their titles."
            )
        else:
            report.logs.append(f"Matched {len(report.records)} common products.")

        report.cache_hits = self.cache.hits
        report.cache_misses = self.cache.misses
        return report

    async def compare_query(
        self,
        query: str,
        listings_a: list[Listing],
        listings_b: list[Listing],
    ) -> ComparisonReport:
        """Compare the single best listing per marketplace for a specific product query.

        Args:
            query: Product name as typed by the user.
            listings_a: Listings scraped from source A.
            listings_b: Listings scraped from source B.

        Returns:
            ComparisonReport with exactly one record. A side with no listing
            covering the query gets NOT_FOUND pricing.
        """
        report = self._new_report()
        report.logs.append(f"Specific search strategy: {query!r}")
        threshold = self.config.matcher.query_threshold

        best: dict[str, tuple[Listing, float] | None] = {}
        for name, listings in ((self.source_a, listings_a), (self.source_b, listings_b)):
            found = find_best_for_query(query, listings, threshold, tokens=tokenize)
            best[name] = found
            if found is None:
                report.logs.append(f"[{name}] No listing covers at least {threshold:.0%} of the query.")
            else:
                report.logs.append(f"[{name}] Best match: {found[0].title[:40]!r} (score {found[1]:.0%})")

        found_a, found_b = best[self.source_a], best[self.source_b]
        item_a = found_a[0] if found_a else None
        item_b = found_b[0] if found_b else None
        scores = [s for _, s in filter(None, (found_a, found_b))]
        result = MatchResult(
            matched=bool(found_a and found_b),
            score=min(scores) if scores else 0.0,
            method="jaccard" if scores else None,
            reason=(
                f"Query coverage {self.source_a}={found_a[1] if found_a else 0:.2f}, "
                f"{self.source_b}={found_b[1] if found_b else 0:.2f}"
            ),
        )

        report.records.append(self._build_record(item_a, item_b, result, query))
        return report

    def _build_record(
        self,
        item_a: Listing | None,
        item_b: Listing | None,
        result: MatchResult,
        title: str,
    ) -> ComparisonRecord:
        """Merge a matched pair into one comparison row."""
        price_a = parse_price(item_a.price) if item_a else NOT_FOUND
        price_b = parse_price(item_b.price) if item_b else NOT_FOUND
        return ComparisonRecord(
            title=title,
            price_a=price_a,
            price_b=price_b,
            winner=decide_winner(price_a, price_b, self.source_a, self.source_b),
            link_a=item_a.link if item_a else None,
            link_b=item_b.link if item_b else None,
            image_a=item_a.image_url if item_a else None,
            image_b=item_b.image_url if item_b else None,
            match_score=result.score,
            match_method=result.method,
            match_reason=result.reason,
        )

    async def aclose(self) -> None:
        """Release the semantic backend."""
        if self.semantic_scorer is not None:
            await self.semantic_scorer.aclose()
