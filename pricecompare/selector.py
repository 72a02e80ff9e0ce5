"""Best-match selection of one target listing against a candidate list."""

import asyncio
import logging
from collections.abc import Callable

from pricecompare.lexical import coverage
from pricecompare.matcher import MatchOrchestrator
from pricecompare.models import BestMatchOutcome, Listing, MatchResult
from pricecompare.normalize import tokenize

logger = logging.getLogger(__name__)


class BestMatchSelector:
    """Fans a target out over all candidates and keeps the strongest accepted match."""

    def __init__(self, orchestrator: MatchOrchestrator):
        """Initialize selector.

        Args:
            orchestrator: Pairwise matcher, shared so its cache spans all targets.
        """
        self.orchestrator = orchestrator

    async def _safe_match(self, target: Listing, candidate: Listing) -> MatchResult:
        """Match one candidate, turning unexpected errors into a rejection."""
        try:
            return await self.orchestrator.match(target, candidate)
        except Exception as e:
            logger.error(f"Error matching {target.title!r} against {candidate.title!r}: {e}")
            return MatchResult(matched=False, score=0.0, method=None, reason=f"Error: {e}")

    async def evaluate(self, target: Listing, candidates: list[Listing]) -> list[tuple[Listing, MatchResult]]:
        """Run the orchestrator against every candidate concurrently.

        Returns:
            (candidate, result) pairs in input order.
        """
        results = await asyncio.gather(*(self._safe_match(target, c) for c in candidates))
        return list(zip(candidates, results))

    async def find_best_match(self, target: Listing, candidates: list[Listing]) -> BestMatchOutcome | None:
        """Pick the best accepted candidate for a target.

        A "brand+model" hit beats any score. Otherwise the highest score wins,
        ties going to the earliest candidate in input order.

        Args:
            target: Listing to find a counterpart for.
            candidates: Listings from the other marketplace.

        Returns:
            BestMatchOutcome, or None if no candidate matched.
        """
        evaluated = await self.evaluate(target, candidates)

        best: tuple[Listing, MatchResult] | None = None
        for candidate, result in evaluated:
            if not result.matched:
                continue
            if result.method == "brand+model":
                best = (candidate, result)
                break
            if best is None or result.score > best[1].score:
                best = (candidate, result)

        if best is None:
            logger.info(f"No match found for {target.title!r}")
            return None

        candidate, result = best
        logger.info(
            f"Best match for {target.title!r} -> {candidate.title!r} "
            f"({result.method}, score {result.score:.3f})"
        )
        return BestMatchOutcome(item=candidate, result=result)


def find_best_for_query(
    query: str,
    listings: list[Listing],
    threshold: float = 0.5,
    tokens: Callable[[str], set[str]] | None = None,
) -> tuple[Listing, float] | None:
    """Pick the listing whose title best covers a raw search query.

    Strict-subset coverage of the query tokens; the first listing wins ties.

    Args:
        query: Raw product query typed by the user.
        listings: Listings from one marketplace.
        threshold: Minimum coverage to accept the best listing.
        tokens: Tokenizer; defaults to plain cleaning without fluff removal.

    Returns:
        (listing, coverage) or None if nothing reaches the threshold.
    """
    tokenizer = tokens or tokenize
    query_tokens = tokenizer(query)

    best_item: Listing | None = None
    best_score = 0.0
    for listing in listings:
        if not listing.title:
            continue
        score = coverage(query_tokens, tokenizer(listing.title))
        if score > best_score:
            best_item, best_score = listing, score

    if best_item is None or best_score < threshold:
        return None
    return best_item, best_score
