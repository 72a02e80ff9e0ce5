"""Base semantic similarity scorer interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class SemanticResult:
    """Verdict returned by a semantic scorer."""

    matched: bool
    score: float
    reason: str
    method: str = "semantic"
    error: bool = False  # True when the verdict reflects an outage, not a comparison


class SemanticScorer(ABC):
    """Abstract base class for embedding-based title similarity backends."""

    # Override in subclasses
    NAME: str = ""

    @abstractmethod
    async def check_similarity(self, title_a: str, title_b: str, threshold: float) -> SemanticResult:
        """Compare two titles semantically.

        Ordinary "no match" and "service unavailable" outcomes are returned as
        ``matched=False`` results, never raised.

        Args:
            title_a: First title.
            title_b: Second title.
            threshold: Minimum cosine similarity to count as a match.

        Returns:
            SemanticResult with a score in [0, 1].
        """
        ...

    async def aclose(self) -> None:
        """Release backend resources."""
        return None

    def _verdict(self, score: float, threshold: float) -> SemanticResult:
        """Turn a raw cosine similarity into a thresholded verdict."""
        score = max(0.0, min(1.0, float(score)))
        if score >= threshold:
            return SemanticResult(
                matched=True,
                score=score,
                reason=f"Semantic score {score:.3f} >= threshold {threshold}",
            )
        return SemanticResult(
            matched=False,
            score=score,
            reason=f"Semantic score {score:.3f} < threshold {threshold}",
        )
