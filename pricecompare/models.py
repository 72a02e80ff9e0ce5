"""Data models for cross-marketplace price comparison."""

from dataclasses import dataclass, field
from typing import Any, Literal

MatchMethod = Literal["brand", "spec-word-veto", "numeric-veto", "jaccard", "semantic", "brand+model"]


@dataclass(frozen=True)
class Listing:
    """Raw listing scraped from one marketplace."""

    title: str
    price: str | float | None = None
    link: str = ""
    image_url: str | None = None
    brand: str | None = None  # Optional pre-supplied override
    model_number: str | None = None  # Optional pre-supplied override

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Listing":
        """Build a listing from a scraper record.

        Args:
            data: Mapping with title/price/link/imageUrl keys (any case).

        Returns:
            Listing instance. Missing titles become empty strings.
        """
        lowered = {str(k).lower(): v for k, v in data.items()}
        image = lowered.get("image_url", lowered.get("imageurl", lowered.get("image")))
        return cls(
            title=str(lowered.get("title") or "").strip(),
            price=lowered.get("price"),
            link=str(lowered.get("link") or lowered.get("url") or ""),
            image_url=image or None,
            brand=lowered.get("brand") or None,
            model_number=lowered.get("model_number", lowered.get("modelnumber")) or None,
        )


@dataclass(frozen=True)
class MatchResult:
    """Verdict for one listing pair."""

    matched: bool
    score: float = 0.0
    method: MatchMethod | None = None
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "matched": self.matched,
            "score": round(self.score, 4),
            "method": self.method,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class NormalizedAttributes:
    """Structured signals pulled out of a single title."""

    brand: str | None
    brand_recognized: bool
    model_number: str | None
    model_is_part_number: bool
    spec_words: frozenset[str] = field(default_factory=frozenset)
    numeric_tokens: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class BestMatchOutcome:
    """Winning candidate for one target listing."""

    item: Listing
    result: MatchResult


@dataclass
class ComparisonRecord:
    """One merged row of the comparison output."""

    title: str
    price_a: float | str
    price_b: float | str
    winner: str
    link_a: str | None = None
    link_b: str | None = None
    image_a: str | None = None
    image_b: str | None = None
    match_score: float = 0.0
    match_method: str | None = None
    match_reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "title": self.title,
            "priceA": self.price_a,
            "priceB": self.price_b,
            "winner": self.winner,
            "linkA": self.link_a,
            "linkB": self.link_b,
            "imageA": self.image_a,
            "imageB": self.image_b,
            "matchScore": round(self.match_score, 4),
            "matchMethod": self.match_method,
            "matchReason": self.match_reason,
        }


@dataclass
class ComparisonReport:
    """Output of one comparison run."""

    source_a: str
    source_b: str
    scraped_on: str  # ISO format
    records: list[ComparisonRecord] = field(default_factory=list)
    logs: list[str] = field(default_factory=list)
    cache_hits: int = 0
    cache_misses: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "sourceA": self.source_a,
            "sourceB": self.source_b,
            "scrapedOn": self.scraped_on,
            "logs": list(self.logs),
            "results": [record.to_dict() for record in self.records],
        }
