"""Hard rejection rules applied on top of a tentative match."""

import logging

from pricecompare.config import VALID_BRAND_POLICIES
from pricecompare.errors import ConfigError
from pricecompare.models import MatchResult, NormalizedAttributes

logger = logging.getLogger(__name__)


def _sorted_join(values: set[str] | frozenset[str]) -> str:
    return ",".join(sorted(values))


class VetoRules:
    """Brand, spec-word and numeric vetoes.

    All vetoes are strict: any token present on one side only rejects the pair.
    """

    def __init__(self, brand_policy: str = "recognized"):
        """Initialize veto rules.

        Args:
            brand_policy: "recognized" rejects only when both brands come from the
                vocabulary; "any" also rejects on first-word brand guesses.

        Raises:
            ConfigError: If brand_policy is unknown.
        """
        if brand_policy not in VALID_BRAND_POLICIES:
            raise ConfigError(f"invalid brand_policy: {brand_policy!r}. Valid: {sorted(VALID_BRAND_POLICIES)}")
        self.brand_policy = brand_policy

    def check_brand(self, attrs_a: NormalizedAttributes, attrs_b: NormalizedAttributes) -> MatchResult | None:
        """Reject pairs whose brands conflict.

        Returns:
            Rejection with method "brand" and score 0, or None if the veto does not fire.
        """
        if not attrs_a.brand or not attrs_b.brand or attrs_a.brand == attrs_b.brand:
            return None

        if self.brand_policy == "recognized":
            if not (attrs_a.brand_recognized and attrs_b.brand_recognized):
                return None
            reason = f"KNOWN brand mismatch: '{attrs_a.brand}' vs '{attrs_b.brand}'"
        else:
            reason = f"Brand mismatch: '{attrs_a.brand}' vs '{attrs_b.brand}'"

        return MatchResult(matched=False, score=0.0, method="brand", reason=reason)

    def check_spec_words(
        self,
        attrs_a: NormalizedAttributes,
        attrs_b: NormalizedAttributes,
        score: float,
    ) -> MatchResult | None:
        """Reject pairs whose spec word sets differ ("iPhone 15" vs "iPhone 15 Pro").

        Args:
            attrs_a: Attributes of the first title.
            attrs_b: Attributes of the second title.
            score: Pre-veto similarity, kept on the rejection.
        """
        unique_a = attrs_a.spec_words - attrs_b.spec_words
        unique_b = attrs_b.spec_words - attrs_a.spec_words
        if not unique_a and not unique_b:
            return None

        reason = (
            f"Spec word sets not identical: A has [{_sorted_join(unique_a) or 'none'}] unique, "
            f"B has [{_sorted_join(unique_b) or 'none'}] unique"
        )
        return MatchResult(matched=False, score=score, method="spec-word-veto", reason=reason)

    def check_numbers(
        self,
        attrs_a: NormalizedAttributes,
        attrs_b: NormalizedAttributes,
        score: float,
    ) -> MatchResult | None:
        """Reject pairs whose numeric token sets differ ("128GB" vs "256GB").

        Args:
            attrs_a: Attributes of the first title.
            attrs_b: Attributes of the second title.
            score: Pre-veto similarity, kept on the rejection.
        """
        unique_a = attrs_a.numeric_tokens - attrs_b.numeric_tokens
        unique_b = attrs_b.numeric_tokens - attrs_a.numeric_tokens
        if not unique_a and not unique_b:
            return None

        parts = []
        if unique_a:
            parts.append(f"A has unique [{_sorted_join(unique_a)}]")
        if unique_b:
            parts.append(f"B has unique [{_sorted_join(unique_b)}]")
        reason = f"Numeric sets not identical: {'; '.join(parts)}"
        return MatchResult(matched=False, score=score, method="numeric-veto", reason=reason)

    def apply(
        self,
        attrs_a: NormalizedAttributes,
        attrs_b: NormalizedAttributes,
        tentative: MatchResult,
    ) -> MatchResult:
        """Run the spec-word then numeric veto over a tentative match.

        Args:
            attrs_a: Attributes of the first title.
            attrs_b: Attributes of the second title.
            tentative: Accepted result from the lexical or semantic stage.

        Returns:
            The first veto that fires, otherwise ``tentative`` unchanged.
        """
        for check in (self.check_spec_words, self.check_numbers):
            veto = check(attrs_a, attrs_b, tentative.score)
            if veto is not None:
                logger.debug(f"{veto.method}: {veto.reason}")
                return veto
        return tentative
