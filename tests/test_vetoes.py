"""Tests for veto rules."""

import pytest

from pricecompare.errors import ConfigError
from pricecompare.models import MatchResult, NormalizedAttributes
from pricecompare.vetoes import VetoRules


def attrs(
    brand: str | None = "apple",
    recognized: bool = True,
    spec_words: frozenset[str] = frozenset(),
    numbers: frozenset[str] = frozenset(),
) -> NormalizedAttributes:
    """Build attributes for a veto check."""
    return NormalizedAttributes(
        brand=brand,
        brand_recognized=recognized,
        model_number=None,
        model_is_part_number=False,
        spec_words=spec_words,
        numeric_tokens=numbers,
    )


TENTATIVE = MatchResult(matched=True, score=0.9, method="semantic", reason="Semantic score 0.900 >= threshold 0.78")


class TestBrandVeto:
    """Tests for the brand veto."""

    def test_known_brands_conflict(self) -> None:
        """Test that two recognized, different brands are rejected."""
        result = VetoRules("recognized").check_brand(attrs("apple"), attrs("samsung"))

        assert result is not None
        assert not result.matched
        assert result.score == 0.0
        assert result.method == "brand"
        assert "KNOWN brand mismatch" in result.reason

    def test_recognized_policy_ignores_guesses(self) -> None:
        """Test that a first-word guess does not trigger the veto."""
        result = VetoRules("recognized").check_brand(attrs("apple"), attrs("refurbished", recognized=False))
        assert result is None

    def test_any_policy_rejects_guesses(self) -> None:
        """Test that the any policy vetoes unrecognized brands too."""
        result = VetoRules("any").check_brand(attrs("apple"), attrs("refurbished", recognized=False))

        assert result is not None
        assert result.method == "brand"
        assert result.reason.startswith("Brand mismatch")

    def test_same_or_missing_brand(self) -> None:
        """Test that equal or missing brands pass."""
        rules = VetoRules("any")
        assert rules.check_brand(attrs("apple"), attrs("apple")) is None
        assert rules.check_brand(attrs(None, recognized=False), attrs("apple")) is None

    def test_invalid_policy(self) -> None:
        """Test that an unknown policy is rejected."""
        with pytest.raises(ConfigError):
            VetoRules("strict")


class TestSpecWordVeto:
    """Tests for the spec word veto."""

    def test_extra_spec_word_rejects(self) -> None:
        """Test that a spec word on one side rejects the pair."""
        result = VetoRules().check_spec_words(attrs(), attrs(spec_words=frozenset({"pro", "max"})), 0.92)

        assert result is not None
        assert result.method == "spec-word-veto"
        assert result.score == 0.92
        assert "max,pro" in result.reason

    def test_equal_spec_words_pass(self) -> None:
        """Test that identical spec words pass."""
        pro = frozenset({"pro"})
        assert VetoRules().check_spec_words(attrs(spec_words=pro), attrs(spec_words=pro), 0.9) is None


class TestNumericVeto:
    """Tests for the numeric veto."""

    def test_different_numbers_reject(self) -> None:
        """Test that differing capacity numbers reject the pair."""
        a = attrs(numbers=frozenset({"15", "128"}))
        b = attrs(numbers=frozenset({"15", "256"}))
        result = VetoRules().check_numbers(a, b, 0.95)

        assert result is not None
        assert result.method == "numeric-veto"
        assert result.reason == "Numeric sets not identical: A has unique [128]; B has unique [256]"

    def test_one_sided_number_rejects(self) -> None:
        """Test that a number present on one side only is enough."""
        result = VetoRules().check_numbers(attrs(numbers=frozenset({"15"})), attrs(), 0.95)

        assert result is not None
        assert result.reason == "Numeric sets not identical: A has unique [15]"

    def test_equal_numbers_pass(self) -> None:
        """Test that identical numeric sets pass."""
        numbers = frozenset({"15", "128"})
        assert VetoRules().check_numbers(attrs(numbers=numbers), attrs(numbers=numbers), 0.9) is None


class TestApply:
    """Tests for running vetoes over a tentative match."""

    def test_spec_word_veto_runs_first(self) -> None:
        """Test that the spec word veto wins over the numeric veto."""
        a = attrs(numbers=frozenset({"15"}))
        b = attrs(spec_words=frozenset({"pro"}), numbers=frozenset({"16"}))
        assert VetoRules().apply(a, b, TENTATIVE).method == "spec-word-veto"

    def test_passes_tentative_through(self) -> None:
        """Test that a clean pair keeps the tentative result."""
        numbers = frozenset({"15"})
        assert VetoRules().apply(attrs(numbers=numbers), attrs(numbers=numbers), TENTATIVE) is TENTATIVE
