"""Exception hierarchy for price comparison."""


class PriceCompareError(Exception):
    """Base exception for price comparison."""


class ConfigError(PriceCompareError, ValueError):
    """Invalid matcher or vocabulary configuration."""


class ListingFileError(PriceCompareError):
    """Listing file missing, unreadable, or malformed."""


class SemanticScorerError(PriceCompareError):
    """Semantic backend failed in a way it could not report as a verdict."""
