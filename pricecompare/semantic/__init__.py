"""Semantic similarity backends for ambiguous title pairs."""

from pricecompare.config import MatcherConfig
from pricecompare.semantic.base import SemanticResult, SemanticScorer
from pricecompare.semantic.local import LocalSemanticScorer
from pricecompare.semantic.remote import RemoteSemanticScorer


def create_semantic_scorer(config: MatcherConfig) -> SemanticScorer | None:
    """Build the backend selected by ``config.semantic_backend``.

    Args:
        config: Matcher configuration.

    Returns:
        Scorer instance, or None when the backend is "none".
    """
    if config.semantic_backend == "api":
        return RemoteSemanticScorer(
            api_url=config.api_url,
            token_env=config.api_token_env,
            timeout=config.api_timeout,
        )
    if config.semantic_backend == "local":
        return LocalSemanticScorer(model_name=config.semantic_model)
    return None


__all__ = [
    "SemanticScorer",
    "SemanticResult",
    "RemoteSemanticScorer",
    "LocalSemanticScorer",
    "create_semantic_scorer",
]
