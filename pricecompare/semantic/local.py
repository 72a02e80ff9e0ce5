"""Semantic scorer running a sentence-transformers model on this machine."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from pricecompare.semantic.base import SemanticResult, SemanticScorer

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "sentence-transformers/all-MiniLM-L6-v2"


def _load_sentence_transformer(model_name: str) -> Any:
    from sentence_transformers import SentenceTransformer

    return SentenceTransformer(model_name)


def _cosine_similarity(vector_a: Any, vector_b: Any) -> float:
    from sentence_transformers import util

    return float(util.cos_sim(vector_a, vector_b).item())


class LocalSemanticScorer(SemanticScorer):
    """Embeds titles with a local model and compares them by cosine similarity.

    The model is loaded once, on first use, by ``get_model``.
    """

    NAME = "local"

    def __init__(
        self,
        model_name: str = DEFAULT_MODEL,
        model_loader: Callable[[str], Any] | None = None,
    ):
        """Initialize local scorer.

        Args:
            model_name: sentence-transformers model id.
            model_loader: Builds the model from its name. Defaults to SentenceTransformer.
        """
        self.model_name = model_name
        self._model_loader = model_loader or _load_sentence_transformer
        self._model: Any = None
        self._lock: asyncio.Lock | None = None

    @property
    def is_loaded(self) -> bool:
        """Whether the model is already in memory."""
        return self._model is not None

    async def get_model(self) -> Any:
        """Return the model, loading it on first call.

        Concurrent first calls share one load. A failed load is not memoized.

        Raises:
            Exception: Whatever the loader raises.
        """
        if self._model is not None:
            return self._model
        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            if self._model is None:
                logger.info(f"Loading local semantic model {self.model_name} (happens once)")
                self._model = await asyncio.to_thread(self._model_loader, self.model_name)
                logger.info("Local semantic model loaded")
        return self._model

    async def check_similarity(self, title_a: str, title_b: str, threshold: float) -> SemanticResult:
        """Score two titles with the local model."""
        try:
            model = await self.get_model()
        except Exception as e:
            logger.error(f"Error loading local model: {e}")
            return SemanticResult(matched=False, score=0.0, reason=f"Local model failed to load: {e}", error=True)

        try:
            embeddings = await asyncio.to_thread(
                model.encode,
                [title_a, title_b],
                normalize_embeddings=True,
                show_progress_bar=False,
            )
        except Exception as e:
            logger.error(f"Error during embedding generation: {e}")
            return SemanticResult(matched=False, score=0.0, reason=f"Embedding failed: {e}", error=True)

        score = _cosine_similarity(embeddings[0], embeddings[1])
        return self._verdict(score, threshold)
