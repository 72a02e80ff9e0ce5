"""Semantic scorer backed by a hosted sentence-similarity API."""

import logging
import os
from typing import Any

import httpx

from pricecompare.errors import SemanticScorerError
from pricecompare.semantic.base import SemanticResult, SemanticScorer

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api-inference.huggingface.co/models/sentence-transformers/all-MiniLM-L6-v2"


class RemoteSemanticScorer(SemanticScorer):
    """Calls a Hugging Face style sentence-similarity endpoint."""

    NAME = "api"

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        token_env: str = "HF_API_TOKEN",
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
        token: str | None = None,
    ):
        """Initialize remote scorer.

        Args:
            api_url: Endpoint accepting ``{"inputs": {"source_sentence", "sentences"}}``.
            token_env: Environment variable holding the bearer token.
            timeout: Request timeout in seconds.
            client: Shared HTTP client. A short-lived one is opened per call if None.
            token: Explicit token, overrides the environment variable.
        """
        self.api_url = api_url
        self.token_env = token_env
        self.timeout = timeout
        self.client = client
        self._token = token

    @property
    def token(self) -> str | None:
        """Bearer token from the constructor or the environment."""
        return self._token or os.environ.get(self.token_env) or None

    async def check_similarity(self, title_a: str, title_b: str, threshold: float) -> SemanticResult:
        """Score two titles through the hosted model.

        Raises:
            SemanticScorerError: If the API answers with an unexpected payload.
        """
        token = self.token
        if not token:
            logger.error(f"{self.token_env} is not set, semantic API unavailable")
            return SemanticResult(matched=False, score=0.0, reason="API key not configured.", error=True)

        headers = {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}
        payload = {"inputs": {"source_sentence": title_a, "sentences": [title_b]}}

        try:
            if self.client is not None:
                response = await self.client.post(self.api_url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Error calling semantic API: {type(e).__name__}: {e}")
            return SemanticResult(matched=False, score=0.0, reason=f"API call failed: {e}", error=True)

        if response.status_code == 503:
            return SemanticResult(
                matched=False,
                score=0.0,
                reason="API model is loading. Try again in a moment.",
                error=True,
            )
        if response.is_error:
            logger.error(f"Semantic API returned status {response.status_code}")
            return SemanticResult(
                matched=False,
                score=0.0,
                reason=f"API call failed: request failed with status {response.status_code}",
                error=True,
            )

        return self._verdict(self._parse_score(response), threshold)

    def _parse_score(self, response: httpx.Response) -> float:
        """Extract the single similarity score from the API response."""
        try:
            data: Any = response.json()
        except ValueError as e:
            raise SemanticScorerError(f"API returned invalid JSON: {e}") from e

        # One score per sentence sent; only one was sent
        if isinstance(data, list) and data and isinstance(data[0], (int, float)) and not isinstance(data[0], bool):
            return float(data[0])
        raise SemanticScorerError(f"Unexpected API response: {data!r}")
