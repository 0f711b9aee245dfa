"""Embedder that calls the OpenAI embeddings endpoint."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import requests

from domain.interfaces import Embedder

logger = logging.getLogger(__name__)

_KNOWN_DIMENSIONS = {
    "text-embedding-ada-002": 1536,
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
}


class EmbeddingProviderError(RuntimeError):
    """Raised when the embedding provider cannot produce a vector."""


@dataclass(slots=True)
class OpenAIEmbedderConfig:
    model: str = "text-embedding-ada-002"
    api_key: str | None = None
    url: str = "https://api.openai.com/v1/embeddings"
    timeout: float = 60.0
    dimension: int | None = None


class OpenAIEmbedder(Embedder):
    """One HTTP request per text; errors surface as :class:`EmbeddingProviderError`."""

    def __init__(self, config: OpenAIEmbedderConfig | None = None, session: requests.Session | None = None) -> None:
        self._config = config or OpenAIEmbedderConfig()
        self._session = session or requests.Session()
        dimension = self._config.dimension or _KNOWN_DIMENSIONS.get(self._config.model)
        if dimension is None:
            raise ValueError(f"Unknown dimension for embedding model '{self._config.model}'")
        self._dimension = dimension

    @property
    def model_id(self) -> str:
        return self._config.model

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed(self, text: str) -> list[float]:
        api_key = self._config.api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise EmbeddingProviderError("Missing OpenAI API key.")
        logger.debug("Requesting %s embedding for %d characters", self._config.model, len(text))
        try:
            response = self._session.post(
                self._config.url,
                headers={"Authorization": f"Bearer {api_key}"},
                json={"model": self._config.model, "input": text},
                timeout=self._config.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise EmbeddingProviderError(f"Embedding request failed: {exc}") from exc
        except ValueError as exc:
            raise EmbeddingProviderError("Embedding response is not valid JSON.") from exc

        try:
            embedding = payload["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError) as exc:
            raise EmbeddingProviderError("Embedding response has no vector.") from exc
        if len(embedding) != self._dimension:
            raise EmbeddingProviderError(
                f"Expected {self._dimension} dimensions from {self._config.model}, got {len(embedding)}."
            )
        return [float(value) for value in embedding]


__all__ = ["OpenAIEmbedder", "OpenAIEmbedderConfig", "EmbeddingProviderError"]
