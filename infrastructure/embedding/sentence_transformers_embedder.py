"""Embedder backed by a local sentence-transformers model."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sentence_transformers import SentenceTransformer

from domain.interfaces import Embedder

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SentenceTransformersConfig:
    model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    device: str = "cpu"
    normalize_embeddings: bool = True
    prefix: str | None = None


class SentenceTransformersEmbedder(Embedder):
    """Encode one text at a time with a sentence-transformers model."""

    def __init__(self, config: SentenceTransformersConfig | None = None) -> None:
        self._config = config or SentenceTransformersConfig()
        logger.info("Loading sentence-transformers model: %s", self._config.model_name)
        self._model = SentenceTransformer(self._config.model_name, device=self._config.device)
        self._dimension = int(self._model.get_sentence_embedding_dimension())

    @property
    def model_id(self) -> str:
        return self._config.model_name

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed(self, text: str) -> list[float]:
        if self._config.prefix:
            text = f"{self._config.prefix}{text}"
        logger.debug("Encoding %d characters with %s", len(text), self._config.model_name)
        embeddings = self._model.encode(
            [text],
            batch_size=1,
            normalize_embeddings=self._config.normalize_embeddings,
            show_progress_bar=False,
        )
        return embeddings[0].tolist()


__all__ = ["SentenceTransformersEmbedder", "SentenceTransformersConfig"]
