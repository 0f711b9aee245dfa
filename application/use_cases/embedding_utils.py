"""Helpers that chunk and embed text with an injected embedder."""
from __future__ import annotations

import logging

from application.settings import BREAKPOINT_MIN_FRACTION, DEFAULT_CHUNK_SIZE, DEFAULT_OVERLAP
from domain.entities import ChunkEmbedding
from domain.interfaces import Embedder
from infrastructure.splitting.boundary_splitter import generate_chunks

logger = logging.getLogger(__name__)


def generate_embeddings(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_OVERLAP,
    *,
    embedder: Embedder,
    min_fraction: float = BREAKPOINT_MIN_FRACTION,
) -> list[ChunkEmbedding]:
    """Chunk ``text`` and embed every chunk, one provider call at a time.

    The first failing call propagates and no partial list is returned.
    """

    results: list[ChunkEmbedding] = []
    for chunk in generate_chunks(text, chunk_size, overlap, min_fraction=min_fraction):
        logger.debug("Embedding chunk: %d characters", len(chunk))
        results.append(
            ChunkEmbedding(
                content=chunk,
                embedding=embedder.embed(chunk),
                chunk_size=chunk_size,
                overlap=overlap,
            )
        )
    return results


def generate_embedding(text: str, *, embedder: Embedder) -> list[float]:
    """Embed a query; literal ``\\n`` escape sequences become spaces first."""

    return embedder.embed(text.replace("\\n", " "))


__all__ = ["generate_embeddings", "generate_embedding"]
