"""Cosine similarity helpers shared by the brute-force stores."""
from __future__ import annotations

from typing import Sequence

import numpy as np


def cosine_similarities(query_embedding: Sequence[float], vectors: np.ndarray) -> np.ndarray:
    """Return ``1 - cosine distance`` between the query and each row of ``vectors``."""

    if vectors.size == 0:
        return np.zeros(0, dtype="float64")
    query = np.asarray(query_embedding, dtype="float64")
    if vectors.ndim != 2 or vectors.shape[1] != query.shape[0]:
        raise ValueError(
            f"Query has {query.shape[0]} dimensions, stored vectors have shape {vectors.shape}."
        )
    norms = np.linalg.norm(vectors, axis=1)
    norms[norms == 0] = 1.0
    query_norm = np.linalg.norm(query) or 1.0
    return (vectors @ query) / (norms * query_norm)


def rank_indices(scores: np.ndarray, similarity_floor: float, limit: int) -> list[int]:
    """Indices of scores strictly above the floor, best first, ties in stored order."""

    eligible = np.flatnonzero(scores > similarity_floor)
    if eligible.size == 0:
        return []
    order = np.argsort(-scores[eligible], kind="stable")
    return eligible[order][:limit].tolist()


__all__ = ["cosine_similarities", "rank_indices"]
