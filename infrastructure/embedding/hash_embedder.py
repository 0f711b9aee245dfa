"""Lightweight embedder based on signed feature hashing of words."""
from __future__ import annotations

import hashlib
import math
import re

from domain.interfaces import Embedder

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


class HashEmbedder(Embedder):
    """Deterministic hash-based embedder useful for demos/tests.

    Texts sharing vocabulary get similar vectors, which is enough to exercise
    ranking without a model download or network access.
    """

    def __init__(self, dimension: int = 256) -> None:
        if dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}")
        self._dimension = dimension
        self._model_id = f"hash-words-{dimension}"

    @property
    def model_id(self) -> str:
        return self._model_id

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed(self, text: str) -> list[float]:
        vector = [0.0] * self._dimension
        for token in _TOKEN_RE.findall(text.lower()):
            digest = hashlib.sha256(token.encode("utf-8")).digest()
            bucket = int.from_bytes(digest[:4], "big") % self._dimension
            sign = 1.0 if digest[4] & 1 else -1.0
            vector[bucket] += sign
        norm = math.sqrt(sum(value * value for value in vector)) or 1.0
        return [value / norm for value in vector]


__all__ = ["HashEmbedder"]
