"""In-memory embedding store for demos and tests."""
from __future__ import annotations

from typing import Sequence

import numpy as np

from domain.entities import Candidate, Chunk, Document
from domain.interfaces import EmbeddingStore
from infrastructure.repositories.in_memory_document_repository import InMemoryDocumentRepository
from infrastructure.storage.similarity import cosine_similarities, rank_indices


class InMemoryEmbeddingStore(EmbeddingStore):
    """Keeps chunks per document id and ranks by brute force.

    Ranking only sees chunks whose document is in ``document_repository``.
    Every read and write holds the repository lock, so the store can be shared
    by the API's worker threads.
    """

    def __init__(self, document_repository: InMemoryDocumentRepository | None = None) -> None:
        self._documents = document_repository or InMemoryDocumentRepository()
        self._chunks: dict[str, list[Chunk]] = {}

    @property
    def document_repository(self) -> InMemoryDocumentRepository:
        return self._documents

    def replace_chunks(self, document: Document, chunks: Sequence[Chunk]) -> None:
        _check_ownership(document, chunks)
        with self._documents.lock:
            self._chunks[document.id] = list(chunks)

    def replace_document(
        self,
        document: Document,
        chunks: Sequence[Chunk],
        *,
        replaces: str | None = None,
    ) -> None:
        _check_ownership(document, chunks)
        with self._documents.lock:
            if replaces and replaces != document.id:
                self._documents.delete(replaces)
                self._chunks.pop(replaces, None)
            self._documents.add(document)
            self._chunks[document.id] = list(chunks)

    def delete(self, document_id: str) -> None:
        with self._documents.lock:
            self._chunks.pop(document_id, None)

    def rank(
        self,
        query_embedding: Sequence[float],
        source: str,
        *,
        similarity_floor: float = 0.7,
        limit: int = 10,
    ) -> list[Candidate]:
        with self._documents.lock:
            rows: list[tuple[Document, Chunk]] = [
                (document, chunk)
                for document in self._documents.list(source)
                for chunk in self._chunks.get(document.id, ())
            ]
        if not rows:
            return []
        matrix = np.array([chunk.embedding for _document, chunk in rows], dtype="float64")
        scores = cosine_similarities(query_embedding, matrix)
        return [
            Candidate(
                chunk_id=rows[idx][1].id,
                content=rows[idx][1].text,
                similarity=float(scores[idx]),
                document=rows[idx][0],
            )
            for idx in rank_indices(scores, similarity_floor, limit)
        ]


def _check_ownership(document: Document, chunks: Sequence[Chunk]) -> None:
    for chunk in chunks:
        if chunk.document_id != document.id:
            raise ValueError(f"Chunk {chunk.id} does not belong to document {document.id}")


__all__ = ["InMemoryEmbeddingStore"]
