"""Abstract interfaces for the retrieval context system."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from domain.entities import Candidate, Chunk, Document


class TextExtractor(ABC):
    """Extracts text from user provided sources (files, URLs, etc.)."""

    @abstractmethod
    def extract(self, source: bytes | str) -> str:
        """Return the textual representation of a source."""


class Embedder(ABC):
    """Turns a single text (chunk or query) into a vector embedding."""

    @property
    @abstractmethod
    def model_id(self) -> str:
        """Return the stable identifier for this embedding model."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimension for this model."""

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Embed one text. Provider failures are raised, never retried."""


class EmbeddingStore(ABC):
    """Persists chunk embeddings and ranks them against a query vector."""

    @abstractmethod
    def replace_chunks(self, document: Document, chunks: Sequence[Chunk]) -> None:
        """Atomically replace every stored chunk of ``document``."""

    @abstractmethod
    def replace_document(
        self,
        document: Document,
        chunks: Sequence[Chunk],
        *,
        replaces: str | None = None,
    ) -> None:
        """Store ``document`` together with exactly ``chunks`` in one unit.

        The document ``replaces`` (another id for the same resource) and its
        chunks are removed in the same unit. Either every change is visible
        afterwards or none is.
        """

    @abstractmethod
    def delete(self, document_id: str) -> None:
        """Drop all chunks belonging to a document."""

    @abstractmethod
    def rank(
        self,
        query_embedding: Sequence[float],
        source: str,
        *,
        similarity_floor: float = 0.7,
        limit: int = 10,
    ) -> list[Candidate]:
        """Return candidates of ``source`` strictly above the floor, best first."""


class DocumentRepository(ABC):
    """Persists documents (resources)."""

    @abstractmethod
    def add(self, document: Document) -> None:
        """Store or replace a document record."""

    @abstractmethod
    def list(self, source: str | None = None) -> list[Document]:
        """Return stored documents, optionally restricted to one source tag."""

    @abstractmethod
    def get(self, document_id: str) -> Document | None:
        """Retrieve a document by id."""

    @abstractmethod
    def get_by_url(self, url: str) -> Document | None:
        """Retrieve the document ingested from ``url``."""

    @abstractmethod
    def delete(self, document_id: str) -> bool:
        """Delete a document, returning whether it existed."""


__all__ = [
    "TextExtractor",
    "Embedder",
    "EmbeddingStore",
    "DocumentRepository",
]
