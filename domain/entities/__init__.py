"""Domain entities for the retrieval context system."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ContentSource(str, Enum):
    """Provenance of a context entry returned to the caller."""

    EMBEDDING = "embedding"
    RESOURCE = "resource"
    HYBRID = "hybrid"


class RetrievalFailure(str, Enum):
    """Reason a retrieval call degraded to an empty result."""

    EMBEDDING_FAILED = "embedding_failed"
    RANKING_FAILED = "ranking_failed"
    ASSEMBLY_FAILED = "assembly_failed"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class Document:
    """A resource that can be ingested and retrieved by source tag."""

    id: str
    source: str
    content: str
    title: str = ""
    description: str = ""
    url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class Chunk:
    """A bounded slice of a document stored together with its embedding."""

    id: str
    document_id: str
    text: str
    chunk_size: int
    overlap: int
    position: int = 0
    embedding: list[float] = field(default_factory=list)


@dataclass(slots=True)
class ChunkEmbedding:
    """Chunk text paired with its vector, ready to be persisted."""

    content: str
    embedding: list[float]
    chunk_size: int
    overlap: int


@dataclass(slots=True)
class Candidate:
    """A stored chunk scored against a query, with its parent document."""

    chunk_id: str
    content: str
    similarity: float
    document: Document


@dataclass(slots=True)
class ContextEntry:
    """A budget-approved unit of context handed back to the agent."""

    id: str
    title: str
    description: str
    content: str
    content_source: ContentSource

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "contentSource": self.content_source.value,
        }


@dataclass(slots=True)
class RetrievalOutcome:
    """Entries produced by a retrieval call, or the reason there are none."""

    entries: list[ContextEntry] = field(default_factory=list)
    failure: RetrievalFailure | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


__all__ = [
    "ContentSource",
    "RetrievalFailure",
    "Document",
    "Chunk",
    "ChunkEmbedding",
    "Candidate",
    "ContextEntry",
    "RetrievalOutcome",
]
