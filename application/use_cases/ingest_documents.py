"""Use cases for ingesting resources into the system."""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Iterable

from application.settings import RetrievalSettings
from application.use_cases.embedding_utils import generate_embeddings
from domain.entities import Chunk, Document
from domain.interfaces import DocumentRepository, Embedder, EmbeddingStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestError:
    document_id: str
    reason: str


@dataclass(slots=True)
class IngestReport:
    total: int
    indexed: int
    chunks: int = 0
    errors: list[IngestError] = field(default_factory=list)


def ingest_document(
    document: Document,
    *,
    embedder: Embedder,
    document_repository: DocumentRepository,
    embedding_store: EmbeddingStore,
    settings: RetrievalSettings | None = None,
) -> list[Chunk]:
    """Chunk, embed and store one document, replacing any earlier version.

    Every embedding is computed before anything is written, and the document,
    its chunks and the removal of an older resource with the same url are
    stored as one unit. A failure at any step leaves the previous version in
    place.
    """

    cfg = settings or RetrievalSettings()
    if not document.id:
        document.id = str(uuid.uuid4())

    embedded = generate_embeddings(
        document.content,
        cfg.chunk_size,
        cfg.overlap,
        embedder=embedder,
        min_fraction=cfg.breakpoint_min_fraction,
    )
    chunks = [
        Chunk(
            id=str(uuid.uuid4()),
            document_id=document.id,
            text=item.content,
            chunk_size=item.chunk_size,
            overlap=item.overlap,
            position=position,
            embedding=item.embedding,
        )
        for position, item in enumerate(embedded)
    ]

    replaces = None
    if document.url:
        previous = document_repository.get_by_url(document.url)
        if previous is not None and previous.id != document.id:
            logger.info("Replacing resource %s previously ingested from %s", previous.id, document.url)
            replaces = previous.id

    embedding_store.replace_document(document, chunks, replaces=replaces)
    logger.info(
        "Ingested resource %s (%s) with %d chunks",
        document.id,
        document.title or "untitled",
        len(chunks),
    )
    return chunks


def ingest_documents(
    documents: Iterable[Document],
    *,
    embedder: Embedder,
    document_repository: DocumentRepository,
    embedding_store: EmbeddingStore,
    settings: RetrievalSettings | None = None,
) -> IngestReport:
    """Ingest documents one after another, collecting per-document failures."""

    items = list(documents)
    report = IngestReport(total=len(items), indexed=0)
    for document in items:
        try:
            chunks = ingest_document(
                document,
                embedder=embedder,
                document_repository=document_repository,
                embedding_store=embedding_store,
                settings=settings,
            )
        except Exception as exc:
            logger.exception("Failed to ingest resource %s", document.id or document.title)
            report.errors.append(IngestError(document_id=document.id, reason=str(exc)))
            continue
        report.indexed += 1
        report.chunks += len(chunks)
    return report


def delete_document(
    document_id: str,
    *,
    document_repository: DocumentRepository,
    embedding_store: EmbeddingStore,
) -> bool:
    """Remove a document and every chunk stored for it."""

    existed = document_repository.delete(document_id)
    embedding_store.delete(document_id)
    return existed


__all__ = [
    "ingest_document",
    "ingest_documents",
    "delete_document",
    "IngestReport",
    "IngestError",
]
