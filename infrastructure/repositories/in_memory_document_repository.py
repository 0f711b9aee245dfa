"""Process-local document repository used with the in-memory embedding store."""
from __future__ import annotations

import threading
import uuid

from domain.entities import Document
from domain.interfaces import DocumentRepository


class InMemoryDocumentRepository(DocumentRepository):
    """Dict of documents in insertion order, guarded by a re-entrant lock.

    :class:`InMemoryEmbeddingStore` takes the same lock so a document and its
    chunks change together.
    """

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def add(self, document: Document) -> None:
        if not document.id:
            document.id = str(uuid.uuid4())
        with self._lock:
            self._documents[document.id] = document

    def list(self, source: str | None = None) -> list[Document]:
        with self._lock:
            return [doc for doc in self._documents.values() if source is None or doc.source == source]

    def get(self, document_id: str) -> Document | None:
        with self._lock:
            return self._documents.get(document_id)

    def get_by_url(self, url: str) -> Document | None:
        with self._lock:
            return next((doc for doc in reversed(self._documents.values()) if doc.url == url), None)

    def delete(self, document_id: str) -> bool:
        with self._lock:
            return self._documents.pop(document_id, None) is not None


__all__ = ["InMemoryDocumentRepository"]
