"""Persistent embedding store in SQLite."""
from __future__ import annotations

import json
import logging
import sqlite3
from typing import Sequence

import numpy as np

from domain.entities import Candidate, Chunk, Document
from domain.interfaces import EmbeddingStore
from infrastructure.repositories.sqlite_document_repository import SqliteDocumentRepository
from infrastructure.storage.similarity import cosine_similarities, rank_indices

logger = logging.getLogger(__name__)


class SqliteEmbeddingStore(EmbeddingStore):
    """Stores chunk vectors next to the documents table and ranks by brute force."""

    def __init__(self, *, document_repository: SqliteDocumentRepository) -> None:
        self._document_repository = document_repository
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        return self._document_repository.connect()

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS chunks (
                    chunk_id TEXT PRIMARY KEY,
                    document_id TEXT NOT NULL REFERENCES documents (id) ON DELETE CASCADE,
                    position INTEGER NOT NULL,
                    content TEXT NOT NULL,
                    chunk_size INTEGER NOT NULL,
                    overlap INTEGER NOT NULL,
                    vector TEXT NOT NULL
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_chunks_document_id ON chunks (document_id)")

    def replace_chunks(self, document: Document, chunks: Sequence[Chunk]) -> None:
        _check_ownership(document, chunks)
        conn = self._connect()
        try:
            with conn:
                self._write_chunks(conn, document, chunks)
        finally:
            conn.close()
        logger.debug("Stored %d chunks for document %s", len(chunks), document.id)

    def replace_document(
        self,
        document: Document,
        chunks: Sequence[Chunk],
        *,
        replaces: str | None = None,
    ) -> None:
        _check_ownership(document, chunks)
        conn = self._connect()
        try:
            # one transaction: a failure rolls back the delete and the upsert too
            with conn:
                if replaces and replaces != document.id:
                    conn.execute("DELETE FROM chunks WHERE document_id = ?", (replaces,))
                    conn.execute("DELETE FROM documents WHERE id = ?", (replaces,))
                self._document_repository.upsert(conn, document)
                self._write_chunks(conn, document, chunks)
        finally:
            conn.close()
        logger.debug("Stored document %s with %d chunks", document.id, len(chunks))

    def _write_chunks(self, conn: sqlite3.Connection, document: Document, chunks: Sequence[Chunk]) -> None:
        conn.execute("DELETE FROM chunks WHERE document_id = ?", (document.id,))
        conn.executemany(
            """
            INSERT INTO chunks (
                chunk_id, document_id, position, content, chunk_size, overlap, vector
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    chunk.id,
                    chunk.document_id,
                    chunk.position,
                    chunk.text,
                    chunk.chunk_size,
                    chunk.overlap,
                    json.dumps(list(chunk.embedding)),
                )
                for chunk in chunks
            ],
        )

    def delete(self, document_id: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM chunks WHERE document_id = ?", (document_id,))

    def rank(
        self,
        query_embedding: Sequence[float],
        source: str,
        *,
        similarity_floor: float = 0.7,
        limit: int = 10,
    ) -> list[Candidate]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT c.chunk_id, c.content, c.vector,
                       d.id, d.source, d.url, d.title, d.description, d.content, d.metadata
                FROM chunks AS c
                INNER JOIN documents AS d ON c.document_id = d.id
                WHERE d.source = ?
                ORDER BY d.rowid, c.position
                """,
                (source,),
            ).fetchall()
        if not rows:
            return []

        matrix = np.array([json.loads(row[2]) for row in rows], dtype="float64")
        scores = cosine_similarities(query_embedding, matrix)
        documents: dict[str, Document] = {}
        candidates: list[Candidate] = []
        for idx in rank_indices(scores, similarity_floor, limit):
            row = rows[idx]
            document = documents.get(row[3])
            if document is None:
                document = Document(
                    id=row[3],
                    source=row[4],
                    url=row[5],
                    title=row[6] or "",
                    description=row[7] or "",
                    content=row[8] or "",
                    metadata=json.loads(row[9]),
                )
                documents[document.id] = document
            candidates.append(
                Candidate(
                    chunk_id=row[0],
                    content=row[1],
                    similarity=float(scores[idx]),
                    document=document,
                )
            )
        return candidates


def _check_ownership(document: Document, chunks: Sequence[Chunk]) -> None:
    for chunk in chunks:
        if chunk.document_id != document.id:
            raise ValueError(f"Chunk {chunk.id} does not belong to document {document.id}")


__all__ = ["SqliteEmbeddingStore"]
