"""SQLite repository for resources (documents)."""
from __future__ import annotations

import json
import sqlite3
import uuid
from hashlib import sha256
from pathlib import Path

from domain.entities import Document
from domain.interfaces import DocumentRepository

_COLUMNS = "id, source, url, title, description, content, metadata"


class SqliteDocumentRepository(DocumentRepository):
    """Stores documents in a lightweight SQLite database."""

    def __init__(self, db_path: str | Path = "ragcontext.db") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _ensure_schema(self) -> None:
        with self.connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS schema_version (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    version INTEGER NOT NULL
                )
                """
            )
            conn.execute(
                """
                INSERT OR IGNORE INTO schema_version (id, version) VALUES (1, 1)
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    id TEXT PRIMARY KEY,
                    source TEXT NOT NULL,
                    url TEXT,
                    title TEXT NOT NULL DEFAULT '',
                    description TEXT NOT NULL DEFAULT '',
                    content TEXT NOT NULL,
                    content_hash TEXT,
                    metadata TEXT NOT NULL
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_documents_source ON documents (source)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_documents_url ON documents (url)")

    def add(self, document: Document) -> None:
        with self.connect() as conn:
            self.upsert(conn, document)

    def upsert(self, conn: sqlite3.Connection, document: Document) -> None:
        """Insert or update ``document`` on an open connection; the caller commits."""

        if not document.id:
            document.id = str(uuid.uuid4())
        conn.execute(
            """
            INSERT INTO documents (
                id, source, url, title, description, content, content_hash, metadata
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                source = excluded.source,
                url = excluded.url,
                title = excluded.title,
                description = excluded.description,
                content = excluded.content,
                content_hash = excluded.content_hash,
                metadata = excluded.metadata
            """,
            (
                document.id,
                document.source,
                document.url,
                document.title,
                document.description,
                document.content,
                sha256(document.content.encode("utf-8")).hexdigest(),
                json.dumps(document.metadata),
            ),
        )

    def list(self, source: str | None = None) -> list[Document]:
        with self.connect() as conn:
            if source is None:
                rows = conn.execute(f"SELECT {_COLUMNS} FROM documents ORDER BY rowid").fetchall()
            else:
                rows = conn.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE source = ? ORDER BY rowid",
                    (source,),
                ).fetchall()
        return [self._row_to_document(row) for row in rows]

    def get(self, document_id: str) -> Document | None:
        with self.connect() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM documents WHERE id = ?",
                (document_id,),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_document(row)

    def get_by_url(self, url: str) -> Document | None:
        with self.connect() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM documents WHERE url = ? ORDER BY rowid DESC LIMIT 1",
                (url,),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_document(row)

    def delete(self, document_id: str) -> bool:
        with self.connect() as conn:
            cursor = conn.execute("DELETE FROM documents WHERE id = ?", (document_id,))
            return cursor.rowcount > 0

    @staticmethod
    def _row_to_document(row: tuple) -> Document:
        return Document(
            id=row[0],
            source=row[1],
            url=row[2],
            title=row[3] or "",
            description=row[4] or "",
            content=row[5] or "",
            metadata=json.loads(row[6]),
        )


__all__ = ["SqliteDocumentRepository"]
