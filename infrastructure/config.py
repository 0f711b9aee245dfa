"""Dependency wiring for the retrieval context application."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Literal, Mapping

from application.services.context_assembler import ContextAssembler
from application.settings import RetrievalSettings
from domain.interfaces import DocumentRepository, Embedder, EmbeddingStore
from infrastructure.embedding.hash_embedder import HashEmbedder
from infrastructure.embedding.openai_embedder import OpenAIEmbedder, OpenAIEmbedderConfig
from infrastructure.repositories.in_memory_document_repository import InMemoryDocumentRepository
from infrastructure.repositories.sqlite_document_repository import SqliteDocumentRepository
from infrastructure.storage.in_memory_embedding_store import InMemoryEmbeddingStore
from infrastructure.storage.sqlite_embedding_store import SqliteEmbeddingStore


EmbedderName = Literal["hash", "sentence_transformers", "openai"]
StoreName = Literal["memory", "sqlite"]

_ENV_PREFIX = "RAGCONTEXT_"


@dataclass(slots=True)
class Container:
    """Simple container bundling concrete infrastructure implementations."""

    embedder: Embedder
    document_repository: DocumentRepository
    embedding_store: EmbeddingStore
    assembler: ContextAssembler
    settings: RetrievalSettings


@dataclass(slots=True)
class ContainerConfig:
    """Configuration for selecting the embedder and the storage backend."""

    embedder: EmbedderName = "sentence_transformers"
    embedding_store: StoreName = "sqlite"
    db_path: str | Path = "ragcontext.db"
    embedding_model: str | None = None
    openai_api_key: str | None = None
    settings: RetrievalSettings = field(default_factory=RetrievalSettings)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ContainerConfig":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            embedder=env.get(f"{_ENV_PREFIX}EMBEDDER", defaults.embedder),  # type: ignore[arg-type]
            embedding_store=env.get(f"{_ENV_PREFIX}EMBEDDING_STORE", defaults.embedding_store),  # type: ignore[arg-type]
            db_path=env.get(f"{_ENV_PREFIX}DB_PATH", str(defaults.db_path)),
            embedding_model=env.get(f"{_ENV_PREFIX}EMBEDDING_MODEL") or None,
            openai_api_key=env.get("OPENAI_API_KEY") or None,
            settings=RetrievalSettings.from_env(env),
        )


def _build_hash(cfg: ContainerConfig) -> Embedder:
    return HashEmbedder()


def _build_sentence_transformers(cfg: ContainerConfig) -> Embedder:
    # torch is heavy; only import it when this embedder is selected
    from infrastructure.embedding.sentence_transformers_embedder import (  # noqa: PLC0415
        SentenceTransformersConfig,
        SentenceTransformersEmbedder,
    )

    st_config = SentenceTransformersConfig()
    if cfg.embedding_model:
        st_config.model_name = cfg.embedding_model
    return SentenceTransformersEmbedder(st_config)


def _build_openai(cfg: ContainerConfig) -> Embedder:
    openai_config = OpenAIEmbedderConfig(api_key=cfg.openai_api_key)
    if cfg.embedding_model:
        openai_config.model = cfg.embedding_model
    return OpenAIEmbedder(openai_config)


_EMBEDDER_FACTORIES: dict[str, Callable[[ContainerConfig], Embedder]] = {
    "hash": _build_hash,
    "sentence_transformers": _build_sentence_transformers,
    "openai": _build_openai,
}

_STORES: tuple[str, ...] = ("memory", "sqlite")


def build_default_container(config: ContainerConfig | None = None) -> Container:
    """Instantiate the default infrastructure stack."""

    cfg = config or ContainerConfig()
    try:
        factory = _EMBEDDER_FACTORIES[cfg.embedder]
    except KeyError as exc:
        raise ValueError(f"Unknown embedder '{cfg.embedder}'") from exc
    if cfg.embedding_store not in _STORES:
        raise ValueError(f"Unknown embedding store '{cfg.embedding_store}'")

    embedder = factory(cfg)
    document_repository: DocumentRepository
    embedding_store: EmbeddingStore
    # the store writes documents through this repository
    if cfg.embedding_store == "sqlite":
        sqlite_repository = SqliteDocumentRepository(db_path=cfg.db_path)
        document_repository = sqlite_repository
        embedding_store = SqliteEmbeddingStore(document_repository=sqlite_repository)
    else:
        memory_repository = InMemoryDocumentRepository()
        document_repository = memory_repository
        embedding_store = InMemoryEmbeddingStore(memory_repository)

    return Container(
        embedder=embedder,
        document_repository=document_repository,
        embedding_store=embedding_store,
        assembler=ContextAssembler(cfg.settings),
        settings=cfg.settings,
    )


__all__ = ["Container", "ContainerConfig", "build_default_container"]
