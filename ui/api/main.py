"""FastAPI layer that exposes resource ingestion and context retrieval."""
from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException, Query as FastAPIQuery, Response
from pydantic import BaseModel, Field

from application.use_cases.ingest_documents import delete_document, ingest_document
from application.use_cases.search import retrieve_context
from domain.entities import Document
from infrastructure.config import Container, ContainerConfig, build_default_container
from ui.logging_utils import setup_logging

logger = logging.getLogger(__name__)

app = FastAPI(title="RAG Context API")


@lru_cache(maxsize=1)
def get_container() -> Container:
    setup_logging()
    return build_default_container(ContainerConfig.from_env())


class ResourcePayload(BaseModel):
    id: str | None = None
    source: str
    content: str
    title: str = ""
    description: str = ""
    url: str | None = None


class ResourceSummary(BaseModel):
    id: str
    source: str
    title: str
    description: str
    url: str | None = None
    length: int


class IngestResponse(BaseModel):
    id: str
    chunks: int


class ContextEntryPayload(BaseModel):
    id: str
    title: str
    description: str
    content: str
    contentSource: str


class ContextResponse(BaseModel):
    query: str
    source: str
    results: list[ContextEntryPayload] = Field(default_factory=list)
    failure: str | None = None


@app.post("/resources", response_model=IngestResponse)
def ingest_endpoint(payload: ResourcePayload, container: Container = Depends(get_container)) -> IngestResponse:
    document = Document(
        id=payload.id or "",
        source=payload.source,
        content=payload.content,
        title=payload.title,
        description=payload.description,
        url=payload.url,
    )
    try:
        chunks = ingest_document(
            document,
            embedder=container.embedder,
            document_repository=container.document_repository,
            embedding_store=container.embedding_store,
            settings=container.settings,
        )
    except Exception as exc:
        logger.exception("Ingestion of resource %s failed", payload.title or payload.id)
        raise HTTPException(status_code=502, detail=f"Ingestion failed: {exc}") from exc
    return IngestResponse(id=document.id, chunks=len(chunks))


@app.get("/resources", response_model=list[ResourceSummary])
def resources_endpoint(
    source: str | None = None,
    container: Container = Depends(get_container),
) -> list[ResourceSummary]:
    return [
        ResourceSummary(
            id=doc.id,
            source=doc.source,
            title=doc.title,
            description=doc.description,
            url=doc.url,
            length=len(doc.content),
        )
        for doc in container.document_repository.list(source)
    ]


@app.delete("/resources/{resource_id}", status_code=204)
def delete_endpoint(resource_id: str, container: Container = Depends(get_container)) -> Response:
    deleted = delete_document(
        resource_id,
        document_repository=container.document_repository,
        embedding_store=container.embedding_store,
    )
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Unknown resource '{resource_id}'")
    return Response(status_code=204)


@app.get("/context", response_model=ContextResponse)
def context_endpoint(
    q: str = FastAPIQuery(..., description="User query"),
    source: str = FastAPIQuery(..., description="Source tag to search in"),
    container: Container = Depends(get_container),
) -> ContextResponse:
    outcome = retrieve_context(
        q,
        source,
        embedder=container.embedder,
        embedding_store=container.embedding_store,
        assembler=container.assembler,
        settings=container.settings,
    )
    return ContextResponse(
        query=q,
        source=source,
        results=[ContextEntryPayload(**entry.to_dict()) for entry in outcome.entries],
        failure=outcome.failure.value if outcome.failure else None,
    )
