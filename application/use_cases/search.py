"""Use case that retrieves budgeted context for a query."""
from __future__ import annotations

import logging

from application.services.context_assembler import (
    CancelSignal,
    ContextAssembler,
    RetrievalCancelled,
    raise_if_cancelled,
)
from application.settings import RetrievalSettings
from application.use_cases.embedding_utils import generate_embedding
from domain.entities import ContextEntry, RetrievalFailure, RetrievalOutcome
from domain.interfaces import Embedder, EmbeddingStore

logger = logging.getLogger(__name__)


def retrieve_context(
    query_text: str,
    source: str,
    *,
    embedder: Embedder,
    embedding_store: EmbeddingStore,
    assembler: ContextAssembler | None = None,
    settings: RetrievalSettings | None = None,
    cancel_event: CancelSignal | None = None,
) -> RetrievalOutcome:
    """Embed the query, rank chunks of ``source`` and assemble context entries.

    Never raises: a failing stage yields empty entries and the matching
    :class:`RetrievalFailure`, so callers can tell "nothing relevant" apart
    from "provider or storage down".
    """

    cfg = settings or (assembler.settings if assembler is not None else RetrievalSettings())
    assembler = assembler or ContextAssembler(cfg)

    try:
        raise_if_cancelled(cancel_event)
        query_embedding = generate_embedding(query_text, embedder=embedder)
    except RetrievalCancelled:
        return _cancelled()
    except Exception as exc:
        logger.exception("Embedding the query failed")
        return RetrievalOutcome(failure=RetrievalFailure.EMBEDDING_FAILED, error=str(exc))

    try:
        raise_if_cancelled(cancel_event)
        candidates = embedding_store.rank(
            query_embedding,
            source,
            similarity_floor=cfg.coverage_similarity_floor,
            limit=cfg.rank_limit,
        )
    except RetrievalCancelled:
        return _cancelled()
    except Exception as exc:
        logger.exception("Ranking chunks for source %s failed", source)
        return RetrievalOutcome(failure=RetrievalFailure.RANKING_FAILED, error=str(exc))

    try:
        entries = assembler.assemble(candidates, cancel_event=cancel_event)
    except RetrievalCancelled:
        return _cancelled()
    except Exception as exc:
        logger.exception("Assembling context failed")
        return RetrievalOutcome(failure=RetrievalFailure.ASSEMBLY_FAILED, error=str(exc))

    logger.debug(
        "Query matched %d candidates in %s, returning %d entries",
        len(candidates),
        source,
        len(entries),
    )
    return RetrievalOutcome(entries=entries)


def find_relevant_content(
    query_text: str,
    source: str,
    *,
    embedder: Embedder,
    embedding_store: EmbeddingStore,
    assembler: ContextAssembler | None = None,
    settings: RetrievalSettings | None = None,
    cancel_event: CancelSignal | None = None,
) -> list[ContextEntry]:
    """Return context entries for the query, or an empty list on any failure."""

    outcome = retrieve_context(
        query_text,
        source,
        embedder=embedder,
        embedding_store=embedding_store,
        assembler=assembler,
        settings=settings,
        cancel_event=cancel_event,
    )
    return outcome.entries


def _cancelled() -> RetrievalOutcome:
    logger.info("Retrieval cancelled by caller")
    return RetrievalOutcome(failure=RetrievalFailure.CANCELLED, error="cancelled")


__all__ = ["retrieve_context", "find_relevant_content"]
