"""Budgeted assembly of ranked candidates into context entries.

The assembler runs two greedy passes over candidates that arrive sorted by
descending similarity:

* the coverage pass adds the best chunk of each document until the first
  chunk that would overflow the budget;
* the upgrade pass revisits very similar chunks and swaps their entry for the
  whole document, or for a window of the document around the chunk, when the
  budget allows it.

Entries are tracked per document id, so a result never holds two entries for
the same document and the upgrade pass never changes their order.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from application.settings import RetrievalSettings
from domain.entities import Candidate, ContentSource, ContextEntry

logger = logging.getLogger(__name__)

_BLANK_LINES_RE = re.compile(r"\n{2,}")


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


class RetrievalCancelled(Exception):
    """Raised when the caller abandons a retrieval in progress."""


def normalize_blank_lines(text: str) -> str:
    """Collapse runs of consecutive newlines into a single newline."""

    return _BLANK_LINES_RE.sub("\n", text)


def extract_window(full_content: str, chunk: str, context_window: int) -> str | None:
    """Return ``chunk`` with up to ``context_window // 2`` characters on each side.

    ``None`` when the chunk does not occur verbatim in ``full_content``.
    """

    index = full_content.find(chunk)
    if index == -1:
        return None
    half = max(context_window, 0) // 2
    start = max(0, index - half)
    end = min(len(full_content), index + len(chunk) + half)
    return full_content[start:end]


@dataclass(slots=True)
class _Draft:
    id: str
    chunk_id: str
    title: str
    description: str
    content: str
    content_source: ContentSource

    def finalize(self) -> ContextEntry:
        return ContextEntry(
            id=self.id,
            title=self.title,
            description=self.description,
            content=self.content,
            content_source=self.content_source,
        )


class ContextAssembler:
    """Turn ranked candidates into context entries within a content budget."""

    def __init__(self, settings: RetrievalSettings | None = None) -> None:
        self._settings = settings or RetrievalSettings()

    @property
    def settings(self) -> RetrievalSettings:
        return self._settings

    def assemble(
        self,
        candidates: Sequence[Candidate],
        *,
        cancel_event: CancelSignal | None = None,
    ) -> list[ContextEntry]:
        drafts: dict[str, _Draft] = {}
        total = self._coverage_pass(candidates, drafts, cancel_event)
        raise_if_cancelled(cancel_event)
        total = self._upgrade_pass(candidates, drafts, total, cancel_event)
        logger.debug(
            "Assembled %d entries using %d of %d characters",
            len(drafts),
            total,
            self._settings.max_budget,
        )
        return [draft.finalize() for draft in drafts.values()]

    def _coverage_pass(
        self,
        candidates: Iterable[Candidate],
        drafts: dict[str, _Draft],
        cancel_event: CancelSignal | None,
    ) -> int:
        total = 0
        for candidate in candidates:
            raise_if_cancelled(cancel_event)
            document = candidate.document
            if document.id in drafts:
                continue
            if total + len(candidate.content) > self._settings.max_budget:
                break
            drafts[document.id] = _Draft(
                id=candidate.chunk_id,
                chunk_id=candidate.chunk_id,
                title=document.title,
                description=document.description,
                content=candidate.content,
                content_source=ContentSource.EMBEDDING,
            )
            total += len(candidate.content)
        return total

    def _upgrade_pass(
        self,
        candidates: Iterable[Candidate],
        drafts: dict[str, _Draft],
        total: int,
        cancel_event: CancelSignal | None,
    ) -> int:
        budget = self._settings.max_budget
        for candidate in candidates:
            raise_if_cancelled(cancel_event)
            if candidate.similarity < self._settings.upgrade_similarity_floor:
                continue
            draft = drafts.get(candidate.document.id)
            if (
                draft is None
                or draft.chunk_id != candidate.chunk_id
                or draft.content_source is not ContentSource.EMBEDDING
            ):
                continue

            chunk_length = len(draft.content)
            full_content = normalize_blank_lines(candidate.document.content)
            if total - chunk_length + len(full_content) <= budget:
                draft.id = candidate.document.id
                draft.content = full_content
                draft.content_source = ContentSource.RESOURCE
                total += len(full_content) - chunk_length
                logger.debug("Upgraded to full resource for %s", candidate.document.title)
                continue

            if total + chunk_length > budget * self._settings.hybrid_budget_fraction:
                continue
            context_window = int((budget - total) * self._settings.hybrid_window_fraction)
            window = extract_window(full_content, candidate.content, context_window)
            if window is None:
                logger.debug("Chunk %s not found in normalized resource; keeping chunk", candidate.chunk_id)
                continue
            if total - chunk_length + len(window) > budget:
                continue
            draft.content = window
            draft.content_source = ContentSource.HYBRID
            total += len(window) - chunk_length
            logger.debug("Added contextual content for %s", candidate.document.title)
        return total


def raise_if_cancelled(cancel_event: CancelSignal | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise RetrievalCancelled("Retrieval cancelled by caller")


__all__ = [
    "ContextAssembler",
    "RetrievalCancelled",
    "extract_window",
    "normalize_blank_lines",
    "raise_if_cancelled",
]
