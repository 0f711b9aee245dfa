"""Chunk splitter that prefers code-fence, paragraph and sentence boundaries."""
from __future__ import annotations

from application.settings import BREAKPOINT_MIN_FRACTION, DEFAULT_CHUNK_SIZE, DEFAULT_OVERLAP

CODE_FENCE = "```"
PARAGRAPH_BREAK = "\n\n"
SENTENCE_BREAK = ". "


def generate_chunks(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_OVERLAP,
    *,
    min_fraction: float = BREAKPOINT_MIN_FRACTION,
) -> list[str]:
    """Split ``text`` into trimmed chunks of at most ``chunk_size`` characters.

    Each window is cut at the last code fence, blank line or sentence end that
    lies past ``min_fraction`` of the window, in that order of preference.
    ``overlap`` is accepted for bookkeeping only: the cursor always resumes at
    the previous breakpoint, so chunks never share text.
    """

    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise ValueError(f"overlap must be non-negative, got {overlap}")

    chunks: list[str] = []
    start = 0
    length = len(text)
    while start < length:
        end = start + chunk_size
        if end >= length:
            tail = text[start:].strip()
            if tail:
                chunks.append(tail)
            break

        end = start + _breakpoint(text[start:end], chunk_size * min_fraction)
        fragment = text[start:end].strip()
        if fragment:
            chunks.append(fragment)
        start = max(start + 1, end)
    return chunks


def _breakpoint(window: str, min_offset: float) -> int:
    """Return the offset inside ``window`` where the chunk should end."""

    fence = window.rfind(CODE_FENCE)
    if fence > min_offset:
        return fence
    paragraph = window.rfind(PARAGRAPH_BREAK)
    if paragraph > min_offset:
        return paragraph
    sentence = window.rfind(SENTENCE_BREAK)
    if sentence > min_offset:
        # keep the period with its sentence
        return sentence + 1
    return len(window)


__all__ = ["generate_chunks"]
