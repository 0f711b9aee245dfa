"""Text extractor for markdown and plain text resources."""
from __future__ import annotations

from domain.interfaces import TextExtractor


class PlainTextExtractor(TextExtractor):
    """Decode UTF-8 text and normalise line endings to ``\\n``.

    Paragraph and code-fence detection in the chunker relies on ``\\n``.
    """

    def extract(self, source: bytes | str) -> str:
        if isinstance(source, bytes):
            source = source.decode("utf-8-sig", errors="replace")
        return source.replace("\r\n", "\n").replace("\r", "\n")


__all__ = ["PlainTextExtractor"]
