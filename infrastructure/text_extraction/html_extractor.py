"""HTML extractor that keeps block elements as separate paragraphs."""
from __future__ import annotations

import re
from html.parser import HTMLParser

from domain.interfaces import TextExtractor

_BLOCK_TAGS = {
    "p", "div", "section", "article", "header", "footer", "li", "ul", "ol",
    "h1", "h2", "h3", "h4", "h5", "h6", "pre", "blockquote", "table", "tr", "br",
}
_SKIPPED_TAGS = {"script", "style", "noscript", "template"}
_SPACES_RE = re.compile(r"[ \t\r\f\v]+")


class _CollectingParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__()
        self._blocks: list[str] = []
        self._current: list[str] = []
        self._skip_depth = 0
        self._pre_depth = 0

    def handle_starttag(self, tag: str, attrs) -> None:
        if tag in _SKIPPED_TAGS:
            self._skip_depth += 1
        elif self._pre_depth and tag != "pre":
            if tag == "br":
                self._current.append("\n")
        elif tag in _BLOCK_TAGS:
            self._flush()
            if tag == "pre":
                self._pre_depth += 1
                self._current.append("```\n")

    def handle_endtag(self, tag: str) -> None:
        if tag in _SKIPPED_TAGS:
            self._skip_depth = max(self._skip_depth - 1, 0)
        elif self._pre_depth and tag != "pre":
            return
        elif tag in _BLOCK_TAGS:
            if tag == "pre" and self._pre_depth:
                self._pre_depth -= 1
                self._current.append("\n```")
            self._flush()

    def handle_data(self, data: str) -> None:
        if self._skip_depth:
            return
        if self._pre_depth:
            self._current.append(data)
        else:
            self._current.append(_SPACES_RE.sub(" ", data.replace("\n", " ")))

    def _flush(self) -> None:
        block = "".join(self._current).strip()
        self._current.clear()
        if block:
            self._blocks.append(block)

    def get_text(self) -> str:
        self._flush()
        text = "\n\n".join(self._blocks)
        self._blocks.clear()
        return text


class HtmlExtractor(TextExtractor):
    """Strip tags; block elements become blank-line separated paragraphs and
    ``<pre>`` blocks become fenced code so the chunker can break around them."""

    def extract(self, source: bytes | str) -> str:
        if isinstance(source, bytes):
            raw = source.decode("utf-8", errors="replace")
        else:
            raw = source
        parser = _CollectingParser()
        parser.feed(raw)
        parser.close()
        return parser.get_text()


__all__ = ["HtmlExtractor"]
