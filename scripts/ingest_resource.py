"""Ingest local markdown, text or HTML files as resources of a source tag."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from application.use_cases.ingest_documents import ingest_documents
from domain.entities import Document
from domain.interfaces import TextExtractor
from infrastructure.config import ContainerConfig, build_default_container
from infrastructure.text_extraction.html_extractor import HtmlExtractor
from infrastructure.text_extraction.plain_text_extractor import PlainTextExtractor
from ui.logging_utils import setup_logging

logger = logging.getLogger(__name__)

_EXTENSION_EXTRACTORS: dict[str, TextExtractor] = {
    ".md": PlainTextExtractor(),
    ".markdown": PlainTextExtractor(),
    ".txt": PlainTextExtractor(),
    ".html": HtmlExtractor(),
    ".htm": HtmlExtractor(),
}


def load_document(path: Path, *, source: str, title: str | None = None, description: str = "", url: str | None = None) -> Document:
    extractor = _EXTENSION_EXTRACTORS.get(path.suffix.lower())
    if extractor is None:
        raise ValueError(f"Unsupported file type: {path.suffix or path.name}")
    return Document(
        id="",
        source=source,
        content=extractor.extract(path.read_bytes()),
        title=title or path.stem,
        description=description,
        url=url or path.resolve().as_uri(),
        metadata={"path": str(path.resolve())},
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("paths", nargs="+", type=Path, help="Files to ingest.")
    parser.add_argument("--source", required=True, help="Source tag, e.g. figma_docs.")
    parser.add_argument("--title", help="Resource title (only with a single file; defaults to the file name).")
    parser.add_argument("--description", default="", help="Resource description.")
    parser.add_argument(
        "--url",
        help="Canonical URL (only with a single file). A resource already ingested from it is replaced.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging()
    if len(args.paths) > 1 and (args.title or args.url):
        logger.error("--title and --url can only be used with a single file")
        return 2
    container = build_default_container(ContainerConfig.from_env())

    documents: list[Document] = []
    for path in args.paths:
        try:
            documents.append(
                load_document(
                    path,
                    source=args.source,
                    title=args.title,
                    description=args.description,
                    url=args.url,
                )
            )
        except (OSError, ValueError) as exc:
            logger.error("Skipping %s: %s", path, exc)

    report = ingest_documents(
        documents,
        embedder=container.embedder,
        document_repository=container.document_repository,
        embedding_store=container.embedding_store,
        settings=container.settings,
    )
    logger.info(
        "Ingested %d of %d resources (%d chunks) into %s",
        report.indexed,
        len(args.paths),
        report.chunks,
        args.source,
    )
    for error in report.errors:
        logger.error("Failed %s: %s", error.document_id, error.reason)
    return 0 if report.indexed == len(args.paths) else 1


if __name__ == "__main__":
    sys.exit(main())
