"""Logging setup for the API and the command line scripts."""
from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
# provider clients log every request at INFO
_CHATTY_LOGGERS = ("urllib3", "httpx", "sentence_transformers")


def setup_logging(level: str | None = None, log_file: str | None = None) -> None:
    """Configure root logging once per process.

    ``level`` and ``log_file`` fall back to ``RAGCONTEXT_LOG_LEVEL`` and
    ``RAGCONTEXT_LOG_FILE``. An empty log file name logs to the console only.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level_name = (level or os.getenv("RAGCONTEXT_LOG_LEVEL", "INFO")).upper()
    resolved_level = getattr(logging, level_name, logging.INFO)
    if log_file is None:
        log_file = os.getenv("RAGCONTEXT_LOG_FILE", "ragcontext.log")

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    root_logger.setLevel(resolved_level)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved_level, logging.WARNING))


__all__ = ["setup_logging", "LOG_FORMAT"]
