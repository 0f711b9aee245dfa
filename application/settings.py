"""Tunable constants for chunking, ranking and context assembly."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Mapping

DEFAULT_CHUNK_SIZE = 10000
DEFAULT_OVERLAP = 1000
MAX_BUDGET = 128000
COVERAGE_SIMILARITY_FLOOR = 0.7
UPGRADE_SIMILARITY_FLOOR = 0.85
HYBRID_BUDGET_FRACTION = 0.8
HYBRID_WINDOW_FRACTION = 0.3
RANK_LIMIT = 10
BREAKPOINT_MIN_FRACTION = 0.3

_ENV_PREFIX = "RAGCONTEXT_"


@dataclass(slots=True)
class RetrievalSettings:
    """Settings shared by ingestion and retrieval.

    ``max_budget`` is measured in characters of content and stands in for a
    token count.
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    overlap: int = DEFAULT_OVERLAP
    max_budget: int = MAX_BUDGET
    coverage_similarity_floor: float = COVERAGE_SIMILARITY_FLOOR
    upgrade_similarity_floor: float = UPGRADE_SIMILARITY_FLOOR
    hybrid_budget_fraction: float = HYBRID_BUDGET_FRACTION
    hybrid_window_fraction: float = HYBRID_WINDOW_FRACTION
    rank_limit: int = RANK_LIMIT
    breakpoint_min_fraction: float = BREAKPOINT_MIN_FRACTION

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        # overlap never moves the chunk cursor; no upper bound
        if self.overlap < 0:
            raise ValueError(f"overlap must be non-negative, got {self.overlap}")
        if self.max_budget <= 0:
            raise ValueError(f"max_budget must be positive, got {self.max_budget}")
        if self.rank_limit <= 0:
            raise ValueError(f"rank_limit must be positive, got {self.rank_limit}")
        for name in (
            "coverage_similarity_floor",
            "upgrade_similarity_floor",
            "hybrid_budget_fraction",
            "hybrid_window_fraction",
            "breakpoint_min_fraction",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must lie in [0, 1], got {value}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RetrievalSettings":
        """Build settings, overriding defaults with ``RAGCONTEXT_<FIELD>`` variables."""

        env = os.environ if environ is None else environ
        overrides: dict[str, int | float] = {}
        for item in fields(cls):
            raw = env.get(f"{_ENV_PREFIX}{item.name.upper()}")
            if raw is None or not raw.strip():
                continue
            caster = int if item.type in ("int", int) else float
            try:
                overrides[item.name] = caster(raw)
            except ValueError as exc:
                raise ValueError(
                    f"Invalid value for {_ENV_PREFIX}{item.name.upper()}: {raw!r}"
                ) from exc
        return cls(**overrides)


__all__ = [
    "RetrievalSettings",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_OVERLAP",
    "MAX_BUDGET",
    "COVERAGE_SIMILARITY_FLOOR",
    "UPGRADE_SIMILARITY_FLOOR",
    "HYBRID_BUDGET_FRACTION",
    "HYBRID_WINDOW_FRACTION",
    "RANK_LIMIT",
    "BREAKPOINT_MIN_FRACTION",
]
