"""Token estimation, truncation and chunk packing."""

from pagewise.pagination.estimator import (
    HeuristicTokenEstimator,
    TokenEstimator,
    default_estimator,
    estimate_tokens,
)
from pagewise.pagination.models import Chunk, PageRecord, PageStatus, TokenBudget
from pagewise.pagination.packer import ChunkPacker
from pagewise.pagination.truncator import TRUNCATION_MARKER, truncate

__all__ = [
    # Estimation
    "TokenEstimator",
    "HeuristicTokenEstimator",
    "default_estimator",
    "estimate_tokens",
    # Truncation
    "truncate",
    "TRUNCATION_MARKER",
    # Packing
    "ChunkPacker",
    # Models
    "Chunk",
    "PageRecord",
    "PageStatus",
    "TokenBudget",
]
