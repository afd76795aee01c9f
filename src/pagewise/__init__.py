"""pagewise - token-budgeted web crawling, search and batch fetching.

Delivers web content to an LLM or analysis pipeline in chunks that never
exceed a caller-defined token budget, with cursors to resume exactly where
delivery stopped.
"""

__version__ = "0.1.0"

from pagewise.config import Settings, get_settings, reload_settings
from pagewise.pagination import Chunk, ChunkPacker, PageRecord, TokenBudget, estimate_tokens
from pagewise.sessions import (
    BatchSession,
    CancellationToken,
    CrawlSession,
    SearchSession,
    SessionConfig,
    SessionStatus,
)

__all__ = [
    "Settings",
    "get_settings",
    "reload_settings",
    "Chunk",
    "ChunkPacker",
    "PageRecord",
    "TokenBudget",
    "estimate_tokens",
    "CrawlSession",
    "SearchSession",
    "BatchSession",
    "SessionConfig",
    "SessionStatus",
    "CancellationToken",
    "__version__",
]
