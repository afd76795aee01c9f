"""Crawl, search and batch sessions driving the chunk packer."""

from pagewise.sessions.batch import BatchSession
from pagewise.sessions.crawl import CrawlSession
from pagewise.sessions.exceptions import InvalidCursorError, SessionError, SessionFailedError
from pagewise.sessions.models import (
    BatchOutcome,
    CancellationToken,
    CrawlOutcome,
    SearchOutcome,
    SessionConfig,
    SessionOutcome,
    SessionStatus,
)
from pagewise.sessions.search import SearchSession

__all__ = [
    # Sessions
    "CrawlSession",
    "SearchSession",
    "BatchSession",
    # Models
    "SessionConfig",
    "SessionStatus",
    "CancellationToken",
    "SessionOutcome",
    "CrawlOutcome",
    "SearchOutcome",
    "BatchOutcome",
    # Exceptions
    "SessionError",
    "SessionFailedError",
    "InvalidCursorError",
]
