"""Configuration, status and outcome models for sessions."""

import asyncio
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from pagewise.backends.base import FetchOptions
from pagewise.pagination.models import Chunk, PageRecord, TokenBudget
from pagewise.sessions.exceptions import SessionFailedError


class SessionStatus(str, Enum):
    """Lifecycle state of a session."""

    IDLE = "idle"
    MAPPING = "mapping"
    SEARCHING = "searching"
    FETCHING = "fetching"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.COMPLETED, SessionStatus.FAILED, SessionStatus.CANCELLED)

    def __str__(self) -> str:
        """String representation of session status."""
        return self.value


class SessionConfig(BaseModel):
    """Static configuration for one session, fixed at construction."""

    model_config = ConfigDict(frozen=True)

    budget: TokenBudget
    max_pages: int = Field(default=50, ge=1, description="Page limit passed to the mapper")
    crawl_depth: int = Field(default=2, ge=0, description="Link depth for mappers that follow links")
    max_search_results: int = Field(default=10, ge=1, description="Default search result limit")
    request_delay: float = Field(
        default=0.5,
        ge=0.0,
        description="Politeness delay between consecutive fetch calls, in seconds",
    )
    fetch_options: FetchOptions = Field(default_factory=FetchOptions)


class CancellationToken:
    """Cooperative cancellation signal checked by sessions between fetches.

    Cancelling never interrupts an in-flight fetch; the session notices on
    its next iteration, flushes what it has and reports ``cancelled``.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        """Block until cancellation is requested."""
        await self._event.wait()

    def __repr__(self) -> str:
        return f"<CancellationToken cancelled={self.cancelled}>"


class SessionOutcome(BaseModel):
    """Fields shared by every session result."""

    kind: ClassVar[str] = "session"

    status: SessionStatus
    failed_urls: list[str] = Field(
        default_factory=list,
        description="URLs whose fetch failed and were skipped, in input order",
    )
    pages_fetched: int = Field(
        default=0,
        ge=0,
        description="Successful fetches, including a page fetched past the chunk boundary and left for the next call",
    )
    error: str | None = Field(default=None, description="Cause of a failed session")
    elapsed_s: float = Field(default=0.0, ge=0.0)

    @property
    def failed_count(self) -> int:
        return len(self.failed_urls)

    @property
    def is_complete(self) -> bool:
        """True when the session finished normally with no skipped pages."""
        return self.status == SessionStatus.COMPLETED and not self.failed_urls

    def raise_for_status(self) -> None:
        """Raise SessionFailedError if the session failed."""
        if self.status == SessionStatus.FAILED:
            raise SessionFailedError(self.kind, self.error)

    def summary(self) -> dict[str, object]:
        """Status fields in the camelCase shape used by the tool surface."""
        summary: dict[str, object] = {
            "status": self.status.value,
            "pagesFetched": self.pages_fetched,
            "failedCount": self.failed_count,
            "failedUrls": list(self.failed_urls),
        }
        if self.error:
            summary["error"] = self.error
        return summary


class CrawlOutcome(SessionOutcome):
    """Result of a crawl: every chunk, in emission order."""

    chunks: list[Chunk] = Field(default_factory=list)

    kind: ClassVar[str] = "crawl"

    @property
    def total_tokens(self) -> int:
        return sum(chunk.total_tokens for chunk in self.chunks)

    @property
    def pages(self) -> list[PageRecord]:
        return [page for chunk in self.chunks for page in chunk.pages]

    def to_output(self) -> list[dict[str, object]]:
        return [chunk.to_output() for chunk in self.chunks]


class SearchOutcome(SessionOutcome):
    """Result of a search: the first chunk only."""

    query: str
    chunk: Chunk = Field(default_factory=Chunk.empty)

    kind: ClassVar[str] = "search"

    def to_output(self) -> dict[str, object]:
        return self.chunk.to_output()


class BatchOutcome(SessionOutcome):
    """Result of a batch fetch: the first chunk only."""

    chunk: Chunk = Field(default_factory=Chunk.empty)

    kind: ClassVar[str] = "batch"

    def to_output(self) -> dict[str, object]:
        return self.chunk.to_output()
