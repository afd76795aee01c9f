"""Shared fetch-and-pack loop for crawl, search and batch sessions."""

import asyncio
from typing import Any, AsyncIterator, Iterable

from pagewise.backends.base import ContentFetcher
from pagewise.backends.exceptions import BackendError
from pagewise.logging import get_logger
from pagewise.pagination.estimator import TokenEstimator, default_estimator
from pagewise.pagination.models import Chunk, PageRecord
from pagewise.pagination.packer import ChunkPacker
from pagewise.sessions.exceptions import InvalidCursorError
from pagewise.sessions.models import CancellationToken, SessionConfig, SessionStatus

logger = get_logger("pagewise.sessions")


class BaseSession:
    """Base class for sessions.

    A session owns its packer exclusively and fetches strictly one page at a
    time, waiting ``config.request_delay`` seconds between consecutive fetch
    calls. Page order in the output always equals input order.

    A session object may be run repeatedly, but not concurrently: each run
    resets the status and failure bookkeeping and starts a fresh packer.
    """

    kind = "session"

    def __init__(
        self,
        fetcher: ContentFetcher | None,
        config: SessionConfig,
        estimator: TokenEstimator | None = None,
    ):
        self.fetcher = fetcher
        self.config = config
        self.estimator = estimator or default_estimator

        self.status = SessionStatus.IDLE
        self.error: str | None = None
        self.failed_urls: list[str] = []
        self.pages_fetched = 0
        self._fetch_calls = 0

    def _reset(self) -> None:
        self.status = SessionStatus.IDLE
        self.error = None
        self.failed_urls = []
        self.pages_fetched = 0
        self._fetch_calls = 0

    def _fail(self, error: str) -> None:
        logger.error(f"{self.kind} session failed: {error}")
        self.status = SessionStatus.FAILED
        self.error = error

    def _outcome_fields(self, elapsed: float) -> dict[str, Any]:
        return {
            "status": self.status,
            "failed_urls": list(self.failed_urls),
            "pages_fetched": self.pages_fetched,
            "error": self.error,
            "elapsed_s": elapsed,
        }

    def make_page(
        self,
        url: str,
        content: str,
        title: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> PageRecord:
        """Build a page record, estimating its tokens."""
        return PageRecord(
            url=url,
            content=content,
            token_count=self.estimator.estimate(content),
            title=title,
            metadata=metadata or {},
        )

    async def _fetch_page(self, url: str, title: str | None = None) -> PageRecord | None:
        """Fetch one URL, recording and skipping it on failure.

        Returns:
            PageRecord | None: The page, or None if the fetch failed
        """
        if self.fetcher is None:
            raise RuntimeError(f"{self.kind} session has no content fetcher")

        if self._fetch_calls and self.config.request_delay > 0:
            await asyncio.sleep(self.config.request_delay)
        self._fetch_calls += 1

        try:
            fetched = await self.fetcher.fetch(url, self.config.fetch_options)
        except (BackendError, asyncio.TimeoutError) as e:
            logger.warning(f"Skipping {url}: {e}")
            self.failed_urls.append(url)
            return None

        self.pages_fetched += 1
        return self.make_page(
            url,
            fetched.content,
            title=fetched.title or title,
            metadata=fetched.metadata,
        )

    async def _load(self, item: Any) -> PageRecord | None:
        """Turn one input item into a page. Items are URLs by default."""
        return await self._fetch_page(item)

    async def _iter_chunks(
        self,
        entries: Iterable[tuple[str, Any]],
        cancel: CancellationToken | None = None,
    ) -> AsyncIterator[Chunk]:
        """Load and pack ``(cursor, item)`` entries in order, yielding chunks.

        The pending chunk is always flushed, including after cancellation or
        an unexpected error, and the terminal status is set before the final
        chunk is yielded.
        """
        packer = ChunkPacker(self.config.budget, self.estimator)
        self.status = SessionStatus.FETCHING

        try:
            for cursor, item in entries:
                if cancel is not None and cancel.cancelled:
                    logger.info(f"{self.kind} session cancelled before {cursor}")
                    self.status = SessionStatus.CANCELLED
                    break

                page = await self._load(item)
                if page is None:
                    continue

                chunk = packer.offer(page, cursor=cursor)
                if chunk is not None:
                    yield chunk
        except Exception as e:
            self._fail(f"{type(e).__name__}: {e}")

        final = packer.flush()
        if self.status == SessionStatus.FETCHING:
            self.status = SessionStatus.COMPLETED
        if final is not None:
            yield final

    @staticmethod
    def dedupe(items: Iterable[str]) -> list[str]:
        """Drop repeated URLs, keeping the first occurrence."""
        return list(dict.fromkeys(items))

    @staticmethod
    def resume_index(urls: list[str], cursor: str | None) -> int:
        """Position of ``cursor`` in ``urls`` (0 without a cursor).

        Raises:
            InvalidCursorError: If the cursor is not one of the URLs
        """
        if cursor is None:
            return 0
        try:
            return urls.index(cursor)
        except ValueError:
            raise InvalidCursorError(cursor) from None

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} status={self.status.value} "
            f"budget={self.config.budget.max_tokens_per_chunk}>"
        )
