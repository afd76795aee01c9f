"""Fixed URL list fetched into a single budget-bounded chunk."""

from contextlib import aclosing

from pagewise.backends.base import ContentFetcher
from pagewise.logging import Timer, get_logger
from pagewise.pagination.estimator import TokenEstimator
from pagewise.pagination.models import Chunk
from pagewise.sessions.base import BaseSession
from pagewise.sessions.exceptions import InvalidCursorError
from pagewise.sessions.models import BatchOutcome, CancellationToken, SessionConfig, SessionStatus

logger = get_logger("pagewise.sessions.batch")


class BatchSession(BaseSession):
    """Fetch a caller-supplied URL list, returning as much as fits in one chunk.

    The run stops at the first chunk boundary. When more remains,
    ``next_cursor`` is the first URL not delivered and the caller re-invokes
    ``run`` with the same list and that cursor.
    """

    kind = "batch"

    def __init__(
        self,
        fetcher: ContentFetcher,
        config: SessionConfig,
        estimator: TokenEstimator | None = None,
    ):
        super().__init__(fetcher, config, estimator)

    async def run(
        self,
        urls: list[str],
        cursor: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> BatchOutcome:
        """Fetch and pack the URLs up to the first chunk boundary.

        Args:
            urls: URLs in delivery order (repeats are dropped)
            cursor: ``next_cursor`` of an earlier batch result
            cancel: Optional cancellation token

        Returns:
            BatchOutcome: One chunk plus status and failure bookkeeping
        """
        with Timer(f"batch of {len(urls)} URLs", logger) as timer:
            chunk = await self._run(urls, cursor, cancel)

        outcome = BatchOutcome(chunk=chunk, **self._outcome_fields(timer.elapsed))
        logger.info(
            f"Batch {outcome.status.value}: {chunk.page_count} pages",
            tokens=chunk.total_tokens,
            has_more=chunk.has_more,
            failed=outcome.failed_count,
        )
        return outcome

    async def _run(
        self,
        urls: list[str],
        cursor: str | None,
        cancel: CancellationToken | None,
    ) -> Chunk:
        self._reset()
        urls = self.dedupe(urls)

        try:
            start = self.resume_index(urls, cursor)
        except InvalidCursorError as e:
            self._fail(str(e))
            return Chunk.empty()

        entries = ((url, url) for url in urls[start:])
        async with aclosing(self._iter_chunks(entries, cancel)) as chunks:
            async for chunk in chunks:
                if chunk.has_more:
                    logger.info(f"Token limit reached, stopping before {chunk.next_cursor}")
                    self.status = SessionStatus.COMPLETED
                return chunk

        return Chunk.empty()
