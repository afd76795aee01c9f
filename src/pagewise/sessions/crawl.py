"""Full-site crawl: map the site, then fetch and pack every page."""

from typing import AsyncIterator

from pagewise.backends.base import ContentFetcher, SiteMapper
from pagewise.logging import Timer, get_logger
from pagewise.pagination.estimator import TokenEstimator
from pagewise.pagination.models import Chunk
from pagewise.sessions.base import BaseSession
from pagewise.sessions.exceptions import InvalidCursorError
from pagewise.sessions.models import CancellationToken, CrawlOutcome, SessionConfig, SessionStatus

logger = get_logger("pagewise.sessions.crawl")


class CrawlSession(BaseSession):
    """Crawl a whole site into a list of token-budgeted chunks.

    States: idle -> mapping -> fetching -> completed | failed | cancelled.
    Mapping failure is fatal. A failed page fetch is logged and skipped.
    Unlike search and batch, a crawl keeps packing past the first chunk and
    returns every chunk.

    Example:
        >>> session = CrawlSession(fetcher, mapper, config)
        >>> outcome = await session.run("https://docs.example.com")
        >>> for chunk in outcome.chunks:
        ...     deliver(chunk.to_output())
    """

    kind = "crawl"

    def __init__(
        self,
        fetcher: ContentFetcher,
        mapper: SiteMapper,
        config: SessionConfig,
        estimator: TokenEstimator | None = None,
    ):
        """Initialize the crawl session.

        Args:
            fetcher: Content-retrieval backend
            mapper: Site-mapping backend
            config: Budget, limits and politeness delay
            estimator: Token estimator (defaults to the heuristic)
        """
        super().__init__(fetcher, config, estimator)
        self.mapper = mapper

    async def stream(
        self,
        root_url: str,
        cursor: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> AsyncIterator[Chunk]:
        """Yield chunks as soon as the packer emits them.

        Args:
            root_url: Site root handed to the mapper
            cursor: ``next_cursor`` of an earlier chunk to resume from
            cancel: Optional cancellation token

        Yields:
            Chunk: Chunks in order; ``self.status`` is terminal once exhausted
        """
        self._reset()
        self.status = SessionStatus.MAPPING
        limit = self.config.max_pages

        try:
            urls = await self.mapper.map(root_url, limit)
        except Exception as e:
            self._fail(f"Mapping {root_url} failed: {e}")
            return

        urls = self.dedupe(urls)[:limit]
        logger.info(f"Found {len(urls)} pages to crawl", root_url=root_url)

        try:
            start = self.resume_index(urls, cursor)
        except InvalidCursorError as e:
            self._fail(str(e))
            return

        if start:
            logger.info(f"Resuming crawl at {cursor}", skipped=start)

        async for chunk in self._iter_chunks(((url, url) for url in urls[start:]), cancel):
            yield chunk

    async def run(
        self,
        root_url: str,
        cursor: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> CrawlOutcome:
        """Crawl the site and collect every chunk.

        Args:
            root_url: Site root handed to the mapper
            cursor: ``next_cursor`` of an earlier chunk to resume from
            cancel: Optional cancellation token

        Returns:
            CrawlOutcome: Chunks plus status and failure bookkeeping
        """
        with Timer(f"crawl {root_url}", logger) as timer:
            chunks = [chunk async for chunk in self.stream(root_url, cursor, cancel)]

        outcome = CrawlOutcome(chunks=chunks, **self._outcome_fields(timer.elapsed))
        logger.info(
            f"Crawl {outcome.status.value}: {len(chunks)} chunks",
            pages=outcome.pages_fetched,
            tokens=outcome.total_tokens,
            failed=outcome.failed_count,
        )
        return outcome
