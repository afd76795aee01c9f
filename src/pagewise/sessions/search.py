"""Search results fetched into a single budget-bounded chunk."""

from contextlib import aclosing

from pagewise.backends.base import ContentFetcher, SearchBackend, SearchHit
from pagewise.logging import Timer, get_logger
from pagewise.pagination.estimator import TokenEstimator
from pagewise.pagination.models import Chunk, PageRecord
from pagewise.sessions.base import BaseSession
from pagewise.sessions.exceptions import InvalidCursorError
from pagewise.sessions.models import CancellationToken, SearchOutcome, SessionConfig, SessionStatus

logger = get_logger("pagewise.sessions.search")


class SearchSession(BaseSession):
    """Run a query and deliver as many results as fit in one chunk.

    Results come from a single search call. A result whose content was not
    supplied by the search backend is fetched through the content fetcher;
    without a fetcher its snippet is delivered instead. Cursors are result
    indexes as decimal strings, so resuming requires the same query and
    limit.
    """

    kind = "search"

    def __init__(
        self,
        searcher: SearchBackend,
        config: SessionConfig,
        fetcher: ContentFetcher | None = None,
        estimator: TokenEstimator | None = None,
    ):
        """Initialize the search session.

        Args:
            searcher: Search backend
            config: Budget, limits and politeness delay
            fetcher: Content fetcher for results without content
            estimator: Token estimator (defaults to the heuristic)
        """
        super().__init__(fetcher, config, estimator)
        self.searcher = searcher

    async def run(
        self,
        query: str,
        limit: int | None = None,
        cursor: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> SearchOutcome:
        """Search and pack results up to the first chunk boundary.

        Args:
            query: Search query
            limit: Result limit (defaults to ``config.max_search_results``)
            cursor: ``next_cursor`` of an earlier result for the same query
            cancel: Optional cancellation token

        Returns:
            SearchOutcome: One chunk plus status and failure bookkeeping
        """
        limit = limit or self.config.max_search_results

        with Timer(f"search '{query}'", logger) as timer:
            chunk = await self._run(query, limit, cursor, cancel)

        outcome = SearchOutcome(query=query, chunk=chunk, **self._outcome_fields(timer.elapsed))
        logger.info(
            f"Search {outcome.status.value}: {chunk.page_count} results",
            tokens=chunk.total_tokens,
            has_more=chunk.has_more,
            failed=outcome.failed_count,
        )
        return outcome

    async def _run(
        self,
        query: str,
        limit: int,
        cursor: str | None,
        cancel: CancellationToken | None,
    ) -> Chunk:
        self._reset()

        try:
            start = self.parse_cursor(cursor)
        except InvalidCursorError as e:
            self._fail(str(e))
            return Chunk.empty()

        self.status = SessionStatus.SEARCHING
        try:
            hits = await self.searcher.search(query, limit)
        except Exception as e:
            self._fail(f"Search for '{query}' failed: {e}")
            return Chunk.empty()

        hits = self._unique_hits(hits)[:limit]
        entries = ((str(index), hits[index]) for index in range(start, len(hits)))

        async with aclosing(self._iter_chunks(entries, cancel)) as chunks:
            async for chunk in chunks:
                if chunk.has_more:
                    self.status = SessionStatus.COMPLETED
                return chunk

        return Chunk.empty()

    async def _load(self, hit: SearchHit) -> PageRecord | None:
        if hit.content is not None:
            self.pages_fetched += 1
            return self.make_page(hit.url, hit.content, title=hit.title)

        if self.fetcher is not None:
            return await self._fetch_page(hit.url, title=hit.title)

        self.pages_fetched += 1
        return self.make_page(hit.url, hit.snippet, title=hit.title, metadata={"snippet_only": True})

    @staticmethod
    def parse_cursor(cursor: str | None) -> int:
        """Result index named by ``cursor`` (0 without a cursor).

        An index past the end of the results is valid and yields an empty
        chunk, since result lists may shrink between calls.

        Raises:
            InvalidCursorError: If the cursor is not a non-negative integer
        """
        if cursor is None:
            return 0
        if not cursor.isdecimal():
            raise InvalidCursorError(cursor)
        return int(cursor)

    @staticmethod
    def _unique_hits(hits: list[SearchHit]) -> list[SearchHit]:
        seen: set[str] = set()
        unique = []
        for hit in hits:
            if hit.url in seen:
                continue
            seen.add(hit.url)
            unique.append(hit)
        return unique
