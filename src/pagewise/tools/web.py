"""Token-budgeted web tools: scrape, crawl, map, search and batch."""

from pydantic import BaseModel, Field

from pagewise.backends.base import ContentFetcher, SearchBackend, SiteMapper
from pagewise.backends.exceptions import BackendError
from pagewise.config import PresetName, Settings
from pagewise.logging import get_logger
from pagewise.sessions import BatchSession, CrawlSession, SearchSession, SessionStatus
from pagewise.sessions.base import BaseSession
from pagewise.tools.base import BaseTool, ToolResult
from pagewise.usage import TokenUsageTracker

logger = get_logger("pagewise.tools.web")


class ScrapeParams(BaseModel):
    """Input for ScrapeTool."""
    url: str = Field(
        description="URL of the page to scrape"
    )
    max_tokens: int | None = Field(
        default=None,
        ge=100,
        description="Token limit for the page; larger pages are truncated"
    )
    preset: PresetName | None = Field(
        default=None,
        description="Crawl preset providing format and filtering defaults"
    )


class ScrapeTool(BaseTool[ScrapeParams]):
    """Fetch one page, truncated to fit a token limit."""

    name = "pagewise_scrape"
    description = (
        "Scrape a single web page and return its content. "
        "Pages larger than the token limit are truncated and flagged with truncated=true. "
        "Use this to read one article or documentation page."
    )
    parameters_schema = ScrapeParams
    usage_operation = "scrape"

    def __init__(
        self,
        fetcher: ContentFetcher,
        settings: Settings,
        tracker: TokenUsageTracker | None = None,
    ):
        super().__init__(tracker)
        self.fetcher = fetcher
        self.settings = settings

    async def execute(self, params: ScrapeParams) -> ToolResult:
        config = self.settings.session_config(params.preset, params.max_tokens)
        outcome = await BatchSession(self.fetcher, config).run([params.url])

        if outcome.status == SessionStatus.FAILED or not outcome.chunk.pages:
            return ToolResult.error_result(
                error=f"Scrape failed: {outcome.error or 'could not fetch ' + params.url}"
            )

        page = outcome.chunk.pages[0]
        return ToolResult.success_result(
            data={
                **page.to_output(),
                "title": page.title,
                "maxTokens": config.budget.max_tokens_per_chunk,
            },
            tokens=page.token_count,
        )


class CrawlParams(BaseModel):
    """Input for CrawlTool."""
    url: str = Field(
        description="Root URL of the site to crawl"
    )
    max_pages: int | None = Field(
        default=None,
        ge=1,
        le=500,
        description="Maximum number of pages to crawl"
    )
    max_tokens_per_chunk: int | None = Field(
        default=None,
        ge=1000,
        description="Token budget for each returned chunk"
    )
    cursor: str | None = Field(
        default=None,
        description="nextCursor from a previous crawl of the same site, to resume"
    )
    preset: PresetName | None = Field(
        default=None,
        description="Crawl preset providing limits and filtering defaults"
    )
    summary_only: bool = Field(
        default=False,
        description="Return chunk statistics instead of page content"
    )


class CrawlTool(BaseTool[CrawlParams]):
    """Crawl a site into token-budgeted chunks."""

    name = "pagewise_crawl"
    description = (
        "Crawl a website and return its pages grouped into chunks, "
        "each within the token budget. Failed pages are skipped and counted. "
        "Use summary_only to preview how many chunks and tokens a crawl produces."
    )
    parameters_schema = CrawlParams
    usage_operation = "crawl"

    def __init__(
        self,
        fetcher: ContentFetcher,
        mapper: SiteMapper,
        settings: Settings,
        tracker: TokenUsageTracker | None = None,
    ):
        super().__init__(tracker)
        self.fetcher = fetcher
        self.mapper = mapper
        self.settings = settings

    async def execute(self, params: CrawlParams) -> ToolResult:
        config = self.settings.session_config(params.preset, params.max_tokens_per_chunk)
        if params.max_pages is not None:
            config = config.model_copy(update={"max_pages": params.max_pages})

        session = CrawlSession(self.fetcher, self.mapper, config)
        outcome = await session.run(params.url, cursor=params.cursor)

        if outcome.status == SessionStatus.FAILED and not outcome.chunks:
            return ToolResult.error_result(error=f"Crawl failed: {outcome.error}")

        data: dict[str, object] = {
            "url": params.url,
            "totalChunks": len(outcome.chunks),
            "totalPages": len(outcome.pages),
            "totalTokens": outcome.total_tokens,
            "maxTokensPerChunk": config.budget.max_tokens_per_chunk,
            **outcome.summary(),
        }
        if params.summary_only:
            data["chunks"] = [
                f"Chunk: {chunk.page_count} pages, {chunk.total_tokens} tokens"
                for chunk in outcome.chunks
            ]
        else:
            data["chunks"] = outcome.to_output()

        return ToolResult.success_result(data=data, tokens=outcome.total_tokens)


class MapParams(BaseModel):
    """Input for MapTool."""
    url: str = Field(
        description="Root URL of the site to map"
    )
    limit: int = Field(
        default=100,
        ge=1,
        le=5000,
        description="Maximum number of URLs to return"
    )


class MapTool(BaseTool[MapParams]):
    """List a site's URLs without fetching their content."""

    name = "pagewise_map"
    description = (
        "Map a website and return the URLs a crawl would visit, in crawl order. "
        "No page content is fetched, so this costs no content tokens."
    )
    parameters_schema = MapParams

    def __init__(self, mapper: SiteMapper, tracker: TokenUsageTracker | None = None):
        super().__init__(tracker)
        self.mapper = mapper

    async def execute(self, params: MapParams) -> ToolResult:
        try:
            urls = await self.mapper.map(params.url, params.limit)
        except BackendError as e:
            return ToolResult.error_result(error=f"Map failed: {e}")

        urls = BaseSession.dedupe(urls)[: params.limit]
        logger.info(f"Mapped {len(urls)} URLs", url=params.url)
        return ToolResult.success_result(
            data={"url": params.url, "totalUrls": len(urls), "urls": urls}
        )


class SearchParams(BaseModel):
    """Input for SearchTool."""
    query: str = Field(
        description="Search query string"
    )
    limit: int | None = Field(
        default=None,
        ge=1,
        le=50,
        description="Maximum number of results to retrieve"
    )
    max_tokens: int | None = Field(
        default=None,
        ge=1000,
        description="Token budget for the returned results"
    )
    cursor: str | None = Field(
        default=None,
        description="nextCursor from a previous call with the same query and limit"
    )


class SearchTool(BaseTool[SearchParams]):
    """Search the web and return as many full results as fit the budget."""

    name = "pagewise_search"
    description = (
        "Search the web and return result pages with their content, "
        "as many as fit in the token budget. "
        "If hasMore is true, call again with the same query and the returned nextCursor."
    )
    parameters_schema = SearchParams
    usage_operation = "search"

    def __init__(
        self,
        searcher: SearchBackend,
        settings: Settings,
        fetcher: ContentFetcher | None = None,
        tracker: TokenUsageTracker | None = None,
    ):
        super().__init__(tracker)
        self.searcher = searcher
        self.fetcher = fetcher
        self.settings = settings

    async def execute(self, params: SearchParams) -> ToolResult:
        config = self.settings.session_config(max_tokens=params.max_tokens)
        session = SearchSession(self.searcher, config, fetcher=self.fetcher)
        outcome = await session.run(params.query, limit=params.limit, cursor=params.cursor)

        if outcome.status == SessionStatus.FAILED:
            return ToolResult.error_result(error=f"Search failed: {outcome.error}")

        return ToolResult.success_result(
            data={
                "query": params.query,
                **outcome.to_output(),
                **outcome.summary(),
            },
            tokens=outcome.chunk.total_tokens,
        )


class BatchParams(BaseModel):
    """Input for BatchTool."""
    urls: list[str] = Field(
        min_length=1,
        max_length=100,
        description="URLs to fetch, in delivery order"
    )
    max_tokens_per_chunk: int | None = Field(
        default=None,
        ge=1000,
        description="Token budget for the returned pages"
    )
    cursor: str | None = Field(
        default=None,
        description="nextCursor from a previous call with the same URL list"
    )


class BatchTool(BaseTool[BatchParams]):
    """Fetch a list of URLs, returning as many as fit the budget."""

    name = "pagewise_batch"
    description = (
        "Fetch several web pages and return as many as fit in the token budget, in order. "
        "If hasMore is true, call again with the same URLs and the returned nextCursor."
    )
    parameters_schema = BatchParams
    usage_operation = "batch"

    def __init__(
        self,
        fetcher: ContentFetcher,
        settings: Settings,
        tracker: TokenUsageTracker | None = None,
    ):
        super().__init__(tracker)
        self.fetcher = fetcher
        self.settings = settings

    async def execute(self, params: BatchParams) -> ToolResult:
        config = self.settings.session_config(max_tokens=params.max_tokens_per_chunk)
        outcome = await BatchSession(self.fetcher, config).run(params.urls, cursor=params.cursor)

        if outcome.status == SessionStatus.FAILED:
            return ToolResult.error_result(error=f"Batch failed: {outcome.error}")

        return ToolResult.success_result(
            data={
                "totalUrls": len(params.urls),
                **outcome.to_output(),
                **outcome.summary(),
            },
            tokens=outcome.chunk.total_tokens,
        )
