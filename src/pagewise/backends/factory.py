"""Choose content, mapping and search backends from settings."""

from typing import TYPE_CHECKING, NamedTuple

from pagewise.backends.base import ContentFetcher, SearchBackend, SiteMapper
from pagewise.backends.duckduckgo import DuckDuckGoSearch
from pagewise.backends.firecrawl import FirecrawlClient
from pagewise.backends.http import HttpPageFetcher
from pagewise.backends.mapper import LinkMapper
from pagewise.logging import get_logger

if TYPE_CHECKING:
    from pagewise.config import Settings

logger = get_logger("pagewise.backends.factory")


class Backends(NamedTuple):
    fetcher: ContentFetcher
    mapper: SiteMapper
    searcher: SearchBackend


def create_backends(settings: "Settings", preset: str | None = None) -> Backends:
    """Firecrawl for everything when an API key is configured.

    Without a key, pages are fetched directly over HTTP, sites are mapped by
    following links to the preset's crawl depth and search goes through
    DuckDuckGo.
    """
    if settings.firecrawl_api_key:
        client = FirecrawlClient(
            api_key=settings.firecrawl_api_key,
            api_url=settings.firecrawl_api_url,
        )
        logger.info("Using Firecrawl backends", api_url=settings.firecrawl_api_url)
        return Backends(fetcher=client, mapper=client, searcher=client)

    config = settings.session_config(preset)
    logger.info("No Firecrawl API key, using direct HTTP backends", depth=config.crawl_depth)
    return Backends(
        fetcher=HttpPageFetcher(user_agent=settings.user_agent),
        mapper=LinkMapper(
            max_depth=config.crawl_depth,
            timeout=config.fetch_options.timeout,
            user_agent=settings.user_agent,
        ),
        searcher=DuckDuckGoSearch(),
    )
