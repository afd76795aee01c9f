"""Content-retrieval, site-mapping and search collaborators."""

from pagewise.backends.base import (
    ContentFetcher,
    FetchedContent,
    FetchOptions,
    SearchBackend,
    SearchHit,
    SiteMapper,
)
from pagewise.backends.duckduckgo import DuckDuckGoSearch
from pagewise.backends.exceptions import BackendError, FetchError, MapError, SearchError
from pagewise.backends.factory import Backends, create_backends
from pagewise.backends.firecrawl import FirecrawlAPIError, FirecrawlClient
from pagewise.backends.http import HttpPageFetcher
from pagewise.backends.mapper import LinkMapper, extract_links

__all__ = [
    # Interfaces
    "ContentFetcher",
    "SiteMapper",
    "SearchBackend",
    "FetchOptions",
    "FetchedContent",
    "SearchHit",
    # Exceptions
    "BackendError",
    "FetchError",
    "MapError",
    "SearchError",
    "FirecrawlAPIError",
    # Implementations
    "FirecrawlClient",
    "HttpPageFetcher",
    "LinkMapper",
    "DuckDuckGoSearch",
    "extract_links",
    # Wiring
    "Backends",
    "create_backends",
]
