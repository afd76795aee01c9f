"""Pytest configuration and fixtures for pagewise tests."""

import pytest

from pagewise.backends.base import FetchedContent, FetchOptions, SearchHit
from pagewise.backends.exceptions import FetchError, MapError, SearchError
from pagewise.config import Settings
from pagewise.pagination.models import PageRecord, TokenBudget
from pagewise.sessions.models import SessionConfig

ENV_VARS = (
    "FIRECRAWL_API_KEY",
    "PAGEWISE_PRESET",
    "PAGEWISE_LOG_LEVEL",
    "MAX_TOKENS_PER_CHUNK",
    "SAFETY_FACTOR",
    "MAX_PAGES_PER_CRAWL",
    "CRAWL_DEPTH",
    "MAX_SEARCH_RESULTS",
    "REQUEST_DELAY",
    "REQUEST_TIMEOUT",
)


def content_with_tokens(tokens: int, fill: str = "x") -> str:
    """Text the heuristic estimator counts as exactly ``tokens`` (tokens >= 2).

    A single unbroken word of 4 * tokens characters: the character estimate
    dominates the word estimate.
    """
    return fill * (tokens * 4)


class FakeFetcher:
    """In-memory ContentFetcher recording every call."""

    def __init__(self, pages: dict[str, str], failing: set[str] | None = None):
        self.pages = pages
        self.failing = failing or set()
        self.calls: list[str] = []

    async def fetch(self, url: str, options: FetchOptions) -> FetchedContent:
        self.calls.append(url)
        if url in self.failing or url not in self.pages:
            raise FetchError(url, "HTTP 500")
        return FetchedContent(url=url, content=self.pages[url], title=f"Title of {url}")


class FakeMapper:
    """In-memory SiteMapper."""

    def __init__(self, urls: list[str] | None = None, error: Exception | None = None):
        self.urls = urls or []
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def map(self, root_url: str, limit: int) -> list[str]:
        self.calls.append((root_url, limit))
        if self.error is not None:
            raise self.error
        return list(self.urls)


class FakeSearcher:
    """In-memory SearchBackend."""

    def __init__(self, hits: list[SearchHit] | None = None, error: Exception | None = None):
        self.hits = hits or []
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def search(self, query: str, limit: int) -> list[SearchHit]:
        self.calls.append((query, limit))
        if self.error is not None:
            raise self.error
        return list(self.hits[:limit])


@pytest.fixture
def make_content():
    """Factory for text with a known token estimate."""
    return content_with_tokens


@pytest.fixture
def make_page():
    """Factory for page records with an explicit token count."""

    def _make_page(url: str, tokens: int, content: str | None = None) -> PageRecord:
        return PageRecord(
            url=url,
            content=content if content is not None else f"content of {url}",
            token_count=tokens,
        )

    return _make_page


@pytest.fixture
def make_config():
    """Factory for session configs with no politeness delay."""

    def _make_config(max_tokens: int = 100_000, **overrides) -> SessionConfig:
        return SessionConfig(
            budget=TokenBudget(max_tokens_per_chunk=max_tokens),
            request_delay=0.0,
            **overrides,
        )

    return _make_config


@pytest.fixture
def fake_fetcher():
    return FakeFetcher


@pytest.fixture
def fake_mapper():
    return FakeMapper


@pytest.fixture
def fake_searcher():
    return FakeSearcher


@pytest.fixture
def map_error():
    return MapError("map service unavailable")


@pytest.fixture
def search_error():
    return SearchError("search service unavailable")


@pytest.fixture
def test_settings(monkeypatch):
    """Settings isolated from the environment and any .env file."""
    monkeypatch.setattr(
        "pagewise.config.Settings.model_config",
        {**Settings.model_config, "env_file": None},
    )
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return Settings(request_delay=0.0, firecrawl_api_key="fc-test")
