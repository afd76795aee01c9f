"""Tests for the DuckDuckGo search backend."""

from unittest.mock import MagicMock, patch

import pytest

from pagewise.backends.duckduckgo import DuckDuckGoSearch
from pagewise.backends.exceptions import SearchError

RAW_RESULTS = [
    {"title": "Python", "href": "https://www.python.org/", "body": "Official site"},
    {"title": "No link", "body": "missing href"},
    {"title": "Docs", "href": "https://docs.python.org/3/", "body": "Documentation"},
]


class TestDuckDuckGoSearch:
    """Test result mapping and error handling."""

    @pytest.mark.asyncio
    async def test_search_maps_results(self):
        search = DuckDuckGoSearch()

        with patch.object(search, "_sync_search", return_value=RAW_RESULTS) as sync_search:
            hits = await search.search("python", limit=5)

        sync_search.assert_called_once_with("python", 5)
        assert [hit.url for hit in hits] == ["https://www.python.org/", "https://docs.python.org/3/"]
        assert hits[0].title == "Python"
        assert hits[0].snippet == "Official site"
        assert hits[0].source == "python.org"
        assert hits[0].content is None

    @pytest.mark.asyncio
    async def test_search_failure(self):
        search = DuckDuckGoSearch()

        with patch.object(search, "_sync_search", side_effect=RuntimeError("rate limited")):
            with pytest.raises(SearchError, match="rate limited"):
                await search.search("python", limit=5)

    def test_sync_search_passes_options(self):
        search = DuckDuckGoSearch(region="us-en", time_range="w")
        ddgs = MagicMock()
        ddgs.text.return_value = iter(RAW_RESULTS)

        with patch("pagewise.backends.duckduckgo.DDGS") as ddgs_cls:
            ddgs_cls.return_value.__enter__.return_value = ddgs
            results = search._sync_search("python", 3)

        ddgs.text.assert_called_once_with("python", region="us-en", max_results=3, timelimit="w")
        assert results == RAW_RESULTS

    def test_extract_domain(self):
        search = DuckDuckGoSearch()

        assert search._extract_domain("https://www.example.com/page") == "example.com"
        assert search._extract_domain("not a url") == "unknown"
