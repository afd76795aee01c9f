"""DuckDuckGo search backend."""

import asyncio
from typing import Any
from urllib.parse import urlparse

from ddgs import DDGS

from pagewise.backends.base import SearchHit
from pagewise.backends.exceptions import SearchError
from pagewise.logging import get_logger

logger = get_logger("pagewise.backends.duckduckgo")


class DuckDuckGoSearch:
    """Async search backend wrapping the ddgs library.

    Results carry snippets only, so sessions fetch the page content
    themselves. No API key required.
    """

    def __init__(self, region: str = "wt-wt", time_range: str | None = None):
        """Initialize the backend.

        Args:
            region: Region code (e.g., 'wt-wt' for worldwide, 'us-en' for US)
            time_range: Time range filter ('d'=day, 'w'=week, 'm'=month, 'y'=year)
        """
        self.region = region
        self.time_range = time_range

    async def search(self, query: str, limit: int) -> list[SearchHit]:
        """Search the web using DuckDuckGo.

        Args:
            query: Search query string
            limit: Maximum number of results to return

        Returns:
            list[SearchHit]: Ordered search results

        Raises:
            SearchError: If search fails
        """
        logger.info(f"Searching DuckDuckGo: '{query}' (max {limit} results)")
        try:
            raw_results = await asyncio.to_thread(self._sync_search, query, limit)
        except Exception as e:
            logger.error(f"DuckDuckGo search failed: {e}")
            raise SearchError(f"Search failed: {e}") from e

        hits = []
        for raw in raw_results:
            url = raw.get("href", raw.get("link", ""))
            if not url:
                logger.warning("Skipping search result without URL")
                continue
            hits.append(
                SearchHit(
                    url=url,
                    title=raw.get("title", "No title"),
                    snippet=raw.get("body", raw.get("snippet", "")),
                    source=self._extract_domain(url),
                )
            )

        logger.info(f"Found {len(hits)} results for '{query}'")
        return hits[:limit]

    def _sync_search(self, query: str, limit: int) -> list[dict[str, Any]]:
        with DDGS() as ddgs:
            params: dict[str, Any] = {
                "region": self.region,
                "max_results": limit,
            }
            if self.time_range:
                params["timelimit"] = self.time_range

            return list(ddgs.text(query, **params))

    def _extract_domain(self, url: str) -> str:
        """Extract domain name from URL, without a leading 'www.'."""
        domain = urlparse(url).netloc or "unknown"
        return domain.removeprefix("www.")
