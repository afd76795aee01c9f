"""Firecrawl API client.

A single client implements all three collaborator protocols: ``fetch``
(``POST /scrape``), ``map`` (``POST /map``) and ``search``
(``POST /search``).
"""

from typing import Any
from urllib.parse import urlparse

import httpx

from pagewise.backends.base import FetchedContent, FetchOptions, SearchHit
from pagewise.backends.exceptions import FetchError, MapError, SearchError
from pagewise.logging import get_logger

logger = get_logger("pagewise.backends.firecrawl")

DEFAULT_API_URL = "https://api.firecrawl.dev/v1"


class FirecrawlAPIError(Exception):
    """Error response or transport failure from the Firecrawl API."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class FirecrawlClient:
    """Async client for the Firecrawl scraping API.

    The underlying ``httpx.AsyncClient`` is created on first use and owned
    by this object unless one is passed in. Use ``async with`` or call
    :meth:`aclose` to release it.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: Firecrawl API key
            api_url: Base URL of the v1 API
            timeout: Default HTTP timeout in seconds
            client: Optional preconfigured HTTP client (used as-is)
        """
        self.api_key = api_key or ""
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

        if not self.api_key:
            logger.warning("Firecrawl API key not provided, requests will likely be rejected")

    async def __aenter__(self) -> "FirecrawlClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the owned HTTP client."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        return self._client

    async def fetch(self, url: str, options: FetchOptions) -> FetchedContent:
        """Scrape a single URL.

        Args:
            url: URL to scrape
            options: Format and filtering hints

        Returns:
            FetchedContent: Content in the first requested format

        Raises:
            FetchError: If the API call fails or times out
        """
        payload: dict[str, Any] = {
            "url": url,
            "formats": list(options.formats),
            "onlyMainContent": options.only_main_content,
            "timeout": int(options.timeout * 1000),
        }
        if options.include_tags:
            payload["includeTags"] = list(options.include_tags)
        if options.exclude_tags:
            payload["excludeTags"] = list(options.exclude_tags)
        if options.wait_for:
            payload["waitFor"] = options.wait_for

        logger.debug(f"Scraping {url}")
        try:
            body = await self._post("/scrape", payload, timeout=options.timeout)
        except FirecrawlAPIError as e:
            raise FetchError(url, str(e)) from e

        data = body.get("data") or {}
        if not isinstance(data, dict):
            raise FetchError(url, "unexpected scrape response")
        content = self._pick_content(data, options.formats)
        metadata = data.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}

        return FetchedContent(
            url=url,
            content=content,
            title=metadata.get("title"),
            metadata=metadata,
        )

    async def map(self, root_url: str, limit: int) -> list[str]:
        """Map a website to its ordered URL list.

        Args:
            root_url: Site root
            limit: Maximum number of URLs to return

        Returns:
            list[str]: Discovered URLs in the order the API returned them

        Raises:
            MapError: If the API call fails
        """
        logger.info(f"Mapping {root_url}", limit=limit)
        try:
            body = await self._post(
                "/map",
                {"url": root_url, "limit": limit, "includeSubdomains": False},
            )
        except FirecrawlAPIError as e:
            raise MapError(f"Failed to map {root_url}: {e}") from e

        # v1 returns "links"; older deployments used "data"
        links = body.get("links") or body.get("data") or []
        if not isinstance(links, list):
            raise MapError(f"Failed to map {root_url}: unexpected response")
        return [link for link in links if isinstance(link, str)][:limit]

    async def search(self, query: str, limit: int) -> list[SearchHit]:
        """Search the web and scrape the results in the same call.

        Args:
            query: Search query
            limit: Maximum number of results

        Returns:
            list[SearchHit]: Ordered results, with content when scraped

        Raises:
            SearchError: If the API call fails
        """
        logger.info(f"Searching Firecrawl: '{query}' (max {limit} results)")
        try:
            body = await self._post(
                "/search",
                {
                    "query": query,
                    "limit": limit,
                    "scrapeOptions": {"formats": ["markdown"]},
                },
            )
        except FirecrawlAPIError as e:
            raise SearchError(f"Search failed: {e}") from e

        hits = []
        for item in body.get("data") or []:
            url = item.get("url") if isinstance(item, dict) else None
            if not url:
                logger.warning("Skipping search result without URL")
                continue
            hits.append(
                SearchHit(
                    url=url,
                    title=item.get("title") or "",
                    snippet=item.get("description") or "",
                    content=item.get("markdown") or item.get("content"),
                    source=urlparse(url).netloc.removeprefix("www."),
                )
            )
        return hits[:limit]

    async def _post(
        self,
        path: str,
        payload: dict[str, Any],
        timeout: float | None = None,
    ) -> dict[str, Any]:
        client = self._get_client()
        try:
            response = await client.post(path, json=payload, timeout=timeout or self.timeout)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise FirecrawlAPIError(f"{path} timed out") from e
        except httpx.HTTPStatusError as e:
            message = self._error_message(e.response)
            logger.error(f"Firecrawl API error: {e.response.status_code} - {message}")
            raise FirecrawlAPIError(message, status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            logger.error(f"Firecrawl API error: no response received ({e})")
            raise FirecrawlAPIError(f"request failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise FirecrawlAPIError(f"{path} returned invalid JSON", status_code=response.status_code) from e
        if not isinstance(body, dict):
            raise FirecrawlAPIError(f"{path} returned unexpected body", status_code=response.status_code)
        if not body.get("success", True):
            raise FirecrawlAPIError(body.get("error") or f"{path} was not successful")
        return body

    @staticmethod
    def _pick_content(data: dict[str, Any], formats: tuple[str, ...]) -> str:
        for fmt in (*formats, "markdown", "content"):
            value = data.get(fmt)
            if value and isinstance(value, str):
                return value
        return ""

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return response.reason_phrase
