"""Direct HTTP page fetcher with HTML text extraction."""

import httpx
from bs4 import BeautifulSoup

from pagewise.backends.base import FetchedContent, FetchOptions
from pagewise.backends.exceptions import FetchError
from pagewise.logging import get_logger

logger = get_logger("pagewise.backends.http")

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; pagewise/0.1)"

# Always removed, regardless of options
_NOISE_TAGS = ["script", "style", "noscript"]
# Removed when only the main content is requested
_CHROME_TAGS = ["nav", "footer", "header", "aside"]


class HttpPageFetcher:
    """Async page fetcher that downloads HTML and extracts readable text.

    Implements the ``ContentFetcher`` protocol without any third-party
    scraping service. Requesting the ``html`` format returns the raw
    document; any other format returns cleaned text.
    """

    def __init__(
        self,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the fetcher.

        Args:
            user_agent: Optional custom user agent string
            client: Optional shared client; a short-lived one is created per
                request otherwise
        """
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self._client = client

    async def fetch(self, url: str, options: FetchOptions) -> FetchedContent:
        """Fetch and extract content from a web page.

        Args:
            url: URL to fetch
            options: Format and filtering hints

        Returns:
            FetchedContent: Extracted page content

        Raises:
            FetchError: If the request fails, times out or returns an error status
        """
        logger.info(f"Fetching web page: {url}")

        try:
            html = await self._get(url, options.timeout)
        except httpx.TimeoutException as e:
            logger.warning(f"Timed out fetching {url}")
            raise FetchError(url, "timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"HTTP error fetching {url}: {e}")
            raise FetchError(url, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.warning(f"Request error fetching {url}: {e}")
            raise FetchError(url, f"request failed: {e}") from e

        if options.formats and options.formats[0] == "html":
            return FetchedContent(url=url, content=html, metadata={"format": "html"})

        soup = BeautifulSoup(html, "lxml")
        title = soup.title.string.strip() if soup.title and soup.title.string else None

        removed = _NOISE_TAGS + list(options.exclude_tags)
        if options.only_main_content:
            removed += _CHROME_TAGS
        for element in soup(removed):
            element.decompose()

        if options.include_tags:
            parts = [
                element.get_text(separator="\n", strip=True)
                for element in soup.find_all(list(options.include_tags))
            ]
            text = "\n".join(parts)
        else:
            text = soup.get_text(separator="\n", strip=True)

        text = self._clean_text(text)
        logger.info(f"Extracted {len(text)} characters from {url}")

        return FetchedContent(url=url, content=text, title=title, metadata={"format": "text"})

    async def _get(self, url: str, timeout: float) -> str:
        if self._client is not None:
            response = await self._client.get(url, timeout=timeout)
            response.raise_for_status()
            return response.text

        async with httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.text

    def _clean_text(self, text: str) -> str:
        """Collapse whitespace and drop empty lines."""
        lines = [line.strip() for line in text.split("\n")]
        return "\n".join(line for line in lines if line)
