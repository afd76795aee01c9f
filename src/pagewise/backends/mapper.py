"""Link-following site mapper.

Discovers a site's URLs breadth-first from the root page, staying on the
root's host. Used when no mapping service is available.
"""

from collections import deque
from urllib.parse import urldefrag, urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from pagewise.backends.exceptions import MapError
from pagewise.backends.http import DEFAULT_USER_AGENT
from pagewise.logging import get_logger

logger = get_logger("pagewise.backends.mapper")


def extract_links(html: str, page_url: str) -> list[str]:
    """Extract same-host HTTP(S) links from an HTML document.

    Fragments are stripped and mailto:/javascript: links ignored. Order of
    first appearance is kept.

    Args:
        html: Document source
        page_url: URL the document was served from

    Returns:
        list[str]: Absolute, de-duplicated links on the same host
    """
    soup = BeautifulSoup(html, "lxml")
    base_netloc = urlparse(page_url).netloc
    links: dict[str, None] = {}

    for tag in soup.find_all("a", href=True):
        href = tag.get("href")
        if not isinstance(href, str):
            continue
        raw = href.strip()
        if not raw or raw.startswith(("mailto:", "javascript:", "tel:")):
            continue
        absolute, _ = urldefrag(urljoin(page_url, raw))
        parsed = urlparse(absolute)
        if parsed.scheme in ("http", "https") and parsed.netloc == base_netloc:
            links[absolute] = None

    return list(links)


class LinkMapper:
    """Breadth-first same-host URL discovery, bounded by depth and count."""

    def __init__(
        self,
        max_depth: int = 2,
        timeout: float = 30.0,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the mapper.

        Args:
            max_depth: Link hops to follow from the root (0 = root only)
            timeout: Per-request timeout in seconds
            user_agent: Optional custom user agent string
            client: Optional shared HTTP client
        """
        self.max_depth = max_depth
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self._client = client

    async def map(self, root_url: str, limit: int) -> list[str]:
        """Discover up to ``limit`` URLs starting at ``root_url``.

        Args:
            root_url: Site root; always the first URL returned
            limit: Maximum number of URLs

        Returns:
            list[str]: URLs in breadth-first discovery order

        Raises:
            MapError: If the root page itself cannot be retrieved
        """
        if self._client is not None:
            return await self._map(self._client, root_url, limit)

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
        ) as client:
            return await self._map(client, root_url, limit)

    async def _map(self, client: httpx.AsyncClient, root_url: str, limit: int) -> list[str]:
        root_url, _ = urldefrag(root_url)
        found: dict[str, None] = {root_url: None}
        queue: deque[tuple[str, int]] = deque([(root_url, 0)])

        while queue and len(found) < limit:
            url, depth = queue.popleft()
            if depth >= self.max_depth:
                continue

            try:
                response = await client.get(url, timeout=self.timeout)
                response.raise_for_status()
            except httpx.HTTPError as e:
                if url == root_url:
                    raise MapError(f"Failed to map {root_url}: {e}") from e
                logger.warning(f"Skipping unreachable page while mapping: {url}")
                continue

            for link in extract_links(response.text, url):
                if link in found:
                    continue
                found[link] = None
                queue.append((link, depth + 1))
                if len(found) >= limit:
                    break

        urls = list(found)[:limit]
        logger.info(f"Mapped {len(urls)} URLs from {root_url}", max_depth=self.max_depth)
        return urls
