"""Tests for the direct HTTP page fetcher."""

import httpx
import pytest

from pagewise.backends.base import FetchOptions
from pagewise.backends.exceptions import FetchError
from pagewise.backends.http import HttpPageFetcher

PAGE = """
<html>
  <head><title> Example Docs </title><style>body {}</style></head>
  <body>
    <nav>Home | About</nav>
    <main>
      <h1>Getting started</h1>
      <p>Install the package.</p>
      <pre>pip install example</pre>
    </main>
    <script>console.log("x")</script>
    <footer>Copyright</footer>
  </body>
</html>
"""


def make_fetcher(status: int = 200, text: str = PAGE) -> HttpPageFetcher:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(status, text=text))
    )
    return HttpPageFetcher(client=client)


class TestHttpPageFetcher:
    """Test fetching and text extraction."""

    @pytest.mark.asyncio
    async def test_extracts_main_text(self):
        fetched = await make_fetcher().fetch("https://example.com/docs", FetchOptions())

        assert fetched.title == "Example Docs"
        assert "Getting started" in fetched.content
        assert "Install the package." in fetched.content
        assert "Home | About" not in fetched.content
        assert "Copyright" not in fetched.content
        assert "console.log" not in fetched.content
        assert fetched.metadata == {"format": "text"}

    @pytest.mark.asyncio
    async def test_keeps_chrome_when_not_main_only(self):
        options = FetchOptions(only_main_content=False)

        fetched = await make_fetcher().fetch("https://example.com/docs", options)

        assert "Home | About" in fetched.content
        assert "console.log" not in fetched.content

    @pytest.mark.asyncio
    async def test_include_tags(self):
        options = FetchOptions(include_tags=("pre",))

        fetched = await make_fetcher().fetch("https://example.com/docs", options)

        assert fetched.content == "pip install example"

    @pytest.mark.asyncio
    async def test_exclude_tags(self):
        options = FetchOptions(exclude_tags=("pre",))

        fetched = await make_fetcher().fetch("https://example.com/docs", options)

        assert "pip install" not in fetched.content
        assert "Getting started" in fetched.content

    @pytest.mark.asyncio
    async def test_raw_html_format(self):
        options = FetchOptions(formats=("html",))

        fetched = await make_fetcher().fetch("https://example.com/docs", options)

        assert fetched.content == PAGE
        assert fetched.metadata == {"format": "html"}

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        with pytest.raises(FetchError, match="HTTP 404"):
            await make_fetcher(status=404).fetch("https://example.com/missing", FetchOptions())

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ConnectTimeout("slow", request=request)

        fetcher = HttpPageFetcher(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        with pytest.raises(FetchError, match="timed out"):
            await fetcher.fetch("https://example.com", FetchOptions())

    def test_clean_text(self):
        fetcher = HttpPageFetcher()
        assert fetcher._clean_text("  a \n\n\n b  \n") == "a\nb"
