"""Tests for BatchSession."""

import pytest

from pagewise.sessions.batch import BatchSession
from pagewise.sessions.models import CancellationToken, SessionStatus

URLS = [f"https://example.com/doc{i}" for i in range(1, 6)]


class TestBatchSession:
    """Test batch fetching into a single chunk."""

    @pytest.mark.asyncio
    async def test_all_urls_fit(self, fake_fetcher, make_config, make_content):
        fetcher = fake_fetcher({url: make_content(100) for url in URLS})
        session = BatchSession(fetcher, make_config())

        outcome = await session.run(URLS)

        assert outcome.status == SessionStatus.COMPLETED
        assert outcome.chunk.urls == URLS
        assert outcome.chunk.total_tokens == 500
        assert outcome.chunk.has_more is False
        assert outcome.is_complete

    @pytest.mark.asyncio
    async def test_stops_at_first_boundary(self, fake_fetcher, make_config, make_content):
        fetcher = fake_fetcher({url: make_content(400) for url in URLS})
        session = BatchSession(fetcher, make_config(max_tokens=1_000))

        outcome = await session.run(URLS)

        assert outcome.status == SessionStatus.COMPLETED
        assert outcome.chunk.urls == URLS[:2]
        assert outcome.chunk.next_cursor == URLS[2]
        # The page that closed the chunk was fetched, nothing after it
        assert fetcher.calls == URLS[:3]

    @pytest.mark.asyncio
    async def test_resume_covers_every_url_once(self, fake_fetcher, make_config, make_content):
        fetcher = fake_fetcher({url: make_content(400) for url in URLS})
        session = BatchSession(fetcher, make_config(max_tokens=1_000))

        delivered = []
        cursor = None
        while True:
            outcome = await session.run(URLS, cursor=cursor)
            delivered.extend(outcome.chunk.urls)
            if not outcome.chunk.has_more:
                break
            cursor = outcome.chunk.next_cursor

        assert delivered == URLS

    @pytest.mark.asyncio
    async def test_failed_urls_reported(self, fake_fetcher, make_config, make_content):
        fetcher = fake_fetcher(
            {url: make_content(10) for url in URLS},
            failing={URLS[0], URLS[3]},
        )

        outcome = await BatchSession(fetcher, make_config()).run(URLS)

        assert outcome.status == SessionStatus.COMPLETED
        assert outcome.chunk.urls == [URLS[1], URLS[2], URLS[4]]
        assert outcome.failed_urls == [URLS[0], URLS[3]]
        assert outcome.summary() == {
            "status": "completed",
            "pagesFetched": 3,
            "failedCount": 2,
            "failedUrls": [URLS[0], URLS[3]],
        }

    @pytest.mark.asyncio
    async def test_duplicate_urls_fetched_once(self, fake_fetcher, make_config, make_content):
        fetcher = fake_fetcher({url: make_content(10) for url in URLS})

        outcome = await BatchSession(fetcher, make_config()).run(URLS[:2] + URLS[:2])

        assert fetcher.calls == URLS[:2]
        assert outcome.chunk.urls == URLS[:2]

    @pytest.mark.asyncio
    async def test_empty_list(self, fake_fetcher, make_config):
        outcome = await BatchSession(fake_fetcher({}), make_config()).run([])

        assert outcome.status == SessionStatus.COMPLETED
        assert outcome.chunk.pages == []
        assert outcome.to_output() == {"pages": [], "totalTokens": 0, "hasMore": False}

    @pytest.mark.asyncio
    async def test_unknown_cursor_fails(self, fake_fetcher, make_config):
        fetcher = fake_fetcher({})

        outcome = await BatchSession(fetcher, make_config()).run(
            URLS, cursor="https://elsewhere.example.com"
        )

        assert outcome.status == SessionStatus.FAILED
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_cancelled(self, fake_fetcher, make_config, make_content):
        cancel = CancellationToken()
        cancel.cancel()
        fetcher = fake_fetcher({url: make_content(10) for url in URLS})

        outcome = await BatchSession(fetcher, make_config()).run(URLS, cancel=cancel)

        assert outcome.status == SessionStatus.CANCELLED
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_oversized_page_truncated(self, fake_fetcher, make_config, make_content):
        fetcher = fake_fetcher({URLS[0]: make_content(5_000)})

        outcome = await BatchSession(fetcher, make_config(max_tokens=1_000)).run(URLS[:1])

        page = outcome.chunk.pages[0]
        assert page.truncated is True
        assert page.token_count <= 900
        assert outcome.chunk.total_tokens <= 1_000
