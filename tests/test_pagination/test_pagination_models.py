"""Tests for pagination data models."""

import pytest
from pydantic import ValidationError

from pagewise.pagination.models import Chunk, PageRecord, PageStatus, TokenBudget


class TestTokenBudget:
    """Test TokenBudget model."""

    def test_defaults(self):
        budget = TokenBudget(max_tokens_per_chunk=100_000)

        assert budget.safety_factor == 0.9
        assert budget.truncation_target == 90_000

    def test_truncation_target_floors(self):
        budget = TokenBudget(max_tokens_per_chunk=7, safety_factor=0.5)
        assert budget.truncation_target == 3

    def test_truncation_target_at_least_one(self):
        budget = TokenBudget(max_tokens_per_chunk=1, safety_factor=0.1)
        assert budget.truncation_target == 1

    def test_rejects_non_positive_budget(self):
        with pytest.raises(ValidationError):
            TokenBudget(max_tokens_per_chunk=0)

    def test_rejects_bad_safety_factor(self):
        with pytest.raises(ValidationError):
            TokenBudget(max_tokens_per_chunk=100, safety_factor=1.5)
        with pytest.raises(ValidationError):
            TokenBudget(max_tokens_per_chunk=100, safety_factor=0)

    def test_frozen(self):
        budget = TokenBudget(max_tokens_per_chunk=100)
        with pytest.raises(ValidationError):
            budget.max_tokens_per_chunk = 200


class TestPageRecord:
    """Test PageRecord model."""

    def test_defaults(self):
        page = PageRecord(url="https://example.com")

        assert page.content == ""
        assert page.token_count == 0
        assert page.truncated is False
        assert page.status == PageStatus.OK
        assert page.fetched_at.tzinfo is not None

    def test_rejects_negative_tokens(self):
        with pytest.raises(ValidationError):
            PageRecord(url="https://example.com", token_count=-1)

    def test_to_output(self):
        page = PageRecord(url="https://example.com", content="hi", token_count=1)

        assert page.to_output() == {
            "url": "https://example.com",
            "content": "hi",
            "tokens": 1,
            "truncated": False,
        }

    def test_status_string(self):
        assert str(PageStatus.FAILED) == "failed"


class TestChunk:
    """Test Chunk model."""

    def test_empty(self):
        chunk = Chunk.empty()

        assert chunk.pages == []
        assert chunk.total_tokens == 0
        assert chunk.has_more is False
        assert chunk.next_cursor is None

    def test_cursor_required_when_more(self):
        with pytest.raises(ValidationError):
            Chunk(has_more=True)

    def test_cursor_forbidden_when_done(self):
        with pytest.raises(ValidationError):
            Chunk(has_more=False, next_cursor="https://example.com/next")

    def test_output_omits_cursor_when_done(self):
        page = PageRecord(url="https://example.com", content="hi", token_count=1)
        chunk = Chunk(pages=[page], total_tokens=1)

        output = chunk.to_output()

        assert output == {
            "pages": [page.to_output()],
            "totalTokens": 1,
            "hasMore": False,
        }
        assert "nextCursor" not in output

    def test_output_includes_cursor(self):
        chunk = Chunk(has_more=True, next_cursor="https://example.com/2")

        assert chunk.to_output()["nextCursor"] == "https://example.com/2"

    def test_urls_and_count(self):
        pages = [PageRecord(url=f"https://example.com/{i}") for i in range(3)]
        chunk = Chunk(pages=pages)

        assert chunk.page_count == 3
        assert chunk.urls == [p.url for p in pages]
