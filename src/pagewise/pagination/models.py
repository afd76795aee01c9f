"""Data models for token-budgeted pagination.

Pages flow from a session into the packer as ``PageRecord`` objects and
leave it grouped into ``Chunk`` objects. Both are frozen: a chunk is never
modified after emission, and truncation produces a new record rather than
editing the fetched one.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PageStatus(str, Enum):
    """Outcome of fetching a single page."""

    OK = "ok"
    FAILED = "failed"

    def __str__(self) -> str:
        """String representation of page status."""
        return self.value


class TokenBudget(BaseModel):
    """Per-chunk token budget for one session."""

    model_config = ConfigDict(frozen=True)

    max_tokens_per_chunk: int = Field(
        ...,
        gt=0,
        description="Hard upper bound on the tokens delivered in one chunk",
    )
    safety_factor: float = Field(
        default=0.9,
        gt=0.0,
        le=1.0,
        description="Fraction of the budget an oversized single page is truncated to",
    )

    @property
    def truncation_target(self) -> int:
        """Token target used when a single page exceeds the whole budget."""
        return max(1, math.floor(self.max_tokens_per_chunk * self.safety_factor))


class PageRecord(BaseModel):
    """One fetched unit of content."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Page URL, unique within a session")
    content: str = Field(default="", description="Page text delivered downstream")
    token_count: int = Field(default=0, ge=0, description="Estimated tokens of content")
    truncated: bool = Field(default=False, description="Whether content was cut to fit")
    fetched_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the fetch completed",
    )
    status: PageStatus = Field(default=PageStatus.OK)
    title: str | None = Field(default=None, description="Page title, if known")
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_output(self) -> dict[str, Any]:
        """Serialize to the page shape of the output contract."""
        return {
            "url": self.url,
            "content": self.content,
            "tokens": self.token_count,
            "truncated": self.truncated,
        }

    def __repr__(self) -> str:
        flag = ", truncated" if self.truncated else ""
        return f"PageRecord(url='{self.url}', tokens={self.token_count}{flag})"


class Chunk(BaseModel):
    """A budget-bounded, ordered group of pages delivered as one response.

    ``next_cursor`` is present if and only if ``has_more`` is true. This is
    checked at construction so no code path can emit an inconsistent chunk.
    """

    model_config = ConfigDict(frozen=True)

    pages: list[PageRecord] = Field(default_factory=list)
    total_tokens: int = Field(default=0, ge=0)
    has_more: bool = False
    next_cursor: str | None = None

    @model_validator(mode="after")
    def _check_cursor(self) -> "Chunk":
        if self.has_more != (self.next_cursor is not None):
            raise ValueError("next_cursor must be set exactly when has_more is true")
        return self

    @classmethod
    def empty(cls) -> "Chunk":
        """Chunk returned when there was nothing to deliver."""
        return cls()

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def urls(self) -> list[str]:
        return [page.url for page in self.pages]

    def to_output(self) -> dict[str, Any]:
        """Serialize to the wire contract.

        Keys are camelCase and ``nextCursor`` is omitted entirely when there
        is nothing more to fetch.
        """
        output: dict[str, Any] = {
            "pages": [page.to_output() for page in self.pages],
            "totalTokens": self.total_tokens,
            "hasMore": self.has_more,
        }
        if self.next_cursor is not None:
            output["nextCursor"] = self.next_cursor
        return output

    def __repr__(self) -> str:
        return (
            f"Chunk(pages={len(self.pages)}, tokens={self.total_tokens}, "
            f"has_more={self.has_more}, next_cursor={self.next_cursor!r})"
        )
