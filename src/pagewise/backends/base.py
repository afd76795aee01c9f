"""Collaborator interfaces consumed by the sessions.

Sessions only depend on these protocols. Concrete backends live beside this
module; tests substitute simple fakes.
"""

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class FetchOptions(BaseModel):
    """Content-format and filtering hints passed through to the fetcher."""

    model_config = ConfigDict(frozen=True)

    formats: tuple[str, ...] = Field(
        default=("markdown",),
        description="Requested content formats, first one is delivered",
    )
    only_main_content: bool = Field(
        default=True,
        description="Strip navigation, headers, footers and asides",
    )
    include_tags: tuple[str, ...] = Field(default=(), description="Only keep these tags")
    exclude_tags: tuple[str, ...] = Field(default=(), description="Drop these tags")
    wait_for: int = Field(default=0, ge=0, description="Render wait in milliseconds")
    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")


class FetchedContent(BaseModel):
    """Content returned by a fetcher for one URL."""

    url: str = Field(description="URL of the fetched page")
    content: str = Field(default="", description="Page text in the requested format")
    title: str | None = Field(default=None, description="Page title")
    metadata: dict[str, Any] = Field(default_factory=dict)


class SearchHit(BaseModel):
    """A single search result, optionally carrying its page content."""

    url: str = Field(description="URL of the result")
    title: str = Field(default="", description="Title of the result")
    snippet: str = Field(default="", description="Text snippet from the result")
    content: str | None = Field(
        default=None,
        description="Full page content when the search backend already scraped it",
    )
    source: str = Field(default="", description="Source domain (e.g., 'example.com')")

    def __str__(self) -> str:
        return f"{self.title}\n{self.url}\n{self.snippet[:100]}..."


@runtime_checkable
class ContentFetcher(Protocol):
    """Retrieves one page. Raises FetchError on any failure."""

    async def fetch(self, url: str, options: FetchOptions) -> FetchedContent:
        ...


@runtime_checkable
class SiteMapper(Protocol):
    """Discovers the ordered URL list of a site. Raises MapError on failure."""

    async def map(self, root_url: str, limit: int) -> list[str]:
        ...


@runtime_checkable
class SearchBackend(Protocol):
    """Runs a query and returns ordered hits. Raises SearchError on failure."""

    async def search(self, query: str, limit: int) -> list[SearchHit]:
        ...
