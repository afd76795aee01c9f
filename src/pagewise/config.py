"""Configuration management for pagewise using Pydantic settings.

Settings are loaded once from environment variables and .env files and are
never mutated afterwards. Sessions do not read settings themselves: callers
turn them into a :class:`~pagewise.sessions.models.SessionConfig` with
:meth:`Settings.session_config` and pass that in.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagewise.backends.base import FetchOptions
from pagewise.pagination.models import TokenBudget
from pagewise.sessions.models import SessionConfig

PresetName = Literal["lightweight", "balanced", "comprehensive", "code-analysis", "api-safe"]


class CrawlPreset(BaseModel):
    """Named bundle of crawl limits and fetch hints."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    max_tokens_per_chunk: int = Field(gt=0)
    max_pages_per_crawl: int = Field(ge=1)
    crawl_depth: int = Field(ge=0)
    formats: tuple[str, ...] = ("markdown",)
    only_main_content: bool = True
    wait_for: int = Field(default=0, ge=0, description="Render wait in milliseconds")
    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    include_tags: tuple[str, ...] = ()
    exclude_tags: tuple[str, ...] = ()


PRESETS: dict[str, CrawlPreset] = {
    preset.name: preset
    for preset in (
        CrawlPreset(
            name="lightweight",
            description="Fast crawling with minimal content (good for overview)",
            max_tokens_per_chunk=50_000,
            max_pages_per_crawl=20,
            crawl_depth=1,
            exclude_tags=("script", "style", "nav", "footer", "header"),
        ),
        CrawlPreset(
            name="balanced",
            description="Balanced crawling for most use cases",
            max_tokens_per_chunk=100_000,
            max_pages_per_crawl=50,
            crawl_depth=2,
            wait_for=1000,
            timeout=30.0,
        ),
        CrawlPreset(
            name="comprehensive",
            description="Deep crawling with full content extraction",
            max_tokens_per_chunk=150_000,
            max_pages_per_crawl=100,
            crawl_depth=3,
            formats=("markdown", "html"),
            only_main_content=False,
            wait_for=2000,
            timeout=60.0,
        ),
        CrawlPreset(
            name="code-analysis",
            description="Optimized for analyzing code documentation",
            max_tokens_per_chunk=120_000,
            max_pages_per_crawl=80,
            crawl_depth=3,
            formats=("markdown", "html"),
            include_tags=("code", "pre", "article", "main"),
            exclude_tags=("nav", "footer", "aside"),
        ),
        CrawlPreset(
            name="api-safe",
            description="Conservative settings to avoid API limits",
            max_tokens_per_chunk=30_000,
            max_pages_per_crawl=10,
            crawl_depth=1,
            wait_for=3000,
            timeout=45.0,
        ),
    )
}

DEFAULT_MODEL_TOKEN_LIMITS: dict[str, int] = {
    "gpt-4": 128_000,
    "gpt-3.5-turbo": 16_385,
    "claude-3": 200_000,
    "claude-2": 100_000,
    "gemini-pro": 32_760,
    "default": 100_000,
}


class Settings(BaseSettings):
    """Main configuration settings for pagewise.

    Settings are loaded from environment variables and .env files.
    Environment variables take precedence over .env file values.
    Explicit overrides (``max_tokens_per_chunk`` etc.) win over the preset.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Firecrawl API
    firecrawl_api_key: str | None = Field(
        default=None,
        description="Firecrawl API key",
    )
    firecrawl_api_url: str = Field(
        default="https://api.firecrawl.dev/v1",
        description="Firecrawl API base URL",
    )

    # Application Settings
    pagewise_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level for the application",
    )
    pagewise_log_file: Path | None = Field(
        default=None,
        description="Optional file path to write logs (defaults to console only)",
    )

    # Crawl limits
    pagewise_preset: PresetName = Field(
        default="balanced",
        description="Preset providing default limits and fetch hints",
    )
    max_tokens_per_chunk: int | None = Field(
        default=None,
        gt=0,
        description="Token budget per chunk (overrides the preset)",
    )
    safety_factor: float = Field(
        default=0.9,
        gt=0.0,
        le=1.0,
        description="Fraction of the budget an oversized page is truncated to",
    )
    max_pages_per_crawl: int | None = Field(
        default=None,
        ge=1,
        description="Maximum pages mapped per crawl (overrides the preset)",
    )
    crawl_depth: int | None = Field(
        default=None,
        ge=0,
        description="Link depth for link-following mappers (overrides the preset)",
    )
    max_search_results: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Default number of search results",
    )
    request_delay: float = Field(
        default=0.5,
        ge=0.0,
        le=60.0,
        description="Politeness delay between fetch calls in seconds",
    )
    request_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Per-request timeout in seconds (overrides the preset)",
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; pagewise/0.1)",
        description="User agent for direct HTTP fetches",
    )
    model_token_limits: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_MODEL_TOKEN_LIMITS),
        description="Context window sizes by model name",
    )

    @field_validator("pagewise_log_file", mode="before")
    @classmethod
    def expand_paths(cls, v: str | Path | None) -> Path | None:
        """Expand relative paths to absolute paths."""
        if v is None:
            return None
        return Path(v).expanduser().resolve()

    @field_validator("model_token_limits", mode="after")
    @classmethod
    def ensure_default_limit(cls, v: dict[str, int]) -> dict[str, int]:
        """Make sure unknown models fall back to a limit."""
        if "default" not in v:
            v = {**v, "default": DEFAULT_MODEL_TOKEN_LIMITS["default"]}
        return v

    @property
    def preset(self) -> CrawlPreset:
        """The active preset."""
        return PRESETS[self.pagewise_preset]

    def get_preset(self, name: str | None = None) -> CrawlPreset:
        """Look up a preset by name (the active one if None).

        Raises:
            KeyError: If no preset has that name
        """
        if name is None:
            return self.preset
        if name not in PRESETS:
            raise KeyError(f"Unknown preset '{name}'. Available: {', '.join(PRESETS)}")
        return PRESETS[name]

    def get_token_limit(self, model: str) -> int:
        """Context window for ``model``, or the default limit."""
        return self.model_token_limits.get(model, self.model_token_limits["default"])

    def get_safe_token_limit(self, model: str, safety_factor: float = 0.8) -> int:
        """Token limit for ``model`` scaled down by ``safety_factor``."""
        return int(self.get_token_limit(model) * safety_factor)

    def session_config(
        self,
        preset: str | None = None,
        max_tokens: int | None = None,
    ) -> SessionConfig:
        """Build the static configuration handed to a session.

        Args:
            preset: Preset name (defaults to the configured one)
            max_tokens: Per-call token budget, overriding settings and preset

        Returns:
            SessionConfig: Frozen configuration for one session
        """
        chosen = self.get_preset(preset)
        budget = TokenBudget(
            max_tokens_per_chunk=max_tokens or self.max_tokens_per_chunk or chosen.max_tokens_per_chunk,
            safety_factor=self.safety_factor,
        )
        return SessionConfig(
            budget=budget,
            max_pages=self.max_pages_per_crawl or chosen.max_pages_per_crawl,
            crawl_depth=chosen.crawl_depth if self.crawl_depth is None else self.crawl_depth,
            max_search_results=self.max_search_results,
            request_delay=self.request_delay,
            fetch_options=FetchOptions(
                formats=chosen.formats,
                only_main_content=chosen.only_main_content,
                include_tags=chosen.include_tags,
                exclude_tags=chosen.exclude_tags,
                wait_for=chosen.wait_for,
                timeout=self.request_timeout or chosen.timeout,
            ),
        )

    def model_dump_safe(self) -> dict[str, object]:
        """Dump settings with the API key redacted.

        Useful for logging configuration without exposing credentials.
        """
        return {
            "firecrawl_api_url": self.firecrawl_api_url,
            "firecrawl_api_key": "***" if self.firecrawl_api_key else None,
            "log_level": self.pagewise_log_level,
            "preset": self.pagewise_preset,
            "max_tokens_per_chunk": self.max_tokens_per_chunk or self.preset.max_tokens_per_chunk,
            "safety_factor": self.safety_factor,
            "request_delay": self.request_delay,
            "max_search_results": self.max_search_results,
        }


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Creates and caches the settings on first call. The instance is treated
    as read-only; use :func:`reload_settings` to pick up changes.

    Returns:
        Settings: The global settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment/files.

    Returns:
        Settings: The newly loaded settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
