"""Tests for configuration management."""

import pytest
from pydantic import ValidationError

from pagewise.config import PRESETS, Settings, get_settings, reload_settings


class TestSettings:
    """Test the Settings class."""

    def test_default_settings(self, test_settings):
        """Test that Field defaults apply without environment overrides."""
        assert test_settings.pagewise_preset == "balanced"
        assert test_settings.pagewise_log_level == "INFO"
        assert test_settings.max_tokens_per_chunk is None
        assert test_settings.safety_factor == 0.9
        assert test_settings.max_search_results == 10
        assert test_settings.firecrawl_api_url == "https://api.firecrawl.dev/v1"

    def test_environment_overrides(self, test_settings, monkeypatch):
        monkeypatch.setenv("PAGEWISE_PRESET", "api-safe")
        monkeypatch.setenv("MAX_TOKENS_PER_CHUNK", "42000")

        settings = Settings()

        assert settings.pagewise_preset == "api-safe"
        assert settings.max_tokens_per_chunk == 42_000

    def test_rejects_unknown_preset(self, test_settings):
        with pytest.raises(ValidationError):
            Settings(pagewise_preset="everything")

    def test_rejects_invalid_budget(self, test_settings):
        with pytest.raises(ValidationError):
            Settings(max_tokens_per_chunk=0)
        with pytest.raises(ValidationError):
            Settings(safety_factor=1.2)

    def test_log_file_expanded(self, test_settings, tmp_path):
        settings = Settings(pagewise_log_file=tmp_path / "logs" / ".." / "pagewise.log")

        assert settings.pagewise_log_file.is_absolute()
        assert settings.pagewise_log_file == (tmp_path / "pagewise.log").resolve()

    def test_model_limits_keep_default(self, test_settings):
        settings = Settings(model_token_limits={"local-llm": 8_192})

        assert settings.get_token_limit("local-llm") == 8_192
        assert settings.get_token_limit("unknown") == 100_000

    def test_safe_token_limit(self, test_settings):
        assert test_settings.get_safe_token_limit("gpt-4") == 102_400
        assert test_settings.get_safe_token_limit("claude-3", safety_factor=0.5) == 100_000

    def test_model_dump_safe_redacts_key(self, test_settings):
        dumped = test_settings.model_dump_safe()

        assert dumped["firecrawl_api_key"] == "***"
        assert "fc-test" not in str(dumped)
        assert dumped["max_tokens_per_chunk"] == 100_000


class TestPresets:
    """Test preset lookup and session configuration."""

    def test_all_presets_present(self):
        assert set(PRESETS) == {
            "lightweight",
            "balanced",
            "comprehensive",
            "code-analysis",
            "api-safe",
        }

    def test_get_preset(self, test_settings):
        assert test_settings.get_preset().name == "balanced"
        assert test_settings.get_preset("comprehensive").max_tokens_per_chunk == 150_000

    def test_unknown_preset_raises(self, test_settings):
        with pytest.raises(KeyError, match="Unknown preset"):
            test_settings.get_preset("everything")

    def test_session_config_from_preset(self, test_settings):
        config = test_settings.session_config("code-analysis")

        assert config.budget.max_tokens_per_chunk == 120_000
        assert config.budget.truncation_target == 108_000
        assert config.max_pages == 80
        assert config.crawl_depth == 3
        assert config.request_delay == 0.0
        assert config.fetch_options.include_tags == ("code", "pre", "article", "main")
        assert config.fetch_options.formats == ("markdown", "html")

    def test_call_budget_wins(self, test_settings):
        config = test_settings.session_config(max_tokens=5_000)

        assert config.budget.max_tokens_per_chunk == 5_000

    def test_settings_override_preset(self, test_settings):
        settings = test_settings.model_copy(
            update={"max_tokens_per_chunk": 20_000, "crawl_depth": 0, "request_timeout": 5.0}
        )

        config = settings.session_config("comprehensive")

        assert config.budget.max_tokens_per_chunk == 20_000
        assert config.crawl_depth == 0
        assert config.max_pages == 100
        assert config.fetch_options.timeout == 5.0


class TestGlobalSettings:
    """Test the cached settings accessors."""

    def test_get_settings_cached(self, test_settings):
        reload_settings()

        assert get_settings() is get_settings()

    def test_reload_settings(self, test_settings, monkeypatch):
        first = reload_settings()
        monkeypatch.setenv("PAGEWISE_PRESET", "lightweight")

        second = reload_settings()

        assert second is not first
        assert second.pagewise_preset == "lightweight"
        assert get_settings() is second
