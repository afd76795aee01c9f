"""Read-only configuration and usage reporting tools."""

from typing import Literal

from pydantic import BaseModel, Field

from pagewise.config import PRESETS, Settings
from pagewise.tools.base import BaseTool, ToolResult
from pagewise.usage import TokenUsageTracker


class ConfigParams(BaseModel):
    """Input for ConfigTool."""
    action: Literal["get", "list_presets", "token_limit"] = Field(
        default="get",
        description="'get' current settings, 'list_presets', or 'token_limit' for a model"
    )
    model: str | None = Field(
        default=None,
        description="Model name for the 'token_limit' action (e.g. 'gpt-4')"
    )


class ConfigTool(BaseTool[ConfigParams]):
    """Report the active configuration, presets and model token limits."""

    name = "pagewise_config"
    description = (
        "Show pagewise configuration: the active preset and limits, the available presets, "
        "or the safe token limit for a given model. Configuration cannot be changed here."
    )
    parameters_schema = ConfigParams

    def __init__(self, settings: Settings):
        super().__init__()
        self.settings = settings

    async def execute(self, params: ConfigParams) -> ToolResult:
        if params.action == "list_presets":
            return ToolResult.success_result(
                data={
                    "presets": [
                        {
                            "name": preset.name,
                            "description": preset.description,
                            "maxTokens": preset.max_tokens_per_chunk,
                            "maxPages": preset.max_pages_per_crawl,
                            "depth": preset.crawl_depth,
                        }
                        for preset in PRESETS.values()
                    ]
                }
            )

        if params.action == "token_limit":
            if not params.model:
                return ToolResult.error_result(error="'model' is required for token_limit")
            return ToolResult.success_result(
                data={
                    "model": params.model,
                    "tokenLimit": self.settings.get_token_limit(params.model),
                    "safeTokenLimit": self.settings.get_safe_token_limit(params.model),
                }
            )

        config = self.settings.session_config()
        return ToolResult.success_result(
            data={
                "currentPreset": self.settings.pagewise_preset,
                "maxTokensPerChunk": config.budget.max_tokens_per_chunk,
                "safetyFactor": config.budget.safety_factor,
                "maxPages": config.max_pages,
                "crawlDepth": config.crawl_depth,
                "requestDelay": config.request_delay,
                "formats": list(config.fetch_options.formats),
                "modelTokenLimits": dict(self.settings.model_token_limits),
            }
        )


class UsageParams(BaseModel):
    """Input for UsageTool."""
    reset: bool = Field(
        default=False,
        description="Reset the statistics after reporting them"
    )


class UsageTool(BaseTool[UsageParams]):
    """Report tokens delivered so far, per operation."""

    name = "pagewise_usage"
    description = (
        "Show how many tokens each pagewise operation has delivered in this process. "
        "Set reset=true to clear the counters."
    )
    parameters_schema = UsageParams

    def __init__(self, tracker: TokenUsageTracker, settings: Settings):
        super().__init__(tracker)
        self.settings = settings

    async def execute(self, params: UsageParams) -> ToolResult:
        data = {
            "totalTokens": self.tracker.total,
            "byOperation": self.tracker.snapshot(),
            "currentPreset": self.settings.pagewise_preset,
            "presetTokenLimit": self.settings.preset.max_tokens_per_chunk,
        }
        if params.reset:
            self.tracker.reset()
        return ToolResult.success_result(data=data, reset=params.reset)
