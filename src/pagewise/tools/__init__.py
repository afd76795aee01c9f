"""Function-calling tools exposing the pagewise engine."""

from pagewise.tools.admin import ConfigTool, UsageTool
from pagewise.tools.base import BaseTool, ToolResult
from pagewise.tools.registry import ToolRegistry, create_default_registry
from pagewise.tools.schema import ToolDefinition, create_tool_definition, pydantic_to_json_schema
from pagewise.tools.web import BatchTool, CrawlTool, MapTool, ScrapeTool, SearchTool

__all__ = [
    # Base classes
    "BaseTool",
    "ToolResult",
    # Schemas
    "ToolDefinition",
    "create_tool_definition",
    "pydantic_to_json_schema",
    # Tools
    "ScrapeTool",
    "CrawlTool",
    "MapTool",
    "SearchTool",
    "BatchTool",
    "ConfigTool",
    "UsageTool",
    # Registry
    "ToolRegistry",
    "create_default_registry",
]
