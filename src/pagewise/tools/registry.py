"""Name-keyed collection of tools and the default pagewise wiring."""

from typing import Any, Iterator

from pagewise.backends.base import ContentFetcher, SearchBackend, SiteMapper
from pagewise.config import Settings
from pagewise.logging import get_logger
from pagewise.tools.admin import ConfigTool, UsageTool
from pagewise.tools.base import BaseTool, ToolResult
from pagewise.tools.schema import ToolDefinition
from pagewise.tools.web import BatchTool, CrawlTool, MapTool, ScrapeTool, SearchTool
from pagewise.usage import TokenUsageTracker

logger = get_logger("pagewise.tools.registry")


class ToolRegistry:
    """Tools by unique name, in registration order.

    Example:
        >>> registry = create_default_registry(settings, fetcher, mapper, searcher)
        >>> request["tools"] = [d.model_dump() for d in registry.get_tool_definitions()]
        >>> result = await registry.execute(call.name, call.arguments)
    """

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Add a tool.

        Raises:
            ValueError: If another tool already uses the name
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def unregister(self, name: str) -> BaseTool:
        """Remove and return a tool.

        Raises:
            KeyError: If no tool has that name
        """
        try:
            return self._tools.pop(name)
        except KeyError:
            raise KeyError(f"Tool '{name}' is not registered") from None

    def get(self, name: str) -> BaseTool | None:
        return self._tools.get(name)

    def list_tools(self) -> list[BaseTool]:
        return list(self._tools.values())

    def get_tool_names(self) -> list[str]:
        return list(self._tools)

    def get_tool_definitions(self) -> list[ToolDefinition]:
        return [tool.to_tool_definition() for tool in self._tools.values()]

    async def execute(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Run a tool call issued by a model.

        An unknown tool name is reported as an error result so the model can
        correct itself.
        """
        tool = self._tools.get(name)
        if tool is None:
            logger.warning(f"Model requested unknown tool: {name}")
            return ToolResult.error_result(
                error=f"Unknown tool '{name}'. Available: {', '.join(self._tools)}"
            )
        return await tool.run(arguments or {})

    def clear(self) -> None:
        self._tools.clear()

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[BaseTool]:
        return iter(self._tools.values())

    def __repr__(self) -> str:
        return f"<ToolRegistry: {len(self._tools)} tools ({', '.join(self._tools)})>"


def create_default_registry(
    settings: Settings,
    fetcher: ContentFetcher,
    mapper: SiteMapper,
    searcher: SearchBackend,
    tracker: TokenUsageTracker | None = None,
) -> ToolRegistry:
    """Registry with the scrape, crawl, map, search, batch, config and usage tools.

    All content tools report into the same tracker, which the usage tool
    reads. A new tracker is created when none is given.
    """
    tracker = tracker or TokenUsageTracker()
    registry = ToolRegistry()

    for tool in (
        ScrapeTool(fetcher, settings, tracker),
        CrawlTool(fetcher, mapper, settings, tracker),
        MapTool(mapper, tracker),
        SearchTool(searcher, settings, fetcher=fetcher, tracker=tracker),
        BatchTool(fetcher, settings, tracker),
        ConfigTool(settings),
        UsageTool(tracker, settings),
    ):
        registry.register(tool)

    logger.info(f"Registered {len(registry)} tools", preset=settings.pagewise_preset)
    return registry
