"""Base infrastructure for pagewise tools.

A tool wraps one engine operation for function calling: it validates the
model-supplied arguments against a Pydantic schema, runs the operation and
reports the outcome as a :class:`ToolResult`. Failures never escape
:meth:`BaseTool.run`; they become error results the model can read.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, Field, ValidationError

from pagewise.logging import get_logger
from pagewise.tools.schema import ToolDefinition, create_tool_definition
from pagewise.usage import TokenUsageTracker

logger = get_logger("pagewise.tools")

TParams = TypeVar("TParams", bound=BaseModel)


class ToolResult(BaseModel):
    """Outcome of one tool call."""

    success: bool = Field(..., description="Whether the call succeeded")
    data: Any = Field(default=None, description="JSON-serializable payload for the model")
    error: str | None = Field(default=None, description="Error message if the call failed")
    tokens: int = Field(default=0, ge=0, description="Content tokens delivered by this call")
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def success_result(cls, data: Any, tokens: int = 0, **metadata: Any) -> "ToolResult":
        return cls(success=True, data=data, tokens=tokens, metadata=metadata)

    @classmethod
    def error_result(cls, error: str, **metadata: Any) -> "ToolResult":
        return cls(success=False, error=error, metadata=metadata)

    def to_payload(self) -> dict[str, Any]:
        """Shape returned to the model: the data, or the error."""
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}

    def __str__(self) -> str:
        return f"Success: {self.data}" if self.success else f"Error: {self.error}"


class BaseTool(ABC, Generic[TParams]):
    """Abstract base for pagewise tools.

    Subclasses set ``name``, ``description`` and ``parameters_schema`` and
    implement :meth:`execute`. Tools that deliver content also set
    ``usage_operation``; the tokens of each successful call are then added
    to the tracker under that name.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    parameters_schema: ClassVar[type[BaseModel]]
    usage_operation: ClassVar[str | None] = None

    def __init__(self, tracker: TokenUsageTracker | None = None):
        missing = [
            attr
            for attr in ("name", "description", "parameters_schema")
            if not hasattr(type(self), attr)
        ]
        if missing:
            raise ValueError(
                f"{type(self).__name__} is missing class attribute(s): "
                + ", ".join(f"'{attr}'" for attr in missing)
            )
        if not (isinstance(self.parameters_schema, type) and issubclass(self.parameters_schema, BaseModel)):
            raise ValueError(
                f"parameters_schema must be a Pydantic BaseModel subclass, "
                f"got {self.parameters_schema!r}"
            )
        self.tracker = tracker

    @abstractmethod
    async def execute(self, params: TParams) -> ToolResult:
        """Run the operation with validated parameters."""

    def validate_params(self, raw_params: dict[str, Any]) -> BaseModel:
        """Parse raw arguments, raising ValidationError if they are invalid."""
        return self.parameters_schema.model_validate(raw_params)

    def to_tool_definition(self) -> ToolDefinition:
        return create_tool_definition(self.name, self.description, self.parameters_schema)

    async def run(self, raw_params: dict[str, Any]) -> ToolResult:
        """Validate, execute, record usage and time the call.

        Args:
            raw_params: Arguments as supplied by the model

        Returns:
            ToolResult: Result with ``execution_time`` in its metadata
        """
        started = time.perf_counter()

        try:
            params = self.validate_params(raw_params)
        except ValidationError as e:
            result = ToolResult.error_result(error=f"Parameter validation failed: {e}")
        else:
            try:
                result = await self.execute(params)
            except Exception as e:
                logger.exception(f"Tool {self.name} raised")
                result = ToolResult.error_result(
                    error=f"Tool execution failed: {type(e).__name__}: {e}"
                )

        if result.success and self.usage_operation and self.tracker is not None:
            self.tracker.track(self.usage_operation, result.tokens)

        result.metadata["execution_time"] = time.perf_counter() - started
        logger.debug(f"Tool {self.name} finished", success=result.success, tokens=result.tokens)
        return result

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name='{self.name}'>"
