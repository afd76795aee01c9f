"""Function-calling definitions for tools.

Tool parameters are Pydantic models. Their JSON Schema is trimmed to what
function-calling APIs accept reliably: titles are dropped and optional
fields (``X | None``) are advertised as plain ``X`` since omitting them is
how a model asks for the default.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ToolDefinition(BaseModel):
    """A ``{"type": "function", "function": {...}}`` entry for a model request."""

    type: Literal["function"] = "function"
    function: dict[str, Any] = Field(..., description="Name, description and parameter schema")

    @classmethod
    def from_schema(cls, name: str, description: str, parameters: dict[str, Any]) -> "ToolDefinition":
        return cls(function={"name": name, "description": description, "parameters": parameters})

    @property
    def name(self) -> str:
        return self.function["name"]


def _collapse_optional(prop: dict[str, Any]) -> dict[str, Any]:
    variants = prop.get("anyOf")
    if not variants:
        return prop
    concrete = [v for v in variants if v.get("type") != "null"]
    if len(concrete) != 1 or len(concrete) == len(variants):
        return prop
    collapsed = {key: value for key, value in prop.items() if key != "anyOf"}
    collapsed.update(concrete[0])
    return collapsed


def pydantic_to_json_schema(
    model: type[BaseModel],
    exclude_fields: set[str] | None = None,
) -> dict[str, Any]:
    """JSON Schema for a parameter model, trimmed for function calling.

    Args:
        model: Parameter model
        exclude_fields: Fields to leave out of the schema

    Returns:
        dict: Object schema with ``properties`` and ``required``
    """
    schema = model.model_json_schema()
    schema.pop("title", None)
    excluded = exclude_fields or set()

    properties = {}
    for field_name, prop in schema.get("properties", {}).items():
        if field_name in excluded:
            continue
        prop = _collapse_optional(prop)
        prop.pop("title", None)
        properties[field_name] = prop

    schema["properties"] = properties
    schema["required"] = [f for f in schema.get("required", []) if f not in excluded]
    return schema


def create_tool_definition(
    name: str,
    description: str,
    parameters_model: type[BaseModel] | None = None,
) -> ToolDefinition:
    """Definition for a tool, with an empty object schema if it takes no parameters."""
    if parameters_model is None:
        parameters: dict[str, Any] = {"type": "object", "properties": {}}
    else:
        parameters = pydantic_to_json_schema(parameters_model)
    return ToolDefinition.from_schema(name, description, parameters)
