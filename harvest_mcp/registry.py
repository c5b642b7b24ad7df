"""Tool registry: name -> category -> input model -> handler.

Every tool call goes through :meth:`ToolRegistry.call`, which is the single
place where exceptions are turned into MCP error results.
"""

import inspect
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from mcp import types

from harvest_mcp.client import HarvestClient
from harvest_mcp.errors import HarvestAPIError, ToolInputError
from harvest_mcp.validation import EmptyInput, ToolInput, input_schema, validate_input

logger = logging.getLogger("harvest-mcp.registry")

Handler = Callable[[HarvestClient, Any], Awaitable[Any]]


def success_result(payload: Any) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=json.dumps(payload, indent=2, default=str))],
    )


def error_result(message: str) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=message)],
        isError=True,
    )


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    category: str
    description: str
    input_model: Type[ToolInput]
    handler: Handler

    def to_mcp_tool(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=input_schema(self.input_model),
        )


class ToolGroup:
    """Collects the tools of one category.

    Handlers are registered with the :meth:`tool` decorator, much like
    ``FastMCP.tool``: the name defaults to the function name and the
    description to its docstring.
    """

    def __init__(self, category: str):
        self.category = category
        self.definitions: List[ToolDefinition] = []

    def tool(
        self,
        input_model: Type[ToolInput] = EmptyInput,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Callable[[Handler], Handler]:
        def decorator(fn: Handler) -> Handler:
            self.definitions.append(ToolDefinition(
                name=name or fn.__name__,
                category=self.category,
                description=description or inspect.getdoc(fn) or "",
                input_model=input_model,
                handler=fn,
            ))
            return fn
        return decorator


class ToolRegistry:
    def __init__(self, client: HarvestClient):
        self.client = client
        self._tools: Dict[str, ToolDefinition] = {}

    def register(self, definition: ToolDefinition) -> None:
        if definition.name in self._tools:
            raise ValueError(f"Tool already registered: {definition.name}")
        self._tools[definition.name] = definition

    def include(self, group: ToolGroup) -> None:
        for definition in group.definitions:
            self.register(definition)

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def categories(self) -> List[str]:
        seen: List[str] = []
        for definition in self._tools.values():
            if definition.category not in seen:
                seen.append(definition.category)
        return seen

    def tools_by_category(self, category: str) -> List[ToolDefinition]:
        return [d for d in self._tools.values() if d.category == category]

    def list_tools(self) -> List[types.Tool]:
        return [d.to_mcp_tool() for d in self._tools.values()]

    async def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> types.CallToolResult:
        """Validate ``arguments``, run the tool and map the outcome to a tool result."""
        definition = self._tools.get(name)
        if definition is None:
            logger.warning(f"Call to unknown tool {name}")
            return error_result(f"Unknown tool: {name}")

        try:
            params = validate_input(definition.input_model, arguments, name)
            payload = await definition.handler(self.client, params)
        except (ToolInputError, HarvestAPIError) as e:
            logger.error(f"Tool {name} failed: {e}")
            return error_result(str(e))
        except Exception as e:
            logger.exception(f"Tool execution failed for {name}")
            return error_result(f"Failed to execute {name}: {e}")

        return success_result(payload)
