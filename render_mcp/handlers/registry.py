"""
MCP tool registry - auto-registration, argument validation and error shaping.

Handlers are plain coroutines ``handler(ctx, client, params)``; the
``mcp_tool`` decorator registers them together with the pydantic model that
describes (and validates) their arguments.
"""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from mcp.types import CallToolResult, TextContent, Tool, ToolAnnotations
from pydantic import BaseModel, ValidationError

from render_mcp.client.client import RenderClient
from render_mcp.context import RequestContext
from render_mcp.errors import RenderMCPError
from render_mcp.logging_utils import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0

Handler = Callable[[RequestContext, RenderClient, Any], Awaitable[Any]]


@dataclass
class ToolDefinition:
    """Single source of truth for a registered MCP tool."""
    name: str
    handler: Handler
    params_model: Type[BaseModel]
    description: str = ""
    timeout: float = DEFAULT_TIMEOUT
    annotations: Dict[str, Any] = field(default_factory=dict)

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.params_model.model_json_schema(by_alias=True),
            annotations=ToolAnnotations(**self.annotations) if self.annotations else None,
        )


_TOOL_DEFINITIONS: Dict[str, ToolDefinition] = {}


def mcp_tool(
    name: str,
    params_model: Type[BaseModel],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    description: Optional[str] = None,
    title: Optional[str] = None,
    read_only: bool = False,
    destructive: Optional[bool] = None,
    idempotent: bool = False,
):
    """
    Register a tool handler.

    Usage:
        @mcp_tool("get_service", GetServiceParams, title="Get service details", read_only=True)
        async def handle_get_service(ctx, client, params):
            ...

    Args:
        name: Tool name exposed to MCP clients
        params_model: pydantic model for the arguments; its JSON schema is the tool's input schema
        timeout: Seconds before the call is abandoned
        description: Tool description (defaults to the handler's docstring)
        title, read_only, destructive, idempotent: MCP tool annotations
    """
    def decorator(func: Handler) -> Handler:
        tool_description = description or (func.__doc__ and " ".join(func.__doc__.split())) or ""
        annotations: Dict[str, Any] = {
            "readOnlyHint": read_only,
            "idempotentHint": idempotent,
            "openWorldHint": True,
        }
        if title:
            annotations["title"] = title
        if destructive is not None:
            annotations["destructiveHint"] = destructive

        _TOOL_DEFINITIONS[name] = ToolDefinition(
            name=name,
            handler=func,
            params_model=params_model,
            description=tool_description,
            timeout=timeout,
            annotations=annotations,
        )
        return func
    return decorator


def get_tool_definition(name: str) -> Optional[ToolDefinition]:
    return _TOOL_DEFINITIONS.get(name)


def list_tool_definitions() -> List[ToolDefinition]:
    """All registered tools, sorted by name."""
    return [_TOOL_DEFINITIONS[name] for name in sorted(_TOOL_DEFINITIONS)]


# --- Result shaping ---

def success_response(result: Any) -> TextContent:
    """Strings pass through; anything else is rendered as JSON."""
    if isinstance(result, str):
        return TextContent(type="text", text=result)
    return TextContent(type="text", text=json.dumps(result, indent=2, default=str))


def error_response(message: str, error_type: str = "error") -> TextContent:
    return TextContent(
        type="text",
        text=json.dumps({"success": False, "error": message, "error_type": error_type}, indent=2),
    )


def _validation_message(e: ValidationError) -> str:
    problems = []
    for err in e.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "arguments"
        problems.append(f"{location}: {err.get('msg')}")
    return "invalid arguments: " + "; ".join(problems)


async def dispatch_tool(
    name: str,
    ctx: RequestContext,
    arguments: Optional[Dict[str, Any]],
    *,
    client: Optional[RenderClient] = None,
) -> CallToolResult:
    """
    Validate ``arguments`` and run the named tool.

    Never raises: unknown tools, invalid arguments, timeouts and handler
    exceptions all come back as a CallToolResult with ``isError`` set.
    """
    td = _TOOL_DEFINITIONS.get(name)
    if td is None:
        return CallToolResult(
            content=[error_response(f"Unknown tool: {name}", "UnknownTool")], isError=True
        )

    try:
        params = td.params_model.model_validate(arguments or {})
    except ValidationError as e:
        return CallToolResult(
            content=[error_response(_validation_message(e), "ValidationError")], isError=True
        )

    owns_client = client is None
    if owns_client:
        client = RenderClient()

    start_time = time.time()
    try:
        result = await asyncio.wait_for(td.handler(ctx, client, params), timeout=td.timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Tool '{name}' timed out after {td.timeout}s")
        return CallToolResult(
            content=[error_response(f"Tool '{name}' timed out after {td.timeout} seconds.", "Timeout")],
            isError=True,
        )
    except RenderMCPError as e:
        logger.info(f"Tool '{name}' failed: {e}")
        return CallToolResult(
            content=[error_response(str(e), type(e).__name__)], isError=True
        )
    except Exception as e:
        logger.error(f"Tool '{name}' error: {e}", exc_info=True)
        return CallToolResult(
            content=[error_response(f"Error executing tool '{name}': {e}", type(e).__name__)],
            isError=True,
        )
    finally:
        if owns_client:
            await client.aclose()

    elapsed = time.time() - start_time
    if elapsed > td.timeout * 0.8:
        logger.warning(
            f"Tool '{name}' took {elapsed:.2f}s "
            f"({elapsed/td.timeout*100:.1f}% of {td.timeout}s timeout)"
        )
    return CallToolResult(content=[success_response(result)], isError=False)
