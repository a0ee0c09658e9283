"""
Render tool handlers.

Importing this package registers every tool with the registry.
"""

from . import deploys, keyvalue, logs, metrics, postgres, services, workspaces  # noqa: F401
from .registry import (
    ToolDefinition,
    dispatch_tool,
    get_tool_definition,
    list_tool_definitions,
    mcp_tool,
)

__all__ = [
    "ToolDefinition",
    "dispatch_tool",
    "get_tool_definition",
    "list_tool_definitions",
    "mcp_tool",
]
