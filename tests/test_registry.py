"""
Tests for render_mcp/handlers/registry.py - tool registration and dispatch.
"""

import asyncio
import json

import pytest
from pydantic import BaseModel, Field

from render_mcp.context import RequestContext
from render_mcp.errors import NoWorkspaceError
from render_mcp.handlers import registry
from render_mcp.handlers.registry import (
    dispatch_tool,
    get_tool_definition,
    list_tool_definitions,
    mcp_tool,
)


class EchoParams(BaseModel):
    """Echo the input back."""
    service_id: str = Field(..., alias="serviceId")
    count: int = 1


@pytest.fixture(autouse=True)
def clean_registry():
    """Restore the registry after each test to prevent cross-contamination."""
    original = dict(registry._TOOL_DEFINITIONS)
    yield
    registry._TOOL_DEFINITIONS.clear()
    registry._TOOL_DEFINITIONS.update(original)


def payload(result):
    return json.loads(result.content[0].text)


class TestMcpTool:

    def test_registers_definition(self):
        @mcp_tool("test_echo", EchoParams, title="Echo", read_only=True)
        async def handle_echo(ctx, client, params):
            """Echo a service id."""
            return params.service_id

        td = get_tool_definition("test_echo")
        assert td.handler is handle_echo
        assert td.description == "Echo a service id."
        assert td.annotations["readOnlyHint"] is True
        assert td.annotations["title"] == "Echo"

    def test_tool_schema_uses_aliases(self):
        @mcp_tool("test_echo", EchoParams)
        async def handle_echo(ctx, client, params):
            return ""

        tool = get_tool_definition("test_echo").to_tool()
        assert tool.name == "test_echo"
        assert "serviceId" in tool.inputSchema["properties"]
        assert tool.inputSchema["required"] == ["serviceId"]

    def test_list_sorted(self):
        @mcp_tool("zz_tool", EchoParams)
        async def handle_z(ctx, client, params):
            return ""

        @mcp_tool("aa_tool", EchoParams)
        async def handle_a(ctx, client, params):
            return ""

        names = [td.name for td in list_tool_definitions()]
        assert names == sorted(names)
        assert "aa_tool" in names and "zz_tool" in names


class TestDispatch:

    @pytest.mark.asyncio
    async def test_string_result(self):
        @mcp_tool("test_echo", EchoParams)
        async def handle_echo(ctx, client, params):
            return f"{params.service_id} x{params.count}"

        result = await dispatch_tool("test_echo", RequestContext(), {"serviceId": "srv-1"}, client=object())
        assert result.isError is False
        assert result.content[0].text == "srv-1 x1"

    @pytest.mark.asyncio
    async def test_structured_result_is_json(self):
        @mcp_tool("test_echo", EchoParams)
        async def handle_echo(ctx, client, params):
            return {"id": params.service_id}

        result = await dispatch_tool("test_echo", RequestContext(), {"serviceId": "srv-1"}, client=object())
        assert json.loads(result.content[0].text) == {"id": "srv-1"}

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        result = await dispatch_tool("no_such_tool", RequestContext(), {}, client=object())
        assert result.isError is True
        assert payload(result)["error_type"] == "UnknownTool"

    @pytest.mark.asyncio
    async def test_invalid_arguments(self):
        called = []

        @mcp_tool("test_echo", EchoParams)
        async def handle_echo(ctx, client, params):
            called.append(params)
            return ""

        result = await dispatch_tool("test_echo", RequestContext(), {"count": "many"}, client=object())
        body = payload(result)
        assert result.isError is True
        assert body["success"] is False
        assert body["error_type"] == "ValidationError"
        assert "serviceId" in body["error"]
        assert called == []

    @pytest.mark.asyncio
    async def test_domain_error(self):
        @mcp_tool("test_echo", EchoParams)
        async def handle_echo(ctx, client, params):
            raise NoWorkspaceError()

        result = await dispatch_tool("test_echo", RequestContext(), {"serviceId": "s"}, client=object())
        body = payload(result)
        assert result.isError is True
        assert body["error_type"] == "NoWorkspaceError"
        assert "select_workspace" in body["error"]

    @pytest.mark.asyncio
    async def test_unexpected_error(self):
        @mcp_tool("test_echo", EchoParams)
        async def handle_echo(ctx, client, params):
            raise KeyError("id")

        result = await dispatch_tool("test_echo", RequestContext(), {"serviceId": "s"}, client=object())
        body = payload(result)
        assert result.isError is True
        assert body["error_type"] == "KeyError"
        assert "test_echo" in body["error"]

    @pytest.mark.asyncio
    async def test_timeout(self):
        @mcp_tool("test_slow", EchoParams, timeout=0.05)
        async def handle_slow(ctx, client, params):
            await asyncio.sleep(1)

        result = await dispatch_tool("test_slow", RequestContext(), {"serviceId": "s"}, client=object())
        assert result.isError is True
        assert payload(result)["error_type"] == "Timeout"
