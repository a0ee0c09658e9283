"""
Tests for render_mcp/authn.py - bearer token plumbing.
"""

import pytest
from starlette.requests import Request

from render_mcp.authn import (
    api_token_from_context,
    context_with_api_token,
    context_with_api_token_from_config,
    context_with_api_token_from_header,
)
from render_mcp.context import RequestContext
from render_mcp.errors import NotAuthenticatedError


def make_request(headers):
    return Request({
        "type": "http",
        "method": "POST",
        "path": "/mcp",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    })


class TestFromHeader:

    @pytest.mark.asyncio
    async def test_strips_bearer_prefix(self):
        ctx = await context_with_api_token_from_header(
            RequestContext(), make_request({"Authorization": "Bearer rnd_abc"})
        )
        assert api_token_from_context(ctx) == "rnd_abc"

    @pytest.mark.asyncio
    async def test_raw_token(self):
        ctx = await context_with_api_token_from_header(
            RequestContext(), make_request({"Authorization": "rnd_abc"})
        )
        assert api_token_from_context(ctx) == "rnd_abc"

    @pytest.mark.asyncio
    async def test_missing_header_leaves_context(self):
        ctx = RequestContext()
        assert await context_with_api_token_from_header(ctx, make_request({})) is ctx
        with pytest.raises(NotAuthenticatedError):
            api_token_from_context(ctx)

    @pytest.mark.asyncio
    async def test_no_request(self):
        ctx = RequestContext()
        assert await context_with_api_token_from_header(ctx, None) is ctx


class TestFromConfig:

    @pytest.mark.asyncio
    async def test_env_key(self, monkeypatch):
        monkeypatch.setenv("RENDER_API_KEY", "rnd_env")
        ctx = await context_with_api_token_from_config(RequestContext())
        assert api_token_from_context(ctx) == "rnd_env"

    @pytest.mark.asyncio
    async def test_missing_key(self):
        with pytest.raises(NotAuthenticatedError):
            await context_with_api_token_from_config(RequestContext())


def test_context_is_immutable():
    base = RequestContext()
    ctx = context_with_api_token(base, "tok")
    assert base.api_token is None
    assert ctx.api_token == "tok"
