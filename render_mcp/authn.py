"""
Bearer token plumbing.

HTTP mode: each caller sends its own Render API key in the Authorization
header. Stdio mode: the key comes from RENDER_API_KEY.
"""

from typing import Any

from render_mcp.config import default_api_config
from render_mcp.context import RequestContext
from render_mcp.errors import NotAuthenticatedError

_BEARER_PREFIX = "Bearer "


def context_with_api_token(ctx: RequestContext, token: str) -> RequestContext:
    return ctx.with_values(api_token=token)


async def context_with_api_token_from_header(ctx: RequestContext, request: Any) -> RequestContext:
    """HTTP context function: take the token from the Authorization header."""
    if request is None:
        return ctx

    token = request.headers.get("authorization", "")
    if not token:
        return ctx

    # MCP Inspector adds the Bearer prefix itself; other clients may not
    if len(token) > len(_BEARER_PREFIX) and token.startswith(_BEARER_PREFIX):
        token = token[len(_BEARER_PREFIX):]

    return context_with_api_token(ctx, token)


async def context_with_api_token_from_config(ctx: RequestContext) -> RequestContext:
    """
    Stdio context function: take the token from the environment.

    Raises:
        NotAuthenticatedError: if RENDER_API_KEY is unset
    """
    return context_with_api_token(ctx, default_api_config().key)


def api_token_from_context(ctx: RequestContext) -> str:
    if not ctx.api_token:
        raise NotAuthenticatedError()
    return ctx.api_token
