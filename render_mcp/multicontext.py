"""
Composition of context functions.

Each transport builds its per-call RequestContext by running a list of
context functions in registration order, each one receiving the context the
previous one returned.
"""

from typing import Any, Awaitable, Callable

from render_mcp.context import RequestContext

StdioContextFunc = Callable[[RequestContext], Awaitable[RequestContext]]
HTTPContextFunc = Callable[[RequestContext, Any], Awaitable[RequestContext]]


def chain_stdio_context_funcs(*fns: StdioContextFunc) -> StdioContextFunc:
    async def chained(ctx: RequestContext) -> RequestContext:
        for fn in fns:
            ctx = await fn(ctx)
        return ctx

    return chained


def chain_http_context_funcs(*fns: HTTPContextFunc) -> HTTPContextFunc:
    async def chained(ctx: RequestContext, request: Any) -> RequestContext:
        for fn in fns:
            ctx = await fn(ctx, request)
        return ctx

    return chained
