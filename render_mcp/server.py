"""
render-mcp-server entry point.

Transports:
- stdio (default): one client per process; API key from RENDER_API_KEY,
  workspace persisted in the config file
- http: Streamable HTTP at /mcp plus /health; API key per request from the
  Authorization header, workspace kept per MCP session (memory or Redis)

Usage:
    render-mcp-server
    render-mcp-server --transport http --port 10000 --redis-url redis://localhost:6379/0
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import os
import sys
from typing import Any, Awaitable, Callable, Optional

import uvicorn
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.types import TextContent, Tool
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from render_mcp import __version__
from render_mcp.authn import context_with_api_token_from_config, context_with_api_token_from_header
from render_mcp.client import RenderClient
from render_mcp.config import get_redis_url
from render_mcp.context import RequestContext
from render_mcp.errors import RenderMCPError
from render_mcp.handlers import dispatch_tool, list_tool_definitions
from render_mcp.handlers.registry import error_response
from render_mcp.httpcontext import context_with_connection_metadata
from render_mcp.logging_utils import configure_logging, get_logger
from render_mcp.multicontext import chain_http_context_funcs, chain_stdio_context_funcs
from render_mcp.session import (
    SessionStore,
    context_with_http_session,
    context_with_stdio_session,
    create_session_store,
)

logger = get_logger(__name__)

SERVER_NAME = "render-mcp-server"
SESSION_ID_HEADER = "mcp-session-id"

ContextFactory = Callable[[Any], Awaitable[RequestContext]]


class ToolCallError(RenderMCPError):
    """Raised to the MCP layer so the tool result is flagged as an error."""


# --- Per-call context ---

def stdio_context_factory() -> ContextFactory:
    chain = chain_stdio_context_funcs(
        context_with_api_token_from_config,
        context_with_stdio_session,
    )

    async def make(request: Any) -> RequestContext:
        return await chain(RequestContext(transport="stdio"))

    return make


def http_context_factory(store: SessionStore) -> ContextFactory:
    chain = chain_http_context_funcs(
        context_with_api_token_from_header,
        context_with_http_session(store),
        context_with_connection_metadata,
    )

    async def make(request: Any) -> RequestContext:
        connection_id = request.headers.get(SESSION_ID_HEADER) if request is not None else None
        return await chain(
            RequestContext(transport="http", connection_id=connection_id or None), request
        )

    return make


# --- MCP server ---

def build_server(client: RenderClient, make_context: ContextFactory) -> Server:
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return [td.to_tool() for td in list_tool_definitions()]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        request = getattr(server.request_context, "request", None)
        try:
            ctx = await make_context(request)
        except RenderMCPError as e:
            logger.info(f"Could not build context for '{name}': {e}")
            raise ToolCallError(error_response(str(e), type(e).__name__).text) from e

        result = await dispatch_tool(name, ctx, arguments, client=client)
        if result.isError:
            raise ToolCallError(result.content[0].text)
        return list(result.content)

    return server


async def run_stdio() -> None:
    async with RenderClient() as client:
        server = build_server(client, stdio_context_factory())
        logger.info(f"{SERVER_NAME} {__version__} serving on stdio")
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())


# --- HTTP transport ---

class _StreamableHTTPEndpoint:
    """ASGI endpoint delegating /mcp to the session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager):
        self.session_manager = session_manager

    async def __call__(self, scope, receive, send) -> None:
        await self.session_manager.handle_request(scope, receive, send)


def create_http_app(client: RenderClient, store: SessionStore) -> Starlette:
    server = build_server(client, http_context_factory(store))
    session_manager = StreamableHTTPSessionManager(
        app=server,
        json_response=False,
        stateless=False,
    )

    async def http_health(request: Request) -> JSONResponse:
        """Health check endpoint"""
        store_health = await store.health_check()
        healthy = store_health.get("status") == "healthy"
        return JSONResponse(
            {
                "status": "ok" if healthy else "degraded",
                "version": __version__,
                "session_store": store_health,
            },
            status_code=200 if healthy else 503,
        )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        async with session_manager.run():
            logger.info("Streamable HTTP session manager started")
            try:
                yield
            finally:
                await store.close()
                await client.aclose()

    return Starlette(
        routes=[
            Route("/mcp", endpoint=_StreamableHTTPEndpoint(session_manager)),
            Route("/health", http_health, methods=["GET"]),
        ],
        lifespan=lifespan,
    )


async def run_http(host: str, port: int, redis_url: Optional[str]) -> None:
    store = create_session_store(redis_url)
    app = create_http_app(RenderClient(), store)

    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level="info",
        timeout_keep_alive=5,
        timeout_graceful_shutdown=10,
    )
    logger.info(f"{SERVER_NAME} {__version__} serving on http://{host}:{port}/mcp")
    await uvicorn.Server(config).serve()


# --- CLI ---

def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog=SERVER_NAME, description="MCP server for the Render API")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default=os.getenv("TRANSPORT", "stdio"),
        help="Transport to serve on (default: stdio)",
    )
    parser.add_argument("--host", default="0.0.0.0", help="HTTP bind host (default: 0.0.0.0)")
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("PORT", "10000")), help="HTTP port (default: 10000)"
    )
    parser.add_argument(
        "--redis-url",
        default=get_redis_url(),
        help="Redis URL for HTTP sessions (default: REDIS_URL; in-memory when unset)",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.transport == "http":
            asyncio.run(run_http(args.host, args.port, args.redis_url))
        else:
            asyncio.run(run_stdio())
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
