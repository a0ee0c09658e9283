"""
Context functions that bind a Session to the per-call RequestContext.

- stdio: always a StdioSession; the session store is not consulted
- HTTP: the store's session for the call's connection identifier

If the store fails, the HTTP binder logs and returns the context without a
session: the call still runs, only workspace-scoped tools fail, with
SessionUnavailableError.
"""

from __future__ import annotations

from typing import Any

from render_mcp.context import RequestContext
from render_mcp.errors import SessionStoreError, SessionUnavailableError
from render_mcp.logging_utils import get_logger
from render_mcp.multicontext import HTTPContextFunc
from render_mcp.session.base import Session, SessionStore
from render_mcp.session.stdio import StdioSession

logger = get_logger(__name__)


async def context_with_stdio_session(ctx: RequestContext) -> RequestContext:
    return ctx.with_values(session=StdioSession())


def context_with_http_session(store: SessionStore) -> HTTPContextFunc:
    """Build the HTTP context function bound to ``store``."""

    async def bind(ctx: RequestContext, request: Any) -> RequestContext:
        if not ctx.connection_id:
            logger.warning("No connection identifier on HTTP call; no session bound")
            return ctx
        try:
            session = await store.get(ctx, ctx.connection_id)
        except SessionStoreError as e:
            logger.warning(f"Session store unavailable for {ctx.connection_id}: {e}")
            return ctx
        return ctx.with_values(session=session)

    return bind


def session_from_context(ctx: RequestContext) -> Session:
    """
    The session bound to ``ctx``.

    Raises:
        SessionUnavailableError: if no session could be bound for this call
    """
    if ctx.session is None:
        raise SessionUnavailableError()
    return ctx.session
