"""
Per-connection session layer.

Usage:
    from render_mcp.session import create_session_store, session_from_context

    store = create_session_store(redis_url)      # at startup
    workspace = await session_from_context(ctx).get_workspace(ctx)
"""

from typing import Optional

from render_mcp.logging_utils import get_logger

from .base import Session, SessionStore
from .binders import context_with_http_session, context_with_stdio_session, session_from_context
from .memory import InMemorySession, InMemoryStore
from .redis_store import RedisSession, RedisStore
from .stdio import StdioSession

logger = get_logger(__name__)


def create_session_store(redis_url: Optional[str] = None) -> SessionStore:
    """Pick the session backend: Redis when a URL is configured, else memory."""
    if redis_url:
        logger.info("Using Redis session store")
        return RedisStore(redis_url)
    logger.info("Using in-memory session store")
    return InMemoryStore()


__all__ = [
    "Session",
    "SessionStore",
    "InMemorySession",
    "InMemoryStore",
    "RedisSession",
    "RedisStore",
    "StdioSession",
    "context_with_http_session",
    "context_with_stdio_session",
    "create_session_store",
    "session_from_context",
]
