"""
Per-call request context.

A RequestContext is built once per tool invocation by the transport layer
and passed explicitly to every handler, repo and client call. It is
immutable: context functions return a new value via ``with_values``.

Fields are only set by the context functions that own them:
- connection_id: transport connection identifier (HTTP: mcp-session-id)
- session: bound by render_mcp.session.binders
- connection: bound by render_mcp.httpcontext
- api_token: bound by render_mcp.authn
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from render_mcp.httpcontext import ConnectionMetadata
    from render_mcp.session.base import Session


@dataclass(frozen=True)
class RequestContext:
    connection_id: Optional[str] = None
    transport: str = "stdio"
    session: Optional["Session"] = None
    connection: Optional["ConnectionMetadata"] = None
    api_token: Optional[str] = None

    def with_values(self, **changes: Any) -> "RequestContext":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
