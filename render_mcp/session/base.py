"""
Session and SessionStore interfaces.

A Session holds one piece of per-connection state: the selected workspace.
Implementations:
- InMemorySession (memory.py): process-local, HTTP transport
- RedisSession (redis_store.py): shared across processes, HTTP transport
- StdioSession (stdio.py): persisted to the config file, stdio transport
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from render_mcp.context import RequestContext


class Session(ABC):

    @abstractmethod
    async def get_workspace(self, ctx: "RequestContext") -> str:
        """
        Get the selected workspace ID.

        Raises:
            NoWorkspaceError: if no workspace was ever selected
            SessionStoreError: if the backing store cannot be reached
        """

    @abstractmethod
    async def set_workspace(self, ctx: "RequestContext", workspace_id: str) -> None:
        """Select a workspace for this session."""


class SessionStore(ABC):

    @abstractmethod
    async def get(self, ctx: "RequestContext", session_id: str) -> Session:
        """
        Get (or lazily create) the session for a connection identifier.

        Repeated calls with the same ``session_id`` expose the same state.

        Raises:
            SessionStoreError: if the backing store cannot be reached
        """

    async def close(self) -> None:
        """Release backend resources (call on shutdown)."""

    async def health_check(self) -> Dict[str, Any]:
        """Backend name and status, for the /health endpoint."""
        return {"backend": type(self).__name__, "status": "healthy"}
