"""
In-process session store.

Sessions live as long as the process and are not shared between processes.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Dict

from render_mcp.errors import NoWorkspaceError
from render_mcp.logging_utils import get_logger
from render_mcp.session.base import Session, SessionStore

if TYPE_CHECKING:
    from render_mcp.context import RequestContext

logger = get_logger(__name__)


class InMemorySession(Session):

    def __init__(self):
        self._workspace_id = ""

    async def get_workspace(self, ctx: "RequestContext") -> str:
        if not self._workspace_id:
            raise NoWorkspaceError()
        return self._workspace_id

    async def set_workspace(self, ctx: "RequestContext", workspace_id: str) -> None:
        self._workspace_id = workspace_id


class InMemoryStore(SessionStore):
    """
    Thread-safe: lookup-or-create runs under a lock so concurrent calls
    never corrupt the map.
    """

    def __init__(self):
        self._sessions: Dict[str, InMemorySession] = {}
        self._lock = threading.Lock()

    async def get(self, ctx: "RequestContext", session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = InMemorySession()
                self._sessions[session_id] = session
                logger.debug(f"Session created in memory: {session_id}")
            return session

    def __len__(self) -> int:
        return len(self._sessions)

    async def health_check(self) -> Dict[str, Any]:
        return {"backend": "memory", "status": "healthy", "session_count": len(self)}
