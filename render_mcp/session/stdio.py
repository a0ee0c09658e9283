"""
Stdio session: the workspace selection is machine-wide.

A stdio server serves exactly one local client, so the selection is read
from and persisted to the config file rather than a session store.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from render_mcp import config
from render_mcp.session.base import Session

if TYPE_CHECKING:
    from render_mcp.context import RequestContext


class StdioSession(Session):

    async def get_workspace(self, ctx: "RequestContext") -> str:
        return await asyncio.to_thread(config.current_workspace_id)

    async def set_workspace(self, ctx: "RequestContext", workspace_id: str) -> None:
        await asyncio.to_thread(config.select_workspace, workspace_id)
