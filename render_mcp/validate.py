"""Workspace guard for tools that act on an existing resource."""

from render_mcp.context import RequestContext
from render_mcp.errors import WorkspaceMismatchError
from render_mcp.session.binders import session_from_context


async def workspace_matches(ctx: RequestContext, owner_id: str) -> None:
    """
    Check that ``owner_id`` is the workspace selected for this call.

    Raises:
        NoWorkspaceError: nothing selected yet
        SessionUnavailableError: no session bound
        WorkspaceMismatchError: the resource lives in another workspace
    """
    workspace = await session_from_context(ctx).get_workspace(ctx)
    if workspace and workspace != owner_id:
        raise WorkspaceMismatchError(workspace, owner_id)
