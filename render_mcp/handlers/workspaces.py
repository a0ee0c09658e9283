"""Workspace (owner) tools. Selection is stored on the call's session."""

import json

from render_mcp.client import ListOwnersParams, list_all, raise_for_response, unwrap_page
from render_mcp.logging_utils import get_logger
from render_mcp.session import session_from_context

from .registry import mcp_tool
from .schemas import GetSelectedWorkspaceParams, ListWorkspacesParams, SelectWorkspaceParams

logger = get_logger(__name__)


async def list_owners(ctx, client, params: ListOwnersParams):
    async def list_page(ctx, params):
        resp = await client.list_owners(ctx, params)
        raise_for_response(resp)
        return unwrap_page(resp.parsed, "owner")

    return await list_all(ctx, params, list_page)


@mcp_tool(
    "list_workspaces",
    ListWorkspacesParams,
    title="List workspaces",
    read_only=True,
    idempotent=True,
)
async def handle_list_workspaces(ctx, client, params):
    """List the workspaces that you have access to."""
    owners = await list_owners(ctx, client, ListOwnersParams())

    prefix = ""
    if len(owners) == 1:
        await session_from_context(ctx).set_workspace(ctx, owners[0]["id"])
        logger.info(f"Auto-selected only workspace {owners[0]['id']}")
        prefix = "Only one workspace found, automatically selected it\n"
    return prefix + json.dumps(owners, indent=2)


@mcp_tool(
    "select_workspace",
    SelectWorkspaceParams,
    title="Select workspace",
    idempotent=True,
)
async def handle_select_workspace(ctx, client, params: SelectWorkspaceParams):
    """
    Select a workspace to use for all actions. This tool should only be used
    after explicitly asking the user to select one, it should not be invoked
    as part of an automated process. Having the wrong workspace selected can
    lead to destructive actions being performed on unintended resources.
    """
    await session_from_context(ctx).set_workspace(ctx, params.owner_id)
    return "Workspace selected"


@mcp_tool(
    "get_selected_workspace",
    GetSelectedWorkspaceParams,
    title="Get selected workspace",
    read_only=True,
    idempotent=True,
)
async def handle_get_selected_workspace(ctx, client, params):
    """Get the currently selected workspace."""
    workspace = await session_from_context(ctx).get_workspace(ctx)
    return f"The currently selected workspace is: {workspace}"
