"""Key Value tools."""

from render_mcp.client import ListKeyValueParams, list_all, raise_for_response, unwrap_page
from render_mcp.logging_utils import get_logger
from render_mcp.session import session_from_context
from render_mcp.validate import workspace_matches

from . import schemas
from .registry import mcp_tool

logger = get_logger(__name__)


async def list_key_value(ctx, client):
    workspace = await session_from_context(ctx).get_workspace(ctx)
    params = ListKeyValueParams(owner_id=[workspace])

    async def list_page(ctx, params):
        resp = await client.list_key_value(ctx, params)
        raise_for_response(resp)
        return unwrap_page(resp.parsed, "keyValue")

    return await list_all(ctx, params, list_page)


@mcp_tool(
    "list_key_value",
    schemas.ListKeyValueParams,
    title="List Key Value instances",
    read_only=True,
    idempotent=True,
)
async def handle_list_key_value(ctx, client, params):
    """List the Key Value instances in the selected workspace."""
    return await list_key_value(ctx, client)


@mcp_tool(
    "get_key_value",
    schemas.GetKeyValueParams,
    title="Get Key Value details",
    read_only=True,
    idempotent=True,
)
async def handle_get_key_value(ctx, client, params: schemas.GetKeyValueParams):
    """Get details about a specific Key Value instance."""
    resp = await client.retrieve_key_value(ctx, params.key_value_id)
    raise_for_response(resp)
    await workspace_matches(ctx, resp.parsed.get("owner", {}).get("id", ""))
    return resp.parsed


@mcp_tool(
    "create_key_value",
    schemas.CreateKeyValueParams,
    title="Create Key Value instance",
)
async def handle_create_key_value(ctx, client, params: schemas.CreateKeyValueParams):
    """Create a new Key Value instance in the selected workspace."""
    owner_id = await session_from_context(ctx).get_workspace(ctx)
    body = {"name": params.name, "ownerId": owner_id, "plan": params.plan}
    if params.region:
        body["region"] = params.region
    if params.maxmemory_policy:
        body["maxmemoryPolicy"] = params.maxmemory_policy

    resp = await client.create_key_value(ctx, body)
    raise_for_response(resp)
    logger.info(f"Created Key Value '{params.name}' ({params.plan}) in workspace {owner_id}")
    return resp.parsed
