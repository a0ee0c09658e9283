"""Deploy tools. Deploys are listed one page at a time; the caller drives the cursor."""

from render_mcp.client import ListDeploysParams, raise_for_response, unwrap_page

from . import schemas
from .registry import mcp_tool
from .services import get_service


@mcp_tool(
    "list_deploys",
    schemas.ListDeploysParams,
    title="List deploys",
    read_only=True,
    idempotent=True,
)
async def handle_list_deploys(ctx, client, params: schemas.ListDeploysParams):
    """
    List deploys matching the provided filters. If no filters are provided,
    all deploys for the service are returned.
    """
    resp = await client.list_deploys(
        ctx,
        params.service_id,
        ListDeploysParams(cursor=params.cursor, limit=params.limit),
    )
    raise_for_response(resp)
    deploys, cursor = unwrap_page(resp.parsed, "deploy")
    return {"deploys": deploys, "cursor": cursor or ""}


@mcp_tool(
    "get_deploy",
    schemas.GetDeployParams,
    title="Get deploy details",
    read_only=True,
    idempotent=True,
)
async def handle_get_deploy(ctx, client, params: schemas.GetDeployParams):
    """Retrieve the details of a particular deploy for a particular service."""
    resp = await client.retrieve_deploy(ctx, params.service_id, params.deploy_id)
    raise_for_response(resp)
    return resp.parsed


@mcp_tool(
    "trigger_deploy",
    schemas.TriggerDeployParams,
    title="Trigger deploy",
    destructive=False,
)
async def handle_trigger_deploy(ctx, client, params: schemas.TriggerDeployParams):
    """Trigger a new deploy of a service in the selected workspace."""
    await get_service(ctx, client, params.service_id)

    body = {"clearCache": "clear" if params.clear_cache else "do_not_clear"}
    if params.commit_id:
        body["commitId"] = params.commit_id
    if params.image_url:
        body["imageUrl"] = params.image_url

    resp = await client.create_deploy(ctx, params.service_id, body)
    raise_for_response(resp)
    return resp.parsed
