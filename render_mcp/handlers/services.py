"""Service tools."""

from render_mcp.client import (
    ListEnvVarsParams,
    ListServicesParams,
    list_all,
    raise_for_response,
    unwrap_page,
)
from render_mcp.logging_utils import get_logger
from render_mcp.session import session_from_context
from render_mcp.validate import workspace_matches

from . import schemas
from .registry import mcp_tool

logger = get_logger(__name__)


async def list_services(ctx, client, params: ListServicesParams):
    """Every service in the selected workspace."""
    workspace = await session_from_context(ctx).get_workspace(ctx)
    params.owner_id = [workspace]

    async def list_page(ctx, params):
        resp = await client.list_services(ctx, params)
        raise_for_response(resp)
        return unwrap_page(resp.parsed, "service")

    return await list_all(ctx, params, list_page)


async def get_service(ctx, client, service_id: str):
    """Fetch a service, refusing ones outside the selected workspace."""
    resp = await client.retrieve_service(ctx, service_id)
    raise_for_response(resp)
    service = resp.parsed
    await workspace_matches(ctx, service.get("ownerId", ""))
    return service


@mcp_tool(
    "list_services",
    schemas.ListServicesParams,
    title="List services",
    read_only=True,
    idempotent=True,
)
async def handle_list_services(ctx, client, params: schemas.ListServicesParams):
    """List all services in your Render account."""
    return await list_services(
        ctx, client, ListServicesParams(include_previews=params.include_previews)
    )


@mcp_tool(
    "get_service",
    schemas.GetServiceParams,
    title="Get service details",
    read_only=True,
    idempotent=True,
)
async def handle_get_service(ctx, client, params: schemas.GetServiceParams):
    """Get details about a specific service."""
    return await get_service(ctx, client, params.service_id)


async def create_service(ctx, client, params: schemas.CreateServiceParams, service_type: str, details: dict):
    """POST a new service owned by the selected workspace."""
    owner_id = await session_from_context(ctx).get_workspace(ctx)
    body = {
        "type": service_type,
        "name": params.name,
        "ownerId": owner_id,
        "serviceDetails": details,
    }
    if params.repo:
        body["repo"] = params.repo
    if params.branch:
        body["branch"] = params.branch
    if params.auto_deploy:
        body["autoDeploy"] = params.auto_deploy
    if params.env_vars is not None:
        body["envVars"] = [env_var.model_dump() for env_var in params.env_vars]

    resp = await client.create_service(ctx, body)
    raise_for_response(resp)
    logger.info(f"Created {service_type} '{params.name}' in workspace {owner_id}")
    return (resp.parsed or {}).get("service")


@mcp_tool(
    "create_web_service",
    schemas.CreateWebServiceParams,
    title="Create web service",
)
async def handle_create_web_service(ctx, client, params: schemas.CreateWebServiceParams):
    """
    Create a new web service in your Render account. A web service is a
    public-facing service that can be accessed by users on the internet. By
    default it deploys automatically when the branch is updated; only prompt
    the user to trigger a deploy if auto-deploy is disabled. Only a subset of
    the web service configuration is supported, and services using a
    container registry cannot be created here; use the Render Dashboard for
    those.
    """
    details = {
        "runtime": params.runtime,
        "envSpecificDetails": {
            "buildCommand": params.build_command,
            "startCommand": params.start_command,
        },
    }
    if params.plan:
        details["plan"] = params.plan
    if params.region:
        details["region"] = params.region
    return await create_service(ctx, client, params, "web_service", details)


@mcp_tool(
    "create_static_site",
    schemas.CreateStaticSiteParams,
    title="Create static site",
)
async def handle_create_static_site(ctx, client, params: schemas.CreateStaticSiteParams):
    """
    Create a new static site in your Render account. Static sites serve
    built assets (commonly HTML, CSS and JS) from a public onrender.com
    subdomain over a global CDN, e.g. apps built with Create React App, Vue.js
    or Gatsby. Only a subset of the static site configuration is supported;
    use the Render Dashboard for the rest.
    """
    details = {"buildCommand": params.build_command}
    if params.publish_path:
        details["publishPath"] = params.publish_path
    return await create_service(ctx, client, params, "static_site", details)


async def list_env_vars(ctx, client, service_id: str):
    async def list_page(ctx, params):
        resp = await client.list_env_vars(ctx, service_id, params)
        raise_for_response(resp)
        return unwrap_page(resp.parsed, "envVar")

    return await list_all(ctx, ListEnvVarsParams(), list_page)


def merge_env_vars(existing, updates):
    """Existing variables overlaid with ``updates``; new keys go last."""
    merged = {env_var["key"]: env_var.get("value", "") for env_var in existing if env_var}
    for env_var in updates:
        merged[env_var["key"]] = env_var["value"]
    return [{"key": key, "value": value} for key, value in merged.items()]


@mcp_tool(
    "update_environment_variables",
    schemas.UpdateEnvironmentVariablesParams,
    timeout=60.0,
    title="Update environment variables",
    destructive=True,
)
async def handle_update_environment_variables(
    ctx, client, params: schemas.UpdateEnvironmentVariablesParams
):
    """
    Update environment variables for a service. By default the variables
    passed in are merged with the service's existing ones, so existing values
    never need to be pulled into context. Set 'replace' to true to replace all
    existing environment variables. A deploy is triggered afterwards so the
    service picks up the change.
    """
    await get_service(ctx, client, params.service_id)

    updates = [env_var.model_dump() for env_var in params.env_vars]
    if params.replace:
        env_vars = updates
    else:
        env_vars = merge_env_vars(await list_env_vars(ctx, client, params.service_id), updates)

    resp = await client.update_env_vars(ctx, params.service_id, env_vars)
    raise_for_response(resp)

    deploy = await client.create_deploy(ctx, params.service_id, {})
    raise_for_response(deploy)

    return (
        "Environment variables updated. A new deploy has been triggered to pick up the changes.\n\n"
        "Response from deploying service: " + deploy.body.decode("utf-8", errors="replace")
    )
