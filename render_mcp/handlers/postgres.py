"""
Postgres tools.

query_render_postgres opens a fresh asyncpg connection per call from the
instance's external connection string and runs the SQL inside a read-only
transaction that is always rolled back.
"""

import asyncio

import asyncpg

from render_mcp.client import ListPostgresParams, list_all, raise_for_response, unwrap_page
from render_mcp.errors import DatabaseQueryError
from render_mcp.logging_utils import get_logger
from render_mcp.session import session_from_context
from render_mcp.validate import workspace_matches

from . import schemas
from .registry import mcp_tool

logger = get_logger(__name__)

CONNECT_TIMEOUT = 10.0


async def list_postgres(ctx, client):
    workspace = await session_from_context(ctx).get_workspace(ctx)
    params = ListPostgresParams(owner_id=[workspace])

    async def list_page(ctx, params):
        resp = await client.list_postgres(ctx, params)
        raise_for_response(resp)
        return unwrap_page(resp.parsed, "postgres")

    return await list_all(ctx, params, list_page)


async def get_postgres(ctx, client, postgres_id: str):
    resp = await client.retrieve_postgres(ctx, postgres_id)
    raise_for_response(resp)
    await workspace_matches(ctx, resp.parsed.get("owner", {}).get("id", ""))
    return resp.parsed


@mcp_tool(
    "list_postgres_instances",
    schemas.ListPostgresParams,
    title="List Postgres instances",
    read_only=True,
    idempotent=True,
)
async def handle_list_postgres_instances(ctx, client, params):
    """List the Postgres databases in the selected workspace."""
    return await list_postgres(ctx, client)


@mcp_tool(
    "get_postgres",
    schemas.GetPostgresParams,
    title="Get Postgres details",
    read_only=True,
    idempotent=True,
)
async def handle_get_postgres(ctx, client, params: schemas.GetPostgresParams):
    """Get details about a specific Postgres database."""
    return await get_postgres(ctx, client, params.postgres_id)


@mcp_tool(
    "create_postgres",
    schemas.CreatePostgresParams,
    title="Create Postgres instance",
)
async def handle_create_postgres(ctx, client, params: schemas.CreatePostgresParams):
    """Create a new Postgres instance in the selected workspace."""
    owner_id = await session_from_context(ctx).get_workspace(ctx)
    body = {"name": params.name, "ownerId": owner_id, "plan": params.plan}
    if params.region:
        body["region"] = params.region
    if params.version is not None:
        body["version"] = str(params.version)
    if params.disk_size_gb is not None:
        body["diskSizeGB"] = params.disk_size_gb

    resp = await client.create_postgres(ctx, body)
    raise_for_response(resp)
    logger.info(f"Created Postgres '{params.name}' ({params.plan}) in workspace {owner_id}")
    return resp.parsed


def _row_to_dict(record) -> dict:
    row = {}
    for column, value in dict(record).items():
        if isinstance(value, (bytes, bytearray)):
            value = value.decode("utf-8", errors="replace")
        row[column] = value
    return row


async def run_read_only_query(dsn: str, sql: str) -> list:
    """
    Run ``sql`` in a read-only transaction and return the rows as dicts.

    Raises:
        DatabaseQueryError: connecting or running the query failed
    """
    try:
        conn = await asyncpg.connect(dsn, timeout=CONNECT_TIMEOUT)
    except (
        OSError, ValueError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError
    ) as e:
        raise DatabaseQueryError(f"Error connecting to database: {e}") from e

    try:
        transaction = conn.transaction(readonly=True)
        await transaction.start()
        try:
            records = await conn.fetch(sql)
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            raise DatabaseQueryError(f"Error executing query: {e}") from e
        finally:
            await transaction.rollback()
    finally:
        await conn.close()

    return [_row_to_dict(record) for record in records]


@mcp_tool(
    "query_render_postgres",
    schemas.QueryPostgresParams,
    timeout=60.0,
    title="Query Postgres",
    read_only=True,
    idempotent=True,
)
async def handle_query_render_postgres(ctx, client, params: schemas.QueryPostgresParams):
    """
    Run a read-only SQL query against a Render-hosted Postgres database. A new
    connection is opened for each query and closed after it completes.
    """
    await get_postgres(ctx, client, params.postgres_id)

    resp = await client.retrieve_postgres_connection_info(ctx, params.postgres_id)
    raise_for_response(resp)
    dsn = (resp.parsed or {}).get("externalConnectionString")
    if not dsn:
        raise DatabaseQueryError(
            f"Postgres instance {params.postgres_id} has no external connection string"
        )

    return await run_read_only_query(dsn, params.sql)
