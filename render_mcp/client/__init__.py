"""
Render REST API client.

Usage:
    from render_mcp.client import RenderClient, raise_for_response

    async with RenderClient() as client:
        resp = await client.retrieve_service(ctx, service_id)
        raise_for_response(resp)
"""

from .client import APIResponse, RenderClient
from .errors import ErrorWithCode, error_from_response, first_error, raise_for_response
from .headers import add_headers
from .pagination import PAGE_LIMIT, PaginationParams, list_all, unwrap_page
from .params import (
    ListDeploysParams,
    ListEnvVarsParams,
    ListKeyValueParams,
    ListLogLabelValuesParams,
    ListLogsParams,
    ListOwnersParams,
    ListPostgresParams,
    ListServicesParams,
    MetricsParams,
)

__all__ = [
    "APIResponse",
    "RenderClient",
    "ErrorWithCode",
    "error_from_response",
    "first_error",
    "raise_for_response",
    "add_headers",
    "PAGE_LIMIT",
    "PaginationParams",
    "list_all",
    "unwrap_page",
    "ListDeploysParams",
    "ListEnvVarsParams",
    "ListKeyValueParams",
    "ListLogLabelValuesParams",
    "ListLogsParams",
    "ListOwnersParams",
    "ListPostgresParams",
    "ListServicesParams",
    "MetricsParams",
]
