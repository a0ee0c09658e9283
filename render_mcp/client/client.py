"""
Async client for the Render REST API.

Each method takes the per-call RequestContext (for the bearer token and the
forwarded connection metadata) and returns an APIResponse. Callers run the
response through ``error_from_response`` before touching ``parsed``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlencode, urljoin, urlsplit, urlunsplit

import httpx

from render_mcp.authn import api_token_from_context
from render_mcp.client.headers import add_headers
from render_mcp.client.params import (
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
from render_mcp.config import get_host
from render_mcp.context import RequestContext
from render_mcp.errors import BackendUnavailableError
from render_mcp.logging_utils import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass
class APIResponse:
    http_response: Optional[httpx.Response]
    body: bytes
    parsed: Any = None

    @property
    def status_code(self) -> int:
        return self.http_response.status_code if self.http_response is not None else 0


def _parse(response: httpx.Response) -> Any:
    if response.status_code >= 400 or not response.content:
        return None
    try:
        return json.loads(response.content)
    except ValueError:
        logger.warning(f"Non-JSON success body from {response.request.url}")
        return None


class RenderClient:
    """
    Usage:
        async with RenderClient() as client:
            resp = await client.list_services(ctx, params)
    """

    def __init__(
        self,
        host: Optional[str] = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.host = host or get_host()
        if not self.host.endswith("/"):
            self.host += "/"
        self._http = httpx.AsyncClient(
            base_url=self.host, timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> "RenderClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def auth_headers(self, ctx: RequestContext) -> httpx.Headers:
        return add_headers(ctx, httpx.Headers(), api_token_from_context(ctx))

    async def _request(
        self,
        ctx: RequestContext,
        method: str,
        path: str,
        *,
        params: Any = None,
        json_body: Any = None,
    ) -> APIResponse:
        headers = self.auth_headers(ctx)
        try:
            response = await self._http.request(
                method, path, params=params, json=json_body, headers=headers
            )
        except httpx.TransportError as e:
            raise BackendUnavailableError(f"Render API request failed: {e}") from e

        logger.debug(f"{method} {path} -> {response.status_code}")
        return APIResponse(
            http_response=response, body=response.content, parsed=_parse(response)
        )

    # --- Owners (workspaces) ---

    async def list_owners(self, ctx: RequestContext, params: ListOwnersParams) -> APIResponse:
        return await self._request(ctx, "GET", "owners", params=params.to_query())

    async def retrieve_owner(self, ctx: RequestContext, owner_id: str) -> APIResponse:
        return await self._request(ctx, "GET", f"owners/{owner_id}")

    # --- Services ---

    async def list_services(self, ctx: RequestContext, params: ListServicesParams) -> APIResponse:
        return await self._request(ctx, "GET", "services", params=params.to_query())

    async def retrieve_service(self, ctx: RequestContext, service_id: str) -> APIResponse:
        return await self._request(ctx, "GET", f"services/{service_id}")

    async def create_service(self, ctx: RequestContext, body: dict) -> APIResponse:
        return await self._request(ctx, "POST", "services", json_body=body)

    async def list_env_vars(
        self, ctx: RequestContext, service_id: str, params: ListEnvVarsParams
    ) -> APIResponse:
        return await self._request(
            ctx, "GET", f"services/{service_id}/env-vars", params=params.to_query()
        )

    async def update_env_vars(
        self, ctx: RequestContext, service_id: str, env_vars: list
    ) -> APIResponse:
        return await self._request(
            ctx, "PUT", f"services/{service_id}/env-vars", json_body=env_vars
        )

    # --- Deploys ---

    async def list_deploys(
        self, ctx: RequestContext, service_id: str, params: ListDeploysParams
    ) -> APIResponse:
        return await self._request(
            ctx, "GET", f"services/{service_id}/deploys", params=params.to_query()
        )

    async def retrieve_deploy(
        self, ctx: RequestContext, service_id: str, deploy_id: str
    ) -> APIResponse:
        return await self._request(ctx, "GET", f"services/{service_id}/deploys/{deploy_id}")

    async def create_deploy(
        self, ctx: RequestContext, service_id: str, body: dict
    ) -> APIResponse:
        return await self._request(
            ctx, "POST", f"services/{service_id}/deploys", json_body=body
        )

    # --- Postgres ---

    async def list_postgres(self, ctx: RequestContext, params: ListPostgresParams) -> APIResponse:
        return await self._request(ctx, "GET", "postgres", params=params.to_query())

    async def retrieve_postgres(self, ctx: RequestContext, postgres_id: str) -> APIResponse:
        return await self._request(ctx, "GET", f"postgres/{postgres_id}")

    async def retrieve_postgres_connection_info(
        self, ctx: RequestContext, postgres_id: str
    ) -> APIResponse:
        return await self._request(ctx, "GET", f"postgres/{postgres_id}/connection-info")

    async def create_postgres(self, ctx: RequestContext, body: dict) -> APIResponse:
        return await self._request(ctx, "POST", "postgres", json_body=body)

    # --- Key Value ---

    async def list_key_value(self, ctx: RequestContext, params: ListKeyValueParams) -> APIResponse:
        return await self._request(ctx, "GET", "key-value", params=params.to_query())

    async def retrieve_key_value(self, ctx: RequestContext, key_value_id: str) -> APIResponse:
        return await self._request(ctx, "GET", f"key-value/{key_value_id}")

    async def create_key_value(self, ctx: RequestContext, body: dict) -> APIResponse:
        return await self._request(ctx, "POST", "key-value", json_body=body)

    # --- Logs ---

    async def list_logs(self, ctx: RequestContext, params: ListLogsParams) -> APIResponse:
        return await self._request(ctx, "GET", "logs", params=params.to_query())

    async def list_log_label_values(
        self, ctx: RequestContext, params: ListLogLabelValuesParams
    ) -> APIResponse:
        return await self._request(ctx, "GET", "logs/values", params=params.to_query())

    def subscribe_logs_url(self, params: ListLogsParams) -> str:
        """Websocket URL of the log stream for ``params``."""
        url = urlsplit(urljoin(self.host, "logs/subscribe"))
        return urlunsplit(("wss", url.netloc, url.path, urlencode(params.to_query()), ""))

    # --- Metrics ---

    async def get_metrics(
        self, ctx: RequestContext, endpoint: str, params: MetricsParams
    ) -> APIResponse:
        """``endpoint`` is the path under metrics/, e.g. ``cpu`` or ``http-latency``."""
        return await self._request(ctx, "GET", f"metrics/{endpoint}", params=params.to_query())
